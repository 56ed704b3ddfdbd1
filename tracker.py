# tracker.py
"""
Adherence tracking: completed / missed marks per date and the DayOne anchor.

The tracker keeps an in-memory copy of what the store holds. It is only
updated after the store write succeeds, so a failed write leaves it as it
was and the StoreUnavailable error reaches the caller.
"""

import logging

from dates import day_one_from_measurements, parse_date

logger = logging.getLogger(__name__)


class AdherenceTracker:
    def __init__(self, store, user_id):
        self.store = store
        self.user_id = user_id
        self.completed_dates = set()
        self.missed_dates = set()
        self.day_one = None

    def load(self):
        snapshot = self.store.load_snapshot(self.user_id)
        self.day_one = snapshot["day_one"]
        self.completed_dates = set(snapshot["completed"])
        self.missed_dates = set(snapshot["missed"])
        return self

    def status_for(self, day):
        day = parse_date(day)
        if day in self.completed_dates:
            return "completed"
        if day in self.missed_dates:
            return "missed"
        return None

    def mark_completed(self, day, workout_type=None):
        # never anchors DayOne; that comes from measurements only
        day = parse_date(day)
        self.store.set_completed(self.user_id, day, workout_type)
        self.completed_dates.add(day)
        self.missed_dates.discard(day)

    def mark_missed(self, day, workout_type=None):
        day = parse_date(day)
        self.store.set_missed(self.user_id, day, workout_type)
        self.missed_dates.add(day)
        self.completed_dates.discard(day)

    def establish_day_one(self, day):
        """
        Anchor DayOne if it is not set yet and return the anchor in effect.

        An existing anchor is never overwritten; callers racing to set it
        from the same first measurement all end up with the stored value.
        """
        day = parse_date(day)
        anchor = self.store.set_day_one(self.user_id, day)
        if anchor != day:
            logger.info(
                "Day one already set to %s for user %s; keeping it", anchor, self.user_id
            )
        self.day_one = anchor
        return anchor

    def establish_day_one_from_measurements(self, measurements):
        first = day_one_from_measurements(measurements)
        if first is None:
            return self.day_one
        return self.establish_day_one(first)

    def record_measurement(self, day, body_fat_percentage, weight_kg=None):
        """Store a measurement; anchors DayOne in the same write if it is unset."""
        day = parse_date(day)
        self.day_one = self.store.add_measurement(
            self.user_id, day, body_fat_percentage, weight_kg
        )
        return self.day_one

    def reset_day_one(self):
        self.store.clear_day_one(self.user_id)
        self.day_one = None
