# event_store.py
"""
SQLAlchemy-backed store for adherence events and the DayOne anchor.

One workout_events row per (user, date) holds either "completed" or
"missed", so writing one status replaces the other inside a single
transaction. Any database failure is rolled back and surfaced as
StoreUnavailable.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import SessionLocal
from errors import StoreUnavailable
from models import Measurement, WorkoutEvent, WorkoutTracking

logger = logging.getLogger(__name__)

COMPLETED = "completed"
MISSED = "missed"


class WorkoutEventStore:
    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    # -------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------
    def _dates_with_status(self, db, user_id, status):
        rows = (
            db.query(WorkoutEvent.date)
            .filter_by(user_id=user_id, status=status)
            .all()
        )
        return {row.date for row in rows}

    def _day_one(self, db, user_id):
        tracking = db.get(WorkoutTracking, user_id)
        return tracking.day_one if tracking else None

    def _read(self, what, fn):
        db = self.session_factory()
        try:
            return fn(db)
        except SQLAlchemyError as e:
            logger.exception("Failed to read %s", what)
            raise StoreUnavailable(f"Could not read {what}: {e}") from e
        finally:
            db.close()

    def get_completed_dates(self, user_id):
        return self._read(
            "completed workouts",
            lambda db: self._dates_with_status(db, user_id, COMPLETED),
        )

    def get_missed_dates(self, user_id):
        return self._read(
            "missed workouts",
            lambda db: self._dates_with_status(db, user_id, MISSED),
        )

    def get_day_one(self, user_id):
        return self._read("day one", lambda db: self._day_one(db, user_id))

    def load_snapshot(self, user_id):
        """Anchor and both event sets, read in one session."""

        def snapshot(db):
            return {
                "day_one": self._day_one(db, user_id),
                "completed": self._dates_with_status(db, user_id, COMPLETED),
                "missed": self._dates_with_status(db, user_id, MISSED),
            }

        return self._read("workout tracking", snapshot)

    # -------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------
    def _write(self, what, fn):
        db = self.session_factory()
        try:
            result = fn(db)
            db.commit()
            return result
        except IntegrityError:
            # lost an insert race on a unique key: retry once against the winner
            db.rollback()
            try:
                result = fn(db)
                db.commit()
                return result
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Failed to write %s", what)
                raise StoreUnavailable(f"Could not write {what}: {e}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to write %s", what)
            raise StoreUnavailable(f"Could not write {what}: {e}") from e
        finally:
            db.close()

    def _set_status(self, user_id, day, status, workout_type):
        def upsert(db):
            event = db.query(WorkoutEvent).filter_by(user_id=user_id, date=day).first()
            if event:
                event.status = status
                event.workout_type = workout_type
            else:
                db.add(
                    WorkoutEvent(
                        user_id=user_id,
                        date=day,
                        status=status,
                        workout_type=workout_type,
                    )
                )
                db.flush()

        self._write(f"{status} workout for {day}", upsert)

    def set_completed(self, user_id, day, workout_type=None):
        self._set_status(user_id, day, COMPLETED, workout_type)

    def set_missed(self, user_id, day, workout_type=None):
        self._set_status(user_id, day, MISSED, workout_type)

    def set_day_one(self, user_id, day):
        """Set the anchor if unset. Returns the anchor in effect afterwards."""

        def anchor(db):
            tracking = db.get(WorkoutTracking, user_id)
            if tracking is None:
                db.add(WorkoutTracking(user_id=user_id, day_one=day))
                db.flush()
                return day
            if tracking.day_one is None:
                tracking.day_one = day
                return day
            return tracking.day_one

        return self._write("day one", anchor)

    def clear_day_one(self, user_id):
        def clear(db):
            tracking = db.get(WorkoutTracking, user_id)
            if tracking is not None:
                tracking.day_one = None

        self._write("day one reset", clear)

    # -------------------------------------------------------------
    # Measurements
    # -------------------------------------------------------------
    def get_measurements(self, user_id):
        def history(db):
            rows = (
                db.query(Measurement)
                .filter_by(user_id=user_id)
                .order_by(Measurement.date, Measurement.id)
                .all()
            )
            return [
                {
                    "date": m.date,
                    "body_fat_percentage": m.body_fat_percentage,
                    "weight_kg": m.weight_kg,
                }
                for m in rows
            ]

        return self._read("measurements", history)

    def add_measurement(self, user_id, day, body_fat_percentage, weight_kg=None):
        """
        Store a measurement and anchor DayOne in the same transaction.

        The anchor goes to the earliest measurement on record, and only if
        no anchor is set. Returns the anchor in effect afterwards. If either
        step fails nothing is written.
        """

        def record(db):
            db.add(
                Measurement(
                    user_id=user_id,
                    date=day,
                    body_fat_percentage=body_fat_percentage,
                    weight_kg=weight_kg,
                )
            )
            db.flush()

            tracking = db.get(WorkoutTracking, user_id)
            if tracking is not None and tracking.day_one is not None:
                return tracking.day_one

            earliest = (
                db.query(Measurement.date)
                .filter_by(user_id=user_id)
                .order_by(Measurement.date)
                .first()
                .date
            )
            if tracking is None:
                db.add(WorkoutTracking(user_id=user_id, day_one=earliest))
                db.flush()
            else:
                tracking.day_one = earliest
            return earliest

        return self._write(f"measurement for {day}", record)
