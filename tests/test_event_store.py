"""Tests for the SQLAlchemy event store."""
from datetime import date

import pytest

from errors import StoreUnavailable
from models import WorkoutEvent, WorkoutTracking

DAY = date(2024, 3, 6)


class TestEvents:
    def test_empty_user(self, store):
        snapshot = store.load_snapshot(42)
        assert snapshot == {"day_one": None, "completed": set(), "missed": set()}

    def test_completed_then_missed(self, store):
        store.set_completed(1, DAY, "Full Body")
        store.set_missed(1, DAY, "Full Body")

        assert store.get_completed_dates(1) == set()
        assert store.get_missed_dates(1) == {DAY}

    def test_missed_then_completed(self, store):
        store.set_missed(1, DAY)
        store.set_completed(1, DAY)

        assert store.get_completed_dates(1) == {DAY}
        assert store.get_missed_dates(1) == set()

    def test_one_row_per_day(self, store, session_factory):
        store.set_completed(1, DAY)
        store.set_missed(1, DAY)
        store.set_missed(1, DAY)

        db = session_factory()
        rows = db.query(WorkoutEvent).filter_by(user_id=1).all()
        db.close()
        assert len(rows) == 1
        assert rows[0].status == "missed"

    def test_users_are_isolated(self, store):
        store.set_completed(1, DAY)
        store.set_missed(2, DAY)

        assert store.get_completed_dates(1) == {DAY}
        assert store.get_missed_dates(1) == set()
        assert store.get_missed_dates(2) == {DAY}

    def test_workout_type_is_recorded(self, store, session_factory):
        store.set_completed(1, DAY, "Push")

        db = session_factory()
        event = db.query(WorkoutEvent).filter_by(user_id=1, date=DAY).one()
        db.close()
        assert event.workout_type == "Push"


class TestDayOne:
    def test_set_once(self, store):
        assert store.set_day_one(1, date(2024, 3, 4)) == date(2024, 3, 4)
        assert store.set_day_one(1, date(2024, 2, 1)) == date(2024, 3, 4)
        assert store.get_day_one(1) == date(2024, 3, 4)

    def test_clear_then_set(self, store):
        store.set_day_one(1, date(2024, 3, 4))
        store.clear_day_one(1)
        assert store.get_day_one(1) is None

        assert store.set_day_one(1, date(2024, 5, 1)) == date(2024, 5, 1)

    def test_clear_without_anchor(self, store):
        store.clear_day_one(7)
        assert store.get_day_one(7) is None


class TestFailures:
    def test_reads_raise_store_unavailable(self, broken_store):
        with pytest.raises(StoreUnavailable):
            broken_store.load_snapshot(1)
        with pytest.raises(StoreUnavailable):
            broken_store.get_completed_dates(1)
        with pytest.raises(StoreUnavailable):
            broken_store.get_day_one(1)

    def test_writes_raise_store_unavailable(self, broken_store):
        with pytest.raises(StoreUnavailable):
            broken_store.set_completed(1, DAY)
        with pytest.raises(StoreUnavailable):
            broken_store.set_day_one(1, DAY)


class TestMeasurements:
    def test_first_measurement_anchors_day_one(self, store):
        assert store.add_measurement(1, date(2024, 3, 4), 21.5) == date(2024, 3, 4)
        assert store.get_day_one(1) == date(2024, 3, 4)

    def test_backfill_keeps_anchor(self, store):
        store.add_measurement(1, date(2024, 3, 4), 21.5)
        assert store.add_measurement(1, date(2024, 2, 20), 22.0) == date(2024, 3, 4)

    def test_reanchors_to_earliest_after_reset(self, store):
        store.add_measurement(1, date(2024, 3, 4), 21.5)
        store.clear_day_one(1)
        assert store.add_measurement(1, date(2024, 3, 10), 21.0) == date(2024, 3, 4)

    def test_history_is_sorted(self, store):
        store.add_measurement(1, date(2024, 3, 10), 20.0, 80.5)
        store.add_measurement(1, date(2024, 3, 4), 21.5)
        store.add_measurement(2, date(2024, 3, 1), 30.0)

        history = store.get_measurements(1)
        assert [m["date"] for m in history] == [date(2024, 3, 4), date(2024, 3, 10)]
        assert history[1] == {
            "date": date(2024, 3, 10),
            "body_fat_percentage": 20.0,
            "weight_kg": 80.5,
        }

    def test_failed_anchor_writes_nothing(self, store, engine):
        WorkoutTracking.__table__.drop(engine)

        with pytest.raises(StoreUnavailable):
            store.add_measurement(1, date(2024, 3, 4), 21.5)
        assert store.get_measurements(1) == []
