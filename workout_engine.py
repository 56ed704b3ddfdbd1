# workout_engine.py
"""
Rule-based monthly workout planner for FitPlan.

Input: survey profile dict with keys:
  sex ("male" / "female" / None),
  exercise_frequency ("never" / "rarely" / "sometimes" / "often" / "very-often"),
  workout_goal ("lose-weight" / "build-muscle" / "maintain" / "improve-fitness")
Any of them may be missing; documented defaults apply.

Output: monthly plan dict with:
  month, year, start_date, end_date,
  workouts (one dict per calendar day)

Plans are derived views. The only durable state is the DayOne anchor and
the completed/missed events, which are passed in as a snapshot.
"""

import logging
from datetime import timedelta

from catalog import build_exercises
from dates import (
    day_number as _day_number,
    day_of_week,
    enumerate_month,
    parse_date,
    today_utc,
    validate_month,
)

logger = logging.getLogger(__name__)

DEFAULT_FREQUENCY = "rarely"

WORKOUT_DAY_PATTERNS = {
    "never": frozenset({1, 5}),
    "rarely": frozenset({1, 3, 5}),
    "sometimes": frozenset({1, 3, 5, 6}),
    "often": frozenset({1, 2, 4, 5, 6}),
    "very-often": frozenset({1, 2, 3, 4, 5, 6}),
}

MUSCLE_ROTATION = ["Upper Body", "Lower Body", "Full Body", "Push", "Pull", "Legs"]

GOAL_FOCUS = {
    "lose-weight": "Cardio & Strength",
    "maintain": "Full Body Maintenance",
}
DEFAULT_FOCUS = "General Fitness"

WARMUP = [
    "5 min light cardio",
    "Dynamic stretching",
    "Mobility drills",
]

COOLDOWN = [
    "Static stretching",
    "5 min cool down walk",
    "Foam rolling (optional)",
]

DURATIONS = {
    "High": "60 minutes",
    "Medium": "45 minutes",
    "Low": "30 minutes",
}

SCHEDULED = "scheduled"
COMPLETED = "completed"
MISSED = "missed"


def _normalise(value):
    if value is None:
        return None
    return str(value).strip().lower().replace("_", "-") or None


def workout_days(frequency):
    """Weekday indices (0=Sunday) that carry a workout for this frequency."""
    return WORKOUT_DAY_PATTERNS.get(
        _normalise(frequency), WORKOUT_DAY_PATTERNS[DEFAULT_FREQUENCY]
    )


def _focus_for(goal, day_number):
    if goal == "build-muscle":
        return MUSCLE_ROTATION[(day_number - 1) % len(MUSCLE_ROTATION)]
    return GOAL_FOCUS.get(goal, DEFAULT_FOCUS)


def _intensity_for(goal, frequency):
    if goal == "lose-weight":
        return "High"
    if goal == "build-muscle":
        return "High" if frequency in ("often", "very-often") else "Medium"
    if goal == "maintain":
        return "Medium"
    return "Low"


def select_day_plan(day_number, day_of_week, frequency, goal):
    """
    Decide rest vs workout for one day.

    Type depends only on the weekday; focus only on the absolute day
    number, so two months assembled separately agree on every date.
    Without a DayOne anchor (day_number=None) day 1 is used.
    """
    if day_number is None:
        day_number = 1

    frequency = _normalise(frequency)
    goal = _normalise(goal)

    if day_of_week not in workout_days(frequency):
        return {"type": "rest"}

    return {
        "type": "workout",
        "focus": _focus_for(goal, day_number),
        "intensity": _intensity_for(goal, frequency),
    }


def build_daily_workout(day, day_number, selection):
    if selection["type"] != "workout":
        return {
            "date": day.isoformat(),
            "day_number": day_number,
            "title": "Rest Day",
            "type": "rest",
            "status": None,
            "completed": False,
            "missed": False,
        }

    focus = selection["focus"]
    intensity = selection["intensity"]
    if day_number is None:
        title = f"{focus} Workout"
    else:
        title = f"{focus} Workout - Day {day_number}"

    return {
        "date": day.isoformat(),
        "day_number": day_number,
        "title": title,
        "type": "workout",
        "focus": focus,
        "intensity": intensity,
        "duration": DURATIONS[intensity],
        "warmup": list(WARMUP),
        "exercises": build_exercises(focus, intensity),
        "cooldown": list(COOLDOWN),
        "status": SCHEDULED,
        "completed": False,
        "missed": False,
    }


def _apply_status(workout, day, completed_dates, missed_dates, today):
    if workout["type"] != "workout":
        if day in completed_dates or day in missed_dates:
            logger.warning("Ignoring adherence event on rest day %s", day)
        return

    number = workout["day_number"]
    if day in completed_dates:
        status = COMPLETED
    elif day in missed_dates:
        status = MISSED
    elif number is not None and number >= 1 and day < today:
        # lapsed day with no recorded event; not written back. Days before
        # DayOne and anchorless previews are never auto-missed
        status = MISSED
    else:
        status = SCHEDULED

    workout["status"] = status
    workout["completed"] = status == COMPLETED
    workout["missed"] = status == MISSED


def assemble_monthly_plan(
    day_one,
    year,
    month,
    profile,
    completed_dates=(),
    missed_dates=(),
    today=None,
):
    validate_month(year, month)
    day_one = parse_date(day_one) if day_one is not None else None
    today = parse_date(today) if today is not None else today_utc()
    completed_dates = {parse_date(d) for d in completed_dates}
    missed_dates = {parse_date(d) for d in missed_dates}

    profile = profile or {}
    frequency = profile.get("exercise_frequency")
    goal = profile.get("workout_goal")

    days = enumerate_month(year, month)
    workouts = []
    for day in days:
        number = _day_number(day_one, day) if day_one is not None else None
        selection = select_day_plan(number, day_of_week(day), frequency, goal)
        workout = build_daily_workout(day, number, selection)
        _apply_status(workout, day, completed_dates, missed_dates, today)
        workouts.append(workout)

    return {
        "month": month,
        "year": year,
        "start_date": days[0].isoformat(),
        "end_date": days[-1].isoformat(),
        "workouts": workouts,
    }


def build_plan_for_user(store, user_id, profile, year, month, today=None):
    """
    Assemble a month from one snapshot of the user's events.

    A failed read raises StoreUnavailable; the plan is never built from
    guessed empty event sets.
    """
    validate_month(year, month)
    snapshot = store.load_snapshot(user_id)
    return assemble_monthly_plan(
        snapshot["day_one"],
        year,
        month,
        profile,
        snapshot["completed"],
        snapshot["missed"],
        today=today,
    )


def summarize_adherence(plan):
    workouts = [w for w in plan["workouts"] if w["type"] == "workout"]
    completed = sum(1 for w in workouts if w["status"] == COMPLETED)
    missed = sum(1 for w in workouts if w["status"] == MISSED)
    decided = completed + missed

    return {
        "workout_days": len(workouts),
        "rest_days": len(plan["workouts"]) - len(workouts),
        "completed": completed,
        "missed": missed,
        "scheduled": len(workouts) - decided,
        "completion_rate": round(completed / decided, 2) if decided else None,
    }


def daily_streak(measurement_dates, today=None):
    """
    Consecutive days with a logged measurement, ending at the latest log.

    The streak is broken (0) once the latest log is older than yesterday.
    Several logs on one day count once.
    """
    today = parse_date(today) if today is not None else today_utc()
    days = sorted({parse_date(d) for d in measurement_dates}, reverse=True)
    if not days or days[0] < today - timedelta(days=1):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1
    return streak
