import logging
import os
from functools import wraps

from flask import Flask, jsonify, request, send_file, session
from flask_bcrypt import Bcrypt
from sqlalchemy.exc import IntegrityError

from database import SessionLocal
from dates import day_number, day_of_week, parse_date, today_utc
from errors import InvalidInput, RestDay, StoreUnavailable
from event_store import WorkoutEventStore
from models import SurveyProfile, User, init_db
from plan_export import render_plan_pdf
from tracker import AdherenceTracker
from workout_engine import (
    WORKOUT_DAY_PATTERNS,
    build_plan_for_user,
    daily_streak,
    select_day_plan,
    summarize_adherence,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("FITPLAN_SECRET_KEY", "supersecretkey")  # change in real app
bcrypt = Bcrypt(app)

# Initialize DB
init_db()

event_store = WorkoutEventStore(SessionLocal)

SEX_VALUES = ("male", "female")
GOAL_VALUES = ("lose-weight", "build-muscle", "maintain", "improve-fitness")


# ---------------------------------------------------------
# Helper functions
# ---------------------------------------------------------
def get_current_user():
    user_id = session.get("user_id")
    if not user_id:
        return None
    db = SessionLocal()
    user = db.query(User).filter_by(id=user_id).first()
    db.close()
    return user


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        user = get_current_user()
        if not user:
            return jsonify({"error": "Login required."}), 401
        return f(user, *args, **kwargs)

    return wrapper


def request_data():
    return request.get_json(silent=True) or request.form.to_dict()


def get_profile_dict(user_id):
    db = SessionLocal()
    profile = db.query(SurveyProfile).filter_by(user_id=user_id).first()
    db.close()
    return profile.as_dict() if profile else {}


def get_tracker(user_id):
    return AdherenceTracker(event_store, user_id).load()


def _choice(data, key, allowed):
    value = data.get(key)
    if value in (None, ""):
        return None
    value = str(value).strip().lower().replace("_", "-")
    if value not in allowed:
        raise InvalidInput(f"{key} must be one of {', '.join(allowed)}")
    return value


@app.errorhandler(InvalidInput)
def handle_invalid_input(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(StoreUnavailable)
def handle_store_unavailable(e):
    logger.warning("Store unavailable: %s", e)
    return jsonify({"error": "Workout data is temporarily unavailable.", "retry": True}), 503


# ---------------------------------------------------------
# Account
# ---------------------------------------------------------
@app.route("/register", methods=["POST"])
def register():
    data = request_data()
    name = data.get("name")
    email = data.get("email")
    password = data.get("password")
    if not (name and email and password):
        raise InvalidInput("name, email and password are required")

    hashed = bcrypt.generate_password_hash(password).decode("utf-8")

    db = SessionLocal()
    new_user = User(name=name, email=email, password_hash=hashed)
    db.add(new_user)
    try:
        db.commit()
        return jsonify({"id": new_user.id, "name": name, "email": email}), 201
    except IntegrityError:
        db.rollback()
        return jsonify({"error": "Email already exists."}), 409
    finally:
        db.close()


@app.route("/login", methods=["POST"])
def login():
    data = request_data()
    email = data.get("email")
    password = data.get("password") or ""

    db = SessionLocal()
    user = db.query(User).filter_by(email=email).first()
    db.close()

    if user and bcrypt.check_password_hash(user.password_hash, password):
        session["user_id"] = user.id
        return jsonify({"id": user.id, "name": user.name})
    return jsonify({"error": "Invalid credentials."}), 401


@app.route("/logout", methods=["POST"])
def logout():
    session.pop("user_id", None)
    return jsonify({"ok": True})


# ---------------------------------------------------------
# Survey profile & measurements
# ---------------------------------------------------------
@app.route("/profile", methods=["GET", "POST"])
@login_required
def profile(user):
    if request.method == "GET":
        return jsonify(get_profile_dict(user.id))

    data = request_data()
    sex = _choice(data, "sex", SEX_VALUES)
    frequency = _choice(data, "exercise_frequency", tuple(WORKOUT_DAY_PATTERNS))
    goal = _choice(data, "workout_goal", GOAL_VALUES)

    db = SessionLocal()
    profile = db.query(SurveyProfile).filter_by(user_id=user.id).first()
    if profile:
        profile.sex = sex
        profile.exercise_frequency = frequency
        profile.workout_goal = goal
    else:
        profile = SurveyProfile(
            user_id=user.id,
            sex=sex,
            exercise_frequency=frequency,
            workout_goal=goal,
        )
        db.add(profile)

    db.commit()
    result = profile.as_dict()
    db.close()
    return jsonify(result)


@app.route("/measurements", methods=["GET"])
@login_required
def list_measurements(user):
    today = parse_date(request.args["today"]) if request.args.get("today") else None
    history = event_store.get_measurements(user.id)
    return jsonify(
        {
            "measurements": [dict(m, date=m["date"].isoformat()) for m in history],
            "streak": daily_streak([m["date"] for m in history], today=today),
        }
    )


@app.route("/measurements", methods=["POST"])
@login_required
def add_measurement(user):
    data = request_data()
    day = parse_date(data["date"]) if data.get("date") else today_utc()
    try:
        body_fat = float(data["body_fat_percentage"])
        weight = float(data["weight_kg"]) if data.get("weight_kg") else None
    except (KeyError, TypeError, ValueError):
        raise InvalidInput("body_fat_percentage must be a number")
    if not 0 < body_fat < 100:
        raise InvalidInput(f"body_fat_percentage must be between 0 and 100, got {body_fat}")

    # one transaction; backfilled earlier measurements never move the anchor
    tracker = AdherenceTracker(event_store, user.id)
    day_one = tracker.record_measurement(day, body_fat, weight)

    return jsonify({"date": day.isoformat(), "day_one": day_one.isoformat()}), 201


@app.route("/day-one/reset", methods=["POST"])
@login_required
def reset_day_one(user):
    tracker = get_tracker(user.id)
    tracker.reset_day_one()
    return jsonify({"day_one": None})


# ---------------------------------------------------------
# Monthly plan
# ---------------------------------------------------------
def _month_plan(user, year, month):
    today = parse_date(request.args["today"]) if request.args.get("today") else None
    return build_plan_for_user(
        event_store, user.id, get_profile_dict(user.id), year, month, today=today
    )


@app.route("/plan/<int:year>/<int:month>")
@login_required
def monthly_plan(user, year, month):
    plan = _month_plan(user, year, month)
    plan["summary"] = summarize_adherence(plan)
    return jsonify(plan)


@app.route("/plan/<int:year>/<int:month>/pdf")
@login_required
def download_plan(user, year, month):
    plan = _month_plan(user, year, month)
    buffer = render_plan_pdf(plan, user.name)
    return send_file(
        buffer,
        as_attachment=True,
        download_name=f"fitplan_{year}_{month:02d}.pdf",
        mimetype="application/pdf",
    )


# ---------------------------------------------------------
# Adherence
# ---------------------------------------------------------
def _workout_type(user, tracker, day):
    """Focus planned for the day; rest days cannot be marked."""
    number = day_number(tracker.day_one, day) if tracker.day_one is not None else None
    profile = get_profile_dict(user.id)
    selection = select_day_plan(
        number,
        day_of_week(day),
        profile.get("exercise_frequency"),
        profile.get("workout_goal"),
    )
    if selection["type"] != "workout":
        raise RestDay(day)
    return selection["focus"]


@app.errorhandler(RestDay)
def handle_rest_day(e):
    return jsonify({"error": str(e), "date": e.day.isoformat(), "status": None}), 409


@app.route("/workouts/<day>/complete", methods=["POST"])
@login_required
def complete_workout(user, day):
    day = parse_date(day)
    tracker = get_tracker(user.id)
    tracker.mark_completed(day, _workout_type(user, tracker, day))
    return jsonify({"date": day.isoformat(), "status": tracker.status_for(day)})


@app.route("/workouts/<day>/missed", methods=["POST"])
@login_required
def miss_workout(user, day):
    day = parse_date(day)
    tracker = get_tracker(user.id)
    tracker.mark_missed(day, _workout_type(user, tracker, day))
    return jsonify({"date": day.isoformat(), "status": tracker.status_for(day)})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
