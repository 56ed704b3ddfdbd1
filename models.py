# models.py
from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base, engine


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)

    profile = relationship("SurveyProfile", back_populates="user", uselist=False)
    measurements = relationship("Measurement", back_populates="user")


class SurveyProfile(Base):
    __tablename__ = "survey_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    # all optional: the planner falls back to defaults
    sex = Column(String, nullable=True)                  # male / female
    exercise_frequency = Column(String, nullable=True)   # never ... very-often
    workout_goal = Column(String, nullable=True)         # lose-weight / build-muscle / ...

    user = relationship("User", back_populates="profile")

    def as_dict(self):
        return {
            "sex": self.sex,
            "exercise_frequency": self.exercise_frequency,
            "workout_goal": self.workout_goal,
        }


class Measurement(Base):
    __tablename__ = "measurements"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    date = Column(Date, nullable=False)
    body_fat_percentage = Column(Float, nullable=False)
    weight_kg = Column(Float, nullable=True)

    user = relationship("User", back_populates="measurements")


class WorkoutTracking(Base):
    __tablename__ = "workout_tracking"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    day_one = Column(Date, nullable=True)


class WorkoutEvent(Base):
    __tablename__ = "workout_events"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_workout_event_day"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)        # completed / missed
    workout_type = Column(String, nullable=True)   # focus label at the time


def init_db(bind=None):
    """Create all tables."""
    Base.metadata.create_all(bind=bind or engine)
