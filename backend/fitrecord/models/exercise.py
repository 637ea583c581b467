from datetime import datetime
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Boolean, Integer, DateTime, Enum as SAEnum
from fitrecord.db import Base, utcnow
from fitrecord.models.client import new_id

class MuscleGroup(str, Enum):
    chest = "chest"
    shoulders = "shoulders"
    triceps = "triceps"
    back = "back"
    biceps = "biceps"
    legs = "legs"
    core = "core"
    cardio = "cardio"
    full_body = "full_body"

class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    muscle_group: Mapped[MuscleGroup] = mapped_column(
        SAEnum(MuscleGroup, name="muscle_group"), nullable=False, index=True
    )
    is_bodyweight: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # None means "use the trainer's global rest duration"
    default_rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    workout_exercises = relationship(
        "WorkoutExercise", back_populates="exercise", cascade="all, delete-orphan", passive_deletes=True
    )
