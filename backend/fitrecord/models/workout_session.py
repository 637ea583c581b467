from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from fitrecord.db import Base, utcnow
from fitrecord.models.client import new_id

class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    client_links = relationship(
        "WorkoutSessionClient", back_populates="session", cascade="all, delete-orphan", passive_deletes=True
    )
    workout_exercises = relationship(
        "WorkoutExercise", back_populates="session", cascade="all, delete-orphan", passive_deletes=True
    )

class WorkoutSessionClient(Base):
    __tablename__ = "workout_session_clients"
    __table_args__ = (UniqueConstraint("workout_session_id", "client_id", name="uq_session_client"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    workout_session_id: Mapped[str] = mapped_column(
        ForeignKey("workout_sessions.id", ondelete="CASCADE"), index=True
    )
    client_id: Mapped[str] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    session = relationship("WorkoutSession", back_populates="client_links")
    client = relationship("Client", back_populates="session_links")
