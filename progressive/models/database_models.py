"""SQLAlchemy ORM models for progressive programs and their scheduled days."""
import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from progressive.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Program(Base):
    """A user's progressive-overload program for one exercise and one method."""

    __tablename__ = "progressive_programs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    exercise_key: Mapped[str] = mapped_column(String(20), nullable=False)  # burpees, pushups, pullups
    method: Mapped[str] = mapped_column(String(20), nullable=False)  # submax, ladder
    test_max: Mapped[int] = mapped_column(Integer, nullable=False)

    # {"days_per_week": 3, "preferred_days": ["Mon", "Wed", "Fri"], "test_every_weeks": 4}
    schedule: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {"method": "submax", "work_reps": 8} or {"method": "ladder", "top": 5}
    state: Mapped[dict] = mapped_column(JSON, nullable=False)

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    days: Mapped[list["ProgramDay"]] = relationship(
        "ProgramDay",
        back_populates="program",
        cascade="all, delete-orphan",
        order_by="ProgramDay.date",
    )

    __table_args__ = (
        Index("ix_progressive_programs_owner_active", "owner_id", "active"),
    )


class ProgramDay(Base):
    """One calendar day of a program: rest, workout or test."""

    __tablename__ = "progressive_program_days"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    program_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("progressive_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    day_type: Mapped[str] = mapped_column(String(10), nullable=False)  # rest, workout, test
    plan: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Completion tracking
    status: Mapped[str] = mapped_column(String(10), default="planned", nullable=False)  # planned, done, skipped
    result: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    program: Mapped["Program"] = relationship("Program", back_populates="days")

    __table_args__ = (
        UniqueConstraint("program_id", "date", name="uq_progressive_program_days_program_date"),
    )
