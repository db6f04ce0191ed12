"""Pick the single program day a user should act on today."""
from __future__ import annotations

from datetime import date

from sqlalchemy import case
from sqlalchemy.orm import Session

from progressive.models.database_models import Program, ProgramDay
from progressive.models.plans import DAY_TEST, DAY_WORKOUT
from progressive.services.day_generator import utc_today


def resolve_today(
    db: Session,
    owner_id: int,
    today: date | None = None,
) -> tuple[ProgramDay, Program] | None:
    """
    Return today's most relevant day across the owner's active programs.

    Test days beat workouts, workouts beat rest; among equals the most
    recently created program wins. Returns None when nothing is scheduled,
    including when a program's window has run out before today.
    """
    target = today or utc_today()
    priority = case(
        (ProgramDay.day_type == DAY_TEST, 0),
        (ProgramDay.day_type == DAY_WORKOUT, 1),
        else_=2,
    )
    row = (
        db.query(ProgramDay, Program)
        .join(Program, ProgramDay.program_id == Program.id)
        .filter(
            Program.owner_id == owner_id,
            Program.active.is_(True),
            ProgramDay.date == target,
        )
        .order_by(priority, Program.created_at.desc())
        .first()
    )
    if row is None:
        return None
    day, program = row
    return day, program
