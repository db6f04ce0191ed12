"""API endpoints for progressive program management."""
from __future__ import annotations

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from progressive.auth import get_current_owner
from progressive.database import get_db
from progressive.models.schemas import (
    ProgramCreate,
    ProgramCreatedResponse,
    ProgramListResponse,
    ProgramWithDays,
    TodayResponse,
)
from progressive.services import program_service
from progressive.services.exceptions import ProgressiveError
from progressive.services.today_resolver import resolve_today


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["progressive_programs"])


@router.post("/progressive-programs", response_model=ProgramCreatedResponse, status_code=201)
async def create_program(
    program_request: ProgramCreate,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """
    Create a progressive program and generate its first 28 days.

    Args:
        program_request: Exercise, method, test max and weekly schedule

    Returns:
        ProgramCreatedResponse: The new program and how many days were generated
    """
    try:
        program, days_created = program_service.create_program(db, owner_id, program_request)
        return {"program": program, "days_created": days_created}

    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())
    except Exception:
        logger.exception("Failed to create progressive program")
        raise HTTPException(status_code=500, detail="Failed to create program")


@router.get("/progressive-programs", response_model=ProgramListResponse)
async def list_programs(
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """List the caller's programs, active ones first."""
    programs = program_service.list_programs(db, owner_id)
    return {"programs": programs}


@router.get("/progressive-programs/{program_id}", response_model=ProgramWithDays)
async def get_program(
    program_id: str,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
    start: Annotated[date | None, Query(alias="from")] = None,
    end: Annotated[date | None, Query(alias="to")] = None,
):
    """
    Get a program with its scheduled days.

    Args:
        program_id: Program ID
        start: First date to include (default today, UTC)
        end: Last date to include (default unbounded)

    Returns:
        ProgramWithDays: Program with days sorted by date
    """
    if start is not None and end is not None and end < start:
        raise HTTPException(status_code=400, detail="'to' must not be before 'from'")

    try:
        program, days = program_service.get_program(db, owner_id, program_id, start, end)
    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())

    logger.info("Retrieved program: id=%s, days=%d", program.id, len(days))
    return {"program": program, "days": days}


@router.post("/progressive-programs/{program_id}/deactivate")
async def deactivate_program(
    program_id: str,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
) -> dict:
    """
    Deactivate a program (soft delete).

    Args:
        program_id: Program ID to deactivate

    Returns:
        dict: Confirmation with the program ID
    """
    try:
        program_service.deactivate_program(db, owner_id, program_id)
        return {"ok": True, "id": program_id}

    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())
    except Exception:
        logger.exception("Failed to deactivate program %s", program_id)
        raise HTTPException(status_code=500, detail="Failed to deactivate program")


@router.get("/today", response_model=TodayResponse)
async def get_today(
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """Return today's most relevant program day, or kind "none"."""
    resolved = resolve_today(db, owner_id)
    if resolved is None:
        return {"kind": "none"}

    day, program = resolved
    return {"kind": "program_day", "program_day": day, "program": program}
