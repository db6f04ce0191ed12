"""API endpoints for completing and skipping program days."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from progressive.auth import get_current_owner
from progressive.database import get_db
from progressive.models.schemas import DayActionResponse, DayCompletionRequest, MaxTestRequest
from progressive.services.adaptation_engine import complete_workout_day
from progressive.services.exceptions import ProgressiveError
from progressive.services.program_service import skip_day
from progressive.services.rebase_handler import complete_test_day


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/program-days", tags=["program_days"])


@router.post("/{day_id}/complete", response_model=DayActionResponse)
async def complete_day(
    day_id: str,
    completion: DayCompletionRequest,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """
    Log a workout day's result and adapt the program.

    Args:
        day_id: Program day ID (must be a planned workout day)
        completion: Method-specific result payload

    Returns:
        DayActionResponse: Adaptation decision and the program's new state
    """
    try:
        outcome = complete_workout_day(db, owner_id, day_id, completion.result)
        return {
            "id": outcome.day.id,
            "status": outcome.day.status,
            "decision": outcome.adaptation.decision,
            "state": outcome.program.state,
        }

    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())
    except Exception:
        logger.exception("Failed to complete program day %s", day_id)
        raise HTTPException(status_code=500, detail="Failed to save result")


@router.post("/{day_id}/test", response_model=DayActionResponse)
async def complete_test(
    day_id: str,
    test: MaxTestRequest,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """
    Log a max-test and re-base the program from it.

    Args:
        day_id: Program day ID (must be a planned test day)
        test: The new max

    Returns:
        DayActionResponse: New state and number of days added to the schedule
    """
    try:
        outcome = complete_test_day(db, owner_id, day_id, test.test_max)
        return {
            "id": outcome.day.id,
            "status": outcome.day.status,
            "state": outcome.program.state,
            "days_created": outcome.days_created,
        }

    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())
    except Exception:
        logger.exception("Failed to save test for program day %s", day_id)
        raise HTTPException(status_code=500, detail="Failed to save test")


@router.post("/{day_id}/skip", response_model=DayActionResponse)
async def skip(
    day_id: str,
    db: Annotated[Session, Depends(get_db)],
    owner_id: Annotated[int, Depends(get_current_owner)],
):
    """Mark a planned day as skipped."""
    try:
        day = skip_day(db, owner_id, day_id)
        return {"id": day.id, "status": day.status}

    except ProgressiveError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_dict())
    except Exception:
        logger.exception("Failed to skip program day %s", day_id)
        raise HTTPException(status_code=500, detail="Failed to skip day")
