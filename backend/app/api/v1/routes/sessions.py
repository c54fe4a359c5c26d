"""
Training session endpoints.

Endpoints:
- POST   /sessions        - Log a manual session
- GET    /sessions        - List sessions in a date range
- GET    /sessions/{id}   - Get one session
- PUT    /sessions/{id}   - Replace a manual session
- DELETE /sessions/{id}   - Delete a manual session

Sessions imported from Strava are owned by webhook sync and cannot be
edited or deleted here.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.sessions import (
    SessionCreate,
    SessionRepository,
    SessionResponse,
    TrainingSession,
)
from app.shared.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])

DATE_FORMAT = "%Y-%m-%d"


def _parse_day(value: str, field: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {field}, expected YYYY-MM-DD"
        )


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


async def _get_manual_session(
    session_id: int,
    repo: SessionRepository
) -> TrainingSession:
    session = await repo.get_by_id(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.is_external:
        raise HTTPException(
            status_code=409,
            detail="Session is managed by Strava sync"
        )
    return session


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: SessionCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """Log a manual training session."""
    repo = SessionRepository(db)
    session = await repo.create_manual(
        date=request.date,
        distance=request.distance,
        duration=request.duration,
        notes=request.notes,
    )
    await db.commit()

    logger.info(f"Created manual session {session.id}: {session.distance} km")
    return session


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, default one month ago"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, default today"),
    db: AsyncSession = Depends(get_async_db)
):
    """List sessions between two days (inclusive), newest first."""
    today = utcnow().date()
    end_day = _parse_day(end_date, "end_date") if end_date else today
    start_day = (
        _parse_day(start_date, "start_date") if start_date
        else _one_month_before(today)
    )

    start = datetime.combine(start_day, time.min)
    # Whole end day is included
    end = datetime.combine(end_day, time.min) + timedelta(days=1) - timedelta(microseconds=1)

    repo = SessionRepository(db)
    return await repo.get_in_range(start, end)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: int,
    db: AsyncSession = Depends(get_async_db)
):
    session = await SessionRepository(db).get_by_id(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: int,
    request: SessionCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """Replace the fields of a manual session."""
    repo = SessionRepository(db)
    session = await _get_manual_session(session_id, repo)

    session = await repo.update_fields(
        session,
        date=request.date,
        distance=request.distance,
        duration=request.duration,
        notes=request.notes,
    )
    await db.commit()

    logger.info(f"Updated manual session {session_id}")
    return session


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: int,
    db: AsyncSession = Depends(get_async_db)
):
    repo = SessionRepository(db)
    session = await _get_manual_session(session_id, repo)

    await repo.delete(session)
    await db.commit()

    logger.info(f"Deleted manual session {session_id}")
    return Response(status_code=204)
