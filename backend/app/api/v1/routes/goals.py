"""
Distance goal endpoints.

Endpoints:
- POST   /goals        - Create a goal
- GET    /goals        - List goals with progress
- GET    /goals/{id}   - Goal with progress
- DELETE /goals/{id}   - Delete a goal
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.goals import (
    GoalCreate,
    GoalProgressResponse,
    GoalRepository,
    GoalService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.post("", response_model=GoalProgressResponse, status_code=201)
async def create_goal(
    request: GoalCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """Create a goal and return it with its current progress."""
    goal = await GoalRepository(db).create_goal(
        target_distance=request.target_distance,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    await db.commit()

    logger.info(f"Created goal {goal.id}: {goal.target_distance} km")
    return await GoalService(db).build_progress(goal)


@router.get("", response_model=list[GoalProgressResponse])
async def list_goals(db: AsyncSession = Depends(get_async_db)):
    return await GoalService(db).list_progress()


@router.get("/{goal_id}", response_model=GoalProgressResponse)
async def get_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_async_db)
):
    progress = await GoalService(db).get_progress(goal_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return progress


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_async_db)
):
    repo = GoalRepository(db)
    goal = await repo.get_by_id(goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")

    await repo.delete(goal)
    await db.commit()

    logger.info(f"Deleted goal {goal_id}")
    return Response(status_code=204)
