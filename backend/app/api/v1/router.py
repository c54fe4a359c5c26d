"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import sessions, goals, strava, webhooks

api_router = APIRouter()

api_router.include_router(sessions.router)
api_router.include_router(goals.router)
api_router.include_router(strava.router)
api_router.include_router(webhooks.router)
