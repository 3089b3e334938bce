"""
API v1 router: auth, events and bookings mounted under /api/v1.
"""

from fastapi import APIRouter
from app.api.routes import auth, bookings, events

api_router = APIRouter(prefix="/api/v1")
for module in (auth, events, bookings):
    api_router.include_router(module.router)
