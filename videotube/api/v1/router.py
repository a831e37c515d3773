# ============================================================================
# FILE: videotube/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from videotube.api.v1.endpoints import user

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(user.router, prefix="/users", tags=["users"])
