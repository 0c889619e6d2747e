from fastapi import APIRouter

from app.api.routes import boards, health, workflow

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(boards.router, tags=["boards"])
api_router.include_router(workflow.router, prefix="/workflow", tags=["workflow"])
