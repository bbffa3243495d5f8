"""API v1 router"""
from fastapi import APIRouter

from app.api.v1.endpoints import boards, projects

api_router = APIRouter()
api_router.include_router(projects.router, tags=["Projects"])
api_router.include_router(boards.router, tags=["Boards"])
