# counter_api/api/api.py
from fastapi import APIRouter

from counter_api.api.endpoints import counter, health

api_router = APIRouter(prefix="/api")

api_router.include_router(counter.router)
api_router.include_router(health.router)
