# counter_api/api/endpoints/health.py
from fastapi import APIRouter, Depends, Response, status

from counter_api.api.deps import get_counter_store
from counter_api.db.store import CounterStore
from counter_api.models.counter import HealthResponse

router = APIRouter(
    tags=["Health"]
)

@router.get("/health", response_model=HealthResponse)
async def health(response: Response, store: CounterStore = Depends(get_counter_store)):
    """Report whether the database is reachable."""
    if await store.ping():
        return HealthResponse(status="ok", database=True)
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="unavailable", database=False)
