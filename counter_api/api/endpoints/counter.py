# counter_api/api/endpoints/counter.py
from typing import Union

from fastapi import APIRouter, Depends
from loguru import logger

from counter_api.api.deps import get_counter_store
from counter_api.db.store import CounterStore
from counter_api.models.counter import (
    CounterErrorResponse,
    CounterResult,
    CounterSuccess,
    CounterValue,
)

router = APIRouter(
    tags=["Counter"]
)

CounterEnvelope = Union[CounterSuccess, CounterErrorResponse]


def to_envelope(result: CounterResult) -> CounterEnvelope:
    """Translate a store result into the JSON envelope (always HTTP 200)."""
    if isinstance(result, CounterValue):
        return CounterSuccess(count=result.count)
    return CounterErrorResponse(error=result.error)


@router.get("/count", response_model=CounterEnvelope)
async def read_count(store: CounterStore = Depends(get_counter_store)):
    """Return the current value of the shared counter."""
    return to_envelope(await store.get_count())


@router.post("/increment", response_model=CounterEnvelope)
async def increment_count(store: CounterStore = Depends(get_counter_store)):
    """Increment the shared counter by one and return the new value."""
    result = await store.increment()
    if isinstance(result, CounterValue):
        logger.info(f"Counter incremented to {result.count}")
    return to_envelope(result)
