# counter_api/models/counter.py
from dataclasses import dataclass
from typing import Literal, Union

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, MetaData, Table

from counter_api.models.enum import CounterError

# Identity of the singleton counter row
COUNTER_ID = 1

metadata = MetaData()

counter_table = Table(
    "counter",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("count", Integer, nullable=False),
)


# --- Store results ---
@dataclass(frozen=True)
class CounterValue:
    count: int


@dataclass(frozen=True)
class CounterFailure:
    error: CounterError


CounterResult = Union[CounterValue, CounterFailure]


# --- Pydantic Schemas ---
class CounterSuccess(BaseModel):
    """Envelope returned when the counter was read or incremented."""
    success: Literal[True] = True
    count: int


class CounterErrorResponse(BaseModel):
    """Envelope returned when the counter operation failed."""
    success: Literal[False] = False
    error: CounterError


class HealthResponse(BaseModel):
    status: Literal["ok", "unavailable"]
    database: bool = Field(..., description="Whether the database answered a ping")
