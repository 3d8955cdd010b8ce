# counter_api/models/enum.py
from enum import Enum

class CounterError(str, Enum):
    COUNTER_NOT_FOUND = "COUNTER_NOT_FOUND" # Singleton row missing at query time
    DATABASE_ERROR = "DATABASE_ERROR"       # Any fault raised by the storage layer
