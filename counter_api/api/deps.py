# counter_api/api/deps.py
from fastapi import Request

from counter_api.db.store import CounterStore

def get_counter_store(request: Request) -> CounterStore:
    """Dependency: the store created for this application instance."""
    return request.app.state.counter_store
