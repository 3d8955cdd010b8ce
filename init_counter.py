# init_counter.py
import asyncio
import sys
from dataclasses import replace
from typing import Optional

from counter_api.core.config import get_settings
from counter_api.db.store import CounterStore
from counter_api.models.counter import CounterValue

async def initialize_counter(database_url: Optional[str] = None) -> int:
    """Create the counter table and singleton row without starting the server.

    Returns the current count. Storage errors propagate.
    """
    print("--- Initialize Counter Storage ---")
    settings = get_settings()
    if database_url:
        settings = replace(settings, database_url=database_url)

    store = CounterStore.from_settings(settings)
    try:
        await store.initialize()
        result = await store.get_count()
    finally:
        # Close the pool before leaving
        await store.close()

    if not isinstance(result, CounterValue):
        raise RuntimeError(f"Counter not readable after initialization: {result.error.value}")
    print(f"Counter ready, current count: {result.count}")
    return result.count


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        asyncio.run(initialize_counter(url))
    except Exception as e:
        print(f"Error initializing counter storage: {e}")
        sys.exit(1)
