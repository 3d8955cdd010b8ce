# counter_api/db/database.py
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from counter_api.core.config import Settings

logger = logging.getLogger(__name__)

def create_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide async engine (and its connection pool)."""
    url = make_url(settings.database_url)
    logger.info(f"Connecting to {url.get_backend_name()} database '{url.database}'...") # Never log credentials

    engine_kwargs = {"echo": settings.db_echo, "pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        # SQLite uses its own pool class; sizing only applies to server databases
        engine_kwargs["pool_size"] = settings.db_pool_size

    return create_async_engine(url, **engine_kwargs)
