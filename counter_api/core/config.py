# counter_api/core/config.py
import os
import sys
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

# --- Load .env from the project root if present ---
project_root = Path(__file__).resolve().parent.parent.parent
dotenv_path = project_root / '.env'

if dotenv_path.is_file():
    logger.debug(f"Loading environment variables from: {dotenv_path}")
    load_dotenv(dotenv_path=dotenv_path, override=True)
else:
    logger.debug(f".env file not found at {dotenv_path}. Relying on system environment variables.")

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/postgres"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4000
DEFAULT_POOL_SIZE = 5


# --- Route stdlib logging (uvicorn, sqlalchemy) into Loguru ---
class InterceptHandler(logging.Handler):
    """Forwards standard logging records to Loguru."""
    def emit(self, record: logging.LogRecord) -> None:
        try: level = logger.level(record.levelname).name
        except ValueError: level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}. Using default: {default}.")
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    db_pool_size: int = DEFAULT_POOL_SIZE
    db_echo: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    log_file_path: Optional[str] = None
    log_rotation: str = "1 day"
    log_retention: str = "7 days"
    log_serialize: bool = False

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}/api"


def get_settings() -> Settings:
    """Reads the application settings from the environment."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        db_pool_size=_env_int("DB_POOL_SIZE", DEFAULT_POOL_SIZE),
        db_echo=_env_bool("DB_ECHO"),
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_env_int("PORT", DEFAULT_PORT),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file_path=os.getenv("LOG_FILE_PATH") or None,
        log_rotation=os.getenv("LOG_ROTATION", "1 day"),
        log_retention=os.getenv("LOG_RETENTION", "7 days"),
        log_serialize=_env_bool("LOG_SERIALIZE"),
    )


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure Loguru sinks and intercept standard logging."""
    settings = settings or get_settings()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    logger.remove() # Drop the default handler

    # Console
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=log_format,
        colorize=True,
    )

    # File (optional)
    if settings.log_file_path:
        log_file_path = Path(settings.log_file_path)
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_file_path,
                level=settings.log_level,
                format=log_format,
                rotation=settings.log_rotation,
                retention=settings.log_retention,
                serialize=settings.log_serialize,
                enqueue=True,
                backtrace=True,
                diagnose=False,
                encoding="utf-8"
            )
            logger.info(f"File logging enabled at: {log_file_path}")
        except OSError as e:
            logger.error(f"Failed to setup file logging at {log_file_path}: {e}")

    # --- Intercept standard logging ---
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(("uvicorn", "fastapi", "starlette", "sqlalchemy")):
            existing_logger = logging.getLogger(name)
            existing_logger.handlers = [InterceptHandler()]
            existing_logger.propagate = False

    logger.info(f"Logging level set to: {settings.log_level}")
