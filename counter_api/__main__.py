# counter_api/__main__.py
import uvicorn

from counter_api.core.config import get_settings, setup_logging
from counter_api.main import create_app


def main() -> None:
    settings = get_settings()
    setup_logging(settings)
    # log_config=None keeps uvicorn from replacing the Loguru intercept
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
