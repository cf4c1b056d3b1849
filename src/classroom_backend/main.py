from __future__ import annotations
import logging
import sys
import uvicorn
from classroom_backend.domain.exceptions import ConfigurationError
from classroom_backend.infrastructure.config import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the uvicorn ASGI server."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level="ERROR")
        logger.critical("Refusing to start: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    uvicorn.run(
        "classroom_backend.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
