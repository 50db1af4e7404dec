import logging
import sys
from collections.abc import Sequence

import uvicorn
from dotenv import load_dotenv

from otf_level.config import describe_settings, load_settings
from otf_level.main import create_app

logger = logging.getLogger("otf-level")

SHUTDOWN_GRACE_SECONDS = 10


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        settings = load_settings(argv)
    except (ValueError, RuntimeError) as exc:
        logger.error("Cannot create otf-level service: %s", exc)
        return 1

    logger.info("%s", describe_settings(settings))

    server = uvicorn.Server(
        uvicorn.Config(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            timeout_graceful_shutdown=SHUTDOWN_GRACE_SECONDS,
            log_level="info",
        )
    )
    # uvicorn drains in-flight requests on SIGINT/SIGTERM before returning
    server.run()
    logger.info("otf-level closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
