# mystack_controller/run_api.py
"""Run the controller API (development)."""

import logging
import sys

import uvicorn

from mystack_controller.core.config import settings
from mystack_controller.infrastructure.postgres.database import init_db

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    logger.info("Starting mystack controller API")
    logger.info(f"Default readiness period/timeout: "
                f"{settings.default_period_seconds}s/{settings.default_timeout_seconds}s")

    try:
        init_db()
        uvicorn.run(
            "mystack_controller.api.main:app",
            host=settings.api_host,
            port=settings.api_port,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
