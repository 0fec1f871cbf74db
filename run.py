"""Development runner script."""

import os
import logging
from typing import NoReturn

from docqa_ui.core.config import settings
from docqa_ui.main import main as launch


# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def main() -> NoReturn:
    """Run the UI with debug logging."""
    logger.info("Starting development UI...")
    logger.info("Environment: %s", os.getenv("APP_ENV", "development"))
    logger.info("UI URL: http://localhost:%d", settings.UI_PORT)
    logger.info("Mock data: %s", settings.use_mock_data)
    logger.info("Sentry DSN: %s", settings.SENTRY_DSN or "<unset>")

    launch()
    raise SystemExit(0)


if __name__ == "__main__":
    main()
