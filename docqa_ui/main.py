"""Main entry point for the Document Q&A UI."""

import logging

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from docqa_ui.core.config import Settings, settings
from docqa_ui.ui.interface import launch_interface

logger = logging.getLogger(__name__)


def init_sentry(app_settings: Settings) -> bool:
    """Initialize Sentry when a DSN is configured."""
    if not app_settings.SENTRY_DSN:
        logger.debug("SENTRY_DSN not set, error reporting disabled")
        return False

    logger.debug("Initializing Sentry")
    sentry_sdk.init(
        dsn=app_settings.SENTRY_DSN,
        traces_sample_rate=1.0,
        environment="development",  # Change this based on your environment
        integrations=[
            LoggingIntegration(
                level=logging.INFO,        # Capture info and above as breadcrumbs
                event_level=logging.ERROR  # Send errors as events
            ),
            AsyncioIntegration(),
        ],
    )
    return True


def main() -> None:
    """Launch the Gradio interface."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s"
    )
    init_sentry(settings)
    logger.info(
        "Backend: %s",
        "mock data" if settings.use_mock_data else settings.API_URL
    )
    launch_interface(settings)


if __name__ == "__main__":
    main()
