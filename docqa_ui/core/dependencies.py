"""Factories wiring the services from settings."""

import logging
from typing import Optional

from docqa_ui.core.config import ClientConfig, Settings
from docqa_ui.core.logger import ErrorLogger
from docqa_ui.services.api_client import ApiClient
from docqa_ui.services.llm import TogetherAIClient

logger = logging.getLogger(__name__)


def build_ai_client(config: ClientConfig) -> Optional[TogetherAIClient]:
    """Create the Together adapter, or None without a credential."""
    if not config.model_credential:
        return None
    try:
        return TogetherAIClient(
            api_key=config.model_credential,
            model=config.model_name,
        )
    except Exception as e:
        logger.error(f"Together init failed: {str(e)}")
        return None


def build_api_client(
    config: ClientConfig,
    ai_client: Optional[TogetherAIClient] = None
) -> ApiClient:
    """Create the request client for the given configuration."""
    return ApiClient(config, ai_client=ai_client)


def build_error_logger(settings: Settings) -> ErrorLogger:
    """Create the error logger writing under LOG_DIR."""
    return ErrorLogger(log_dir=settings.LOG_DIR)
