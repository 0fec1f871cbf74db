"""Configuration settings for the Document Q&A UI."""

import os
import logging
from typing import List, Any, ClassVar, Dict, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the absolute path to the project directory
PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))

# Load environment variables from .env file
env_file = os.path.join(PROJECT_DIR, ".env")
load_dotenv(env_file)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TOGETHER_MODEL = "meta-llama/Llama-2-70b-chat-hf"


class ClientConfig(BaseModel):
    """Explicit configuration handed to the request client and the adapter."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    base_url: str = DEFAULT_API_URL
    use_mock_data: bool = True
    model_credential: Optional[str] = None
    model_name: str = DEFAULT_TOGETHER_MODEL


class Settings(BaseSettings):
    """Application settings."""

    # Backend settings
    API_URL: str = DEFAULT_API_URL
    # Anything other than the literal "false" keeps mock mode on
    USE_MOCK_DATA: str = "true"

    # Together AI settings
    TOGETHER_API_KEY: str = ""
    TOGETHER_MODEL: str = DEFAULT_TOGETHER_MODEL

    # Upload settings
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # bytes
    ALLOWED_EXTENSIONS_STR: str = "txt"

    # Sentry settings
    SENTRY_DSN: str = ""

    # Logging and UI settings
    LOG_DIR: str = os.path.join(PROJECT_DIR, "logs")
    UI_PORT: int = 7860

    # Available Together models
    AVAILABLE_MODELS: ClassVar[Dict[str, str]] = {
        "meta-llama/Llama-2-70b-chat-hf": "Llama 2 70B Chat",
        "meta-llama/Llama-2-13b-chat-hf": "Llama 2 13B Chat",
        "meta-llama/Llama-2-7b-chat-hf": "Llama 2 7B Chat",
        "mistralai/Mixtral-8x7B-Instruct-v0.1": "Mixtral 8x7B",
        "NousResearch/Nous-Hermes-2-Mixtral-8x7B-DPO": "Nous Hermes 2",
    }
    MODEL_DESCRIPTIONS: ClassVar[Dict[str, str]] = {
        "meta-llama/Llama-2-70b-chat-hf": "Best for conversations",
        "meta-llama/Llama-2-13b-chat-hf": "Faster, good quality",
        "meta-llama/Llama-2-7b-chat-hf": "Fastest, basic quality",
        "mistralai/Mixtral-8x7B-Instruct-v0.1": "High performance",
        "NousResearch/Nous-Hermes-2-Mixtral-8x7B-DPO": "Fine-tuned",
    }

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        env_prefix="",
        extra="allow"
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings and report what was picked up."""
        logger.debug("Looking for .env file at: %s", env_file)
        logger.debug("File exists: %s", os.path.exists(env_file))

        super().__init__(**kwargs)

        if self.TOGETHER_API_KEY:
            logger.debug("TOGETHER_API_KEY is set")
        else:
            logger.info(
                "TOGETHER_API_KEY not set, AI-powered answers are disabled"
            )

    @property
    def use_mock_data(self) -> bool:
        """Mock mode is on unless USE_MOCK_DATA is exactly "false"."""
        return self.USE_MOCK_DATA != "false"

    @property
    def ALLOWED_EXTENSIONS(self) -> List[str]:
        """Get allowed extensions as a list."""
        return [ext.strip() for ext in self.ALLOWED_EXTENSIONS_STR.split(",")]

    def client_config(self) -> ClientConfig:
        """Build the explicit client configuration from these settings."""
        return ClientConfig(
            base_url=self.API_URL,
            use_mock_data=self.use_mock_data,
            model_credential=self.TOGETHER_API_KEY or None,
            model_name=self.TOGETHER_MODEL or DEFAULT_TOGETHER_MODEL,
        )


settings = Settings()
