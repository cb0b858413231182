"""
Configuration management for the SMS media pipeline.

Loads environment variables from .env file and provides typed access to
application-level settings. Pipeline settings live in infra.config.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config:
    """Configuration class for the SMS media pipeline."""

    # HTTP server
    PORT = int(os.getenv("PORT", "8000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Pipeline (presence only is reported; values are read by infra.config)
    AUTH_TOKEN = os.getenv("AUTH_TOKEN", "")
    SNS_TOPIC = os.getenv("SNS_TOPIC", "")
    SNS_MEDIA_TOPIC = os.getenv("SNS_MEDIA_TOPIC", "")
    PUBLISH_BACKEND = os.getenv("PUBLISH_BACKEND", "sns")

    @classmethod
    def missing(cls) -> list[str]:
        """Required environment variables that are not set."""
        required = ["AUTH_TOKEN", "SNS_TOPIC", "SNS_MEDIA_TOPIC"]
        return [key for key in required if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()
        if missing:
            logging.getLogger(__name__).warning(
                f"Missing required environment variables: {', '.join(missing)}"
            )
            return False
        return True


def configure_logging(level: str = None) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=level or Config.LOG_LEVEL,
        format=LOG_FORMAT,
    )
