"""
Pipeline configuration system.

Environment-based settings with sensible defaults, passed explicitly into
the components. Nothing below the entry points reads the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Optional

from services.publish import ChannelTransport, InMemoryChannelTransport, SNSChannelTransport
from transport.sms.decode import DEFAULT_SIGNATURE_ATTRIBUTE


PublishBackendType = Literal["sns", "stub"]


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class PipelineConfig:
    """Pipeline configuration from environment."""

    # Signing secret (never logged, never published)
    auth_token: str = field(repr=False)

    # Channels
    general_channel: str
    media_channel: str
    analysis_channel: str = ""

    # Batch processing
    signature_attribute: str = DEFAULT_SIGNATURE_ATTRIBUTE
    batch_timeout_s: Optional[float] = None

    # Publish backend
    publish_backend: PublishBackendType = "sns"
    region: Optional[str] = None

    # Downstream collaborators
    openai_api_key: str = field(default="", repr=False)
    vision_model: str = "gpt-4o"
    archive_bucket: str = ""
    send_sms: bool = False
    account_sid: str = ""

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Publish: sns in the region from REGION (or the AWS default chain)
        - Signature attribute: x-signature
        - Batch timeout: none (bounded by the platform's invocation timeout)
        - SMS replies: off unless SEND_SMS=YES
        """
        return cls(
            # Signing
            auth_token=os.getenv("AUTH_TOKEN", ""),

            # Channels
            general_channel=os.getenv("SNS_TOPIC", ""),
            media_channel=os.getenv("SNS_MEDIA_TOPIC", ""),
            analysis_channel=os.getenv("SNS_ANALYSIS_TOPIC", ""),

            # Batch processing
            signature_attribute=os.getenv("SIGNATURE_ATTRIBUTE", DEFAULT_SIGNATURE_ATTRIBUTE),
            batch_timeout_s=_optional_float(os.getenv("BATCH_TIMEOUT_S")),

            # Publish backend
            publish_backend=os.getenv("PUBLISH_BACKEND", "sns"),  # type: ignore
            region=os.getenv("REGION") or None,

            # Downstream collaborators
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            vision_model=os.getenv("VISION_MODEL", "gpt-4o"),
            archive_bucket=os.getenv("DESTINATION_BUCKET", ""),
            send_sms=os.getenv("SEND_SMS", "NO").upper() == "YES",
            account_sid=os.getenv("ACCOUNT_SID", ""),
        )

    def missing_settings(self) -> list[str]:
        """Required settings that are empty."""
        required = {
            "AUTH_TOKEN": self.auth_token,
            "SNS_TOPIC": self.general_channel,
            "SNS_MEDIA_TOPIC": self.media_channel,
        }
        return [name for name, value in required.items() if not value]

    def create_transport(self) -> ChannelTransport:
        """Create publish backend instance based on configuration."""
        if self.publish_backend == "stub":
            return InMemoryChannelTransport()
        return SNSChannelTransport(region=self.region)


def get_config() -> PipelineConfig:
    """Get pipeline configuration from the current environment."""
    return PipelineConfig.from_env()
