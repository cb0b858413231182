"""
SNS publish backend.

Requires: boto3 (AWS SDK). Credentials come from the standard AWS chain.
"""

import asyncio
import logging
from typing import Any, Optional

import boto3

from .base import ChannelTransport

logger = logging.getLogger(__name__)


class SNSChannelTransport(ChannelTransport):
    """
    Publishes to SNS topics. The channel identifier is the topic ARN.

    boto3 is blocking, so each publish runs in a worker thread and the
    event loop keeps serving other records.
    """

    name = "sns"

    def __init__(self, region: Optional[str] = None, client: Any = None):
        """
        Initialize SNS backend.

        Args:
            region: AWS region for the client
            client: Pre-built boto3 SNS client (tests inject a mock)
        """
        self.region = region
        self.client = client or boto3.client("sns", region_name=region)

    async def send(self, channel: str, message: str) -> Optional[str]:
        response = await asyncio.to_thread(
            self.client.publish,
            TopicArn=channel,
            Message=message,
        )
        message_id = response.get("MessageId")
        logger.debug(f"Published to {channel}", extra={"sns_message_id": message_id})
        return message_id
