"""
Event Publisher

Serializes a payload and hands it to one channel.
No retries. Never raises: a failed publish is logged and returned.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

from services.publish import ChannelTransport
from transport.sms.faults import TransportFault

logger = logging.getLogger(__name__)

PublishStatus = Literal["published", "failed"]


@dataclass
class PublishOutcome:
    """Result of one publish attempt."""

    status: PublishStatus
    channel: str
    message_id: Optional[str] = None
    fault: Optional[TransportFault] = None

    @property
    def ok(self) -> bool:
        return self.status == "published"


def serialize_payload(payload: Any) -> str:
    """Canonical text encoding for channel messages (JSON)."""
    if hasattr(payload, "to_payload"):
        payload = payload.to_payload()
    return json.dumps(payload, ensure_ascii=False)


class EventPublisher:
    """
    Publishes events to named channels through a ChannelTransport.

    Each call makes exactly one transport attempt. Publishes for the same
    record are independent; one failing does not stop the others.
    """

    def __init__(self, transport: ChannelTransport):
        self.transport = transport

    async def publish(
        self,
        channel: str,
        payload: Any,
        record_id: Optional[str] = None,
    ) -> PublishOutcome:
        """
        Publish payload to channel.

        Args:
            channel: Channel identifier (topic ARN for SNS)
            payload: dict, or a model exposing to_payload()
            record_id: Source record id, for log context

        Returns:
            PublishOutcome (status "failed" carries the TransportFault)
        """
        try:
            message = serialize_payload(payload)
            message_id = await self.transport.send(channel, message)
        except Exception as e:
            fault = TransportFault(
                f"Publish to {channel} failed: {e}",
                record_id=record_id,
                channel=channel,
            )
            logger.error(
                f"Error publishing record {record_id} to {channel}: {e}",
                exc_info=True,
                extra=fault.log_context(),
            )
            return PublishOutcome(status="failed", channel=channel, fault=fault)

        logger.info(
            f"Published record {record_id} to {channel}",
            extra={
                "record_id": record_id,
                "channel": channel,
                "message_id": message_id,
                "backend": self.transport.name,
            },
        )
        return PublishOutcome(status="published", channel=channel, message_id=message_id)
