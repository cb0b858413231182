"""
In-memory publish backend for testing and offline development.

Deterministic and inspectable. Can be told to fail for given channels.
"""

import itertools
from dataclasses import dataclass
from typing import Iterable, Optional

from .base import ChannelTransport


class StubPublishError(Exception):
    """Raised by the stub for channels configured to fail."""
    pass


@dataclass(frozen=True)
class SentMessage:
    channel: str
    message: str
    message_id: str


class InMemoryChannelTransport(ChannelTransport):
    """
    Records every message instead of sending it.

    Messages sent to a channel listed in failing_channels raise
    StubPublishError and are not recorded.
    """

    name = "stub"

    def __init__(self, failing_channels: Optional[Iterable[str]] = None):
        self.sent: list[SentMessage] = []
        self.failing_channels = set(failing_channels or ())
        self._ids = itertools.count(1)

    async def send(self, channel: str, message: str) -> Optional[str]:
        if channel in self.failing_channels:
            raise StubPublishError(f"Channel {channel} is configured to fail")
        message_id = f"stub-{next(self._ids)}"
        self.sent.append(SentMessage(channel=channel, message=message, message_id=message_id))
        return message_id

    def messages_for(self, channel: str) -> list[str]:
        """Messages published to a channel, in send order."""
        return [item.message for item in self.sent if item.channel == channel]
