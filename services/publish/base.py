"""
Publish channel abstract interface.

Role: hand one serialized message to one named channel.

Rules:
- Exactly one attempt per call (no retries; redelivery belongs to the platform)
- No serialization here (callers pass text)
- Failures raise; the EventPublisher turns them into outcomes
"""

from abc import ABC, abstractmethod
from typing import Optional


class ChannelTransport(ABC):
    """
    Abstract publish boundary.
    Pipeline code must depend ONLY on this interface.
    """

    name = "base"

    @abstractmethod
    async def send(self, channel: str, message: str) -> Optional[str]:
        """
        Publish a message to a channel.

        Args:
            channel: Channel identifier (e.g. topic ARN)
            message: Serialized message text

        Returns:
            Provider message id, when the backend reports one
        """
        raise NotImplementedError
