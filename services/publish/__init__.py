"""
Publish channel exports.

Clean interface for the pipeline to import publish backends.
"""

from .base import ChannelTransport
from .sns import SNSChannelTransport
from .stub import InMemoryChannelTransport, SentMessage, StubPublishError

__all__ = [
    "ChannelTransport",
    "SNSChannelTransport",
    "InMemoryChannelTransport",
    "SentMessage",
    "StubPublishError",
]
