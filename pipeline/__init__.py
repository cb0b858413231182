"""
Webhook pipeline exports.

Batch processing and publishing for verified SMS webhooks.
"""

from .processor import BatchProcessor, BatchReport, RecordOutcome, RecordStatus, parse_batch
from .publisher import EventPublisher, PublishOutcome, serialize_payload

__all__ = [
    "BatchProcessor",
    "BatchReport",
    "RecordOutcome",
    "RecordStatus",
    "parse_batch",
    "EventPublisher",
    "PublishOutcome",
    "serialize_payload",
]
