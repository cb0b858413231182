"""
Batch Processor

Drives every queue record through:
  received → decoded → {verified | rejected} → published → fanout_complete

Each record runs in its own task. A fault in one record is logged and
recorded in its outcome; it never reaches another record or the caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Optional, Sequence

from pydantic import ValidationError

from transport.sms.decode import (
    DEFAULT_SIGNATURE_ATTRIBUTE,
    build_request_url,
    decode_body,
    extract_provided_signature,
    normalize_event,
    parse_receipt_timestamp,
)
from transport.sms.faults import (
    AuthenticationFault,
    BatchEnvelopeError,
    DecodeFault,
    PipelineFault,
)
from transport.sms.media import extract_media
from transport.sms.schemas import RawQueueRecord
from transport.sms.security import verify_signature

from .publisher import EventPublisher

if TYPE_CHECKING:
    from infra.config import PipelineConfig

logger = logging.getLogger(__name__)

RecordStatus = Literal[
    "received",
    "decoded",
    "verified",
    "published",
    "fanout_complete",
    "decode_failed",
    "rejected",
    "failed",
    "timed_out",
]


@dataclass
class RecordOutcome:
    """What happened to one record."""

    record_id: str
    status: RecordStatus = "received"
    general_published: bool = False
    media_published: int = 0
    media_failed: int = 0
    faults: list[PipelineFault] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "status": self.status,
            "general_published": self.general_published,
            "media_published": self.media_published,
            "media_failed": self.media_failed,
            "faults": [
                {"kind": fault.kind, "detail": str(fault)} for fault in self.faults
            ],
        }


@dataclass
class BatchReport:
    """Outcomes for a whole batch, in record order."""

    outcomes: list[RecordOutcome] = field(default_factory=list)

    def count(self, status: RecordStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def general_published(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.general_published)

    @property
    def media_published(self) -> int:
        return sum(outcome.media_published for outcome in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": len(self.outcomes),
            "general_published": self.general_published,
            "media_published": self.media_published,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


def parse_batch(event: Any) -> list[RawQueueRecord]:
    """
    Read the records out of a queue event: {"Records": [...]}

    Raises:
        BatchEnvelopeError: the envelope or a record's identity is malformed
    """
    if not isinstance(event, dict) or not isinstance(event.get("Records"), list):
        raise BatchEnvelopeError("Batch event must be an object with a 'Records' list")

    records = []
    for position, raw in enumerate(event["Records"]):
        if not isinstance(raw, dict):
            raise BatchEnvelopeError(f"Record {position} is not an object")
        try:
            records.append(RawQueueRecord.from_sqs(raw))
        except ValidationError as e:
            raise BatchEnvelopeError(f"Record {position} is malformed: {e}")
    return records


class BatchProcessor:
    """
    Verifies queued webhooks and fans them out to the publish channels.

    Holds no per-record state; records only share the read-only settings
    and the publisher.
    """

    def __init__(
        self,
        auth_token: str,
        general_channel: str,
        media_channel: str,
        publisher: EventPublisher,
        signature_attribute: str = DEFAULT_SIGNATURE_ATTRIBUTE,
        batch_timeout_s: Optional[float] = None,
    ):
        self._auth_token = auth_token
        self.general_channel = general_channel
        self.media_channel = media_channel
        self.publisher = publisher
        self.signature_attribute = signature_attribute
        self.batch_timeout_s = batch_timeout_s

        if not auth_token:
            logger.error("AUTH_TOKEN not configured, every record will be rejected")

    @classmethod
    def from_config(cls, config: "PipelineConfig", publisher: EventPublisher) -> "BatchProcessor":
        return cls(
            auth_token=config.auth_token,
            general_channel=config.general_channel,
            media_channel=config.media_channel,
            publisher=publisher,
            signature_attribute=config.signature_attribute,
            batch_timeout_s=config.batch_timeout_s,
        )

    async def process_batch(self, records: Sequence[RawQueueRecord]) -> BatchReport:
        """
        Process every record concurrently.

        Returns once every record has finished, or when the batch budget
        runs out; unfinished records are cancelled and reported as
        timed_out (their in-flight publishes are abandoned).
        """
        outcomes = [RecordOutcome(record_id=record.message_id) for record in records]
        if not records:
            return BatchReport(outcomes)

        tasks = [
            asyncio.create_task(self.process_record(record, outcome))
            for record, outcome in zip(records, outcomes)
        ]
        _, pending = await asyncio.wait(tasks, timeout=self.batch_timeout_s)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        for task, outcome in zip(tasks, outcomes):
            if task in pending:
                outcome.status = "timed_out"
                logger.warning(
                    f"Record {outcome.record_id} timed out and was abandoned",
                    extra={"record_id": outcome.record_id, "fault_kind": "timeout"},
                )

        report = BatchReport(outcomes)
        logger.info(
            f"Batch processed: {len(outcomes)} records, "
            f"{report.general_published} published, "
            f"{report.count('rejected')} rejected, "
            f"{report.count('decode_failed')} undecodable"
        )
        return report

    async def process_record(
        self,
        record: RawQueueRecord,
        outcome: Optional[RecordOutcome] = None,
    ) -> RecordOutcome:
        """Run one record through the state machine. Never raises."""
        if outcome is None:
            outcome = RecordOutcome(record_id=record.message_id)

        try:
            await self._process(record, outcome)

        except DecodeFault as fault:
            outcome.status = "decode_failed"
            outcome.faults.append(fault)
            logger.error(
                f"SQS message {record.message_id} could not be decoded: {fault}",
                extra=fault.log_context(),
            )

        except AuthenticationFault as fault:
            outcome.status = "rejected"
            outcome.faults.append(fault)
            logger.warning(
                f"Signature does not match! SQS message {record.message_id} was not processed",
                extra=fault.log_context(),
            )

        except Exception as e:
            outcome.status = "failed"
            logger.error(
                f"Unexpected error processing SQS message {record.message_id}: {e}",
                exc_info=True,
                extra={"record_id": record.message_id, "fault_kind": "unexpected"},
            )

        return outcome

    async def _process(self, record: RawQueueRecord, outcome: RecordOutcome) -> None:
        record_id = record.message_id

        # received → decoded
        params = decode_body(record.body, record_id)
        url = build_request_url(record)
        provided_signature = extract_provided_signature(record, self.signature_attribute)
        received_at = parse_receipt_timestamp(record)
        outcome.status = "decoded"

        # decoded → verified | rejected
        if not self._auth_token:
            raise AuthenticationFault("Signing secret not configured", record_id)
        if not verify_signature(self._auth_token, url, params, provided_signature):
            raise AuthenticationFault(f"Signature mismatch for {url}", record_id)
        outcome.status = "verified"
        event = normalize_event(record, params, received_at)

        # verified → published
        general = await self.publisher.publish(self.general_channel, event, record_id=record_id)
        outcome.general_published = general.ok
        if general.fault:
            outcome.faults.append(general.fault)
        outcome.status = "published"

        # published → fanout_complete (independent of the general publish)
        extraction = extract_media(event)
        for fault in extraction.faults:
            outcome.faults.append(fault)
            logger.warning(f"Media data integrity fault: {fault}", extra=fault.log_context())

        for attachment in extraction:
            media = await self.publisher.publish(self.media_channel, attachment, record_id=record_id)
            if media.ok:
                outcome.media_published += 1
            else:
                outcome.media_failed += 1
                outcome.faults.append(media.fault)

        outcome.status = "fanout_complete"
