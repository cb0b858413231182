"""
SMS Webhook Pipeline - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the queue envelope, the verified event and the media sub-event.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# Ordered field name -> value mapping decoded from the form body.
# Insertion order is submission order and feeds the signing string.
DecodedParams = dict[str, str]

CORRELATION_FIELDS = ("MessageSid", "AccountSid", "Body", "From", "To")


# ============================================================================
# QUEUE ENVELOPE (INPUT)
# ============================================================================

def _flatten_message_attributes(raw: Any) -> dict[str, str]:
    """Reduce {"name": {"stringValue": "..."}} to {"name": "..."}."""
    flat: dict[str, str] = {}
    if not isinstance(raw, dict):
        return flat
    for name, value in raw.items():
        if isinstance(value, dict):
            string_value = value.get("stringValue", value.get("StringValue"))
            if string_value is not None:
                flat[name] = str(string_value)
        elif value is not None:
            flat[name] = str(value)
    return flat


class RawQueueRecord(BaseModel):
    """
    One record of a queue batch, as delivered by the transport.

    Read-only input to the batch processor.
    """

    message_id: str = Field(..., description="Unique queue message id")
    body: Any = Field(None, description="Form-encoded webhook body, as delivered")
    message_attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Custom attributes (domainName, path, signature)",
    )
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="System attributes (ApproximateFirstReceiveTimestamp, ...)",
    )

    class Config:
        frozen = True

    @classmethod
    def from_sqs(cls, record: dict[str, Any]) -> "RawQueueRecord":
        """
        Build from an SQS record.

        Accepts the Lambda event shape (messageId, messageAttributes) and the
        SQS API shape (MessageId, MessageAttributes).

        Only the message id is required here. The body is kept as delivered
        and attribute maps of the wrong shape read as empty, so a bad record
        fails on its own when it is decoded.
        """
        message_id = record.get("messageId", record.get("MessageId"))
        attributes = record.get("attributes", record.get("Attributes"))
        if not isinstance(attributes, dict):
            attributes = {}

        return cls(
            message_id=str(message_id) if message_id is not None else None,
            body=record.get("body", record.get("Body")),
            message_attributes=_flatten_message_attributes(
                record.get("messageAttributes", record.get("MessageAttributes"))
            ),
            attributes={
                name: str(value)
                for name, value in attributes.items()
                if value is not None
            },
        )


# ============================================================================
# VERIFIED EVENT (GENERAL CHANNEL)
# ============================================================================

class NormalizedEvent(BaseModel):
    """
    A verified webhook, ready for publishing.

    Created only after the signature matched. Fields are the decoded form
    params verbatim plus the two derived traceability fields.
    """

    params: DecodedParams = Field(..., description="Decoded form fields, in order")
    source_record_id: str = Field(..., description="Queue message id")
    received_at_epoch_seconds: int = Field(..., description="Receipt time")

    class Config:
        frozen = True

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.params.get(name, default)

    @property
    def message_sid(self) -> Optional[str]:
        return self.params.get("MessageSid")

    def to_payload(self) -> dict[str, Any]:
        """General channel JSON payload."""
        payload: dict[str, Any] = dict(self.params)
        payload["sqs_record"] = self.source_record_id
        payload["timestamp"] = self.received_at_epoch_seconds
        return payload


# ============================================================================
# MEDIA SUB-EVENT (MEDIA CHANNEL)
# ============================================================================

class MediaAttachment(BaseModel):
    """One media item split out of a verified event."""

    index: int = Field(..., description="Attachment index in the parent event")
    content_type: str = Field(..., alias="MediaContentType")
    url: str = Field(..., alias="MediaUrl")
    media_id: str = Field(..., alias="MediaId")
    message_sid: Optional[str] = Field(None, alias="MessageSid")
    account_sid: Optional[str] = Field(None, alias="AccountSid")
    body: Optional[str] = Field(None, alias="Body")
    sender: Optional[str] = Field(None, alias="From")
    recipient: Optional[str] = Field(None, alias="To")
    timestamp: int

    class Config:
        frozen = True
        populate_by_name = True

    def to_payload(self) -> dict[str, Any]:
        """Media channel JSON payload. Absent correlation fields are omitted."""
        payload = self.model_dump(by_alias=True, exclude_none=True, exclude={"index"})
        ordered_keys = (
            "MediaContentType", "MediaUrl", "MessageSid", "AccountSid",
            "MediaId", "Body", "From", "To", "timestamp",
        )
        return {key: payload[key] for key in ordered_keys if key in payload}
