"""
SMS Webhook Record Decoding

PURE CONVERSION - NO NETWORK, NO ENV ACCESS

Turns a RawQueueRecord into its decoded form params, the original request
URL and the receipt timestamp, and builds the NormalizedEvent once the
record has been verified.
"""

from typing import Optional
from urllib.parse import parse_qsl

from .faults import DecodeFault
from .schemas import DecodedParams, NormalizedEvent, RawQueueRecord

DOMAIN_ATTRIBUTE = "domainName"
PATH_ATTRIBUTE = "path"
RECEIVE_TIMESTAMP_ATTRIBUTE = "ApproximateFirstReceiveTimestamp"
DEFAULT_SIGNATURE_ATTRIBUTE = "x-signature"

# Epoch values at or above this are milliseconds (year 5138 in seconds)
_MILLISECOND_THRESHOLD = 100_000_000_000


def decode_body(body: Optional[str], record_id: Optional[str] = None) -> DecodedParams:
    """
    Form-decode a webhook body, preserving submission order.

    Rules:
    - '+' and percent escapes are decoded as UTF-8
    - Blank values are kept ("Body=" -> {"Body": ""})
    - A repeated field name is rejected: the signing string needs exactly
      one value per name

    Raises:
        DecodeFault: body missing, not valid UTF-8 escapes, or repeated names
    """
    if body is None:
        raise DecodeFault("Record has no body", record_id)
    if not isinstance(body, str):
        raise DecodeFault(f"Record body is {type(body).__name__}, not text", record_id)

    try:
        pairs = parse_qsl(body, keep_blank_values=True, errors="strict")
    except ValueError as e:
        raise DecodeFault(f"Malformed form body: {e}", record_id)

    params: DecodedParams = {}
    for key, value in pairs:
        if key in params:
            raise DecodeFault(f"Repeated form field: {key!r}", record_id)
        params[key] = value
    return params


def _require_attribute(record: RawQueueRecord, name: str) -> str:
    value = record.message_attributes.get(name)
    if not value:
        raise DecodeFault(f"Missing message attribute: {name}", record.message_id)
    return value


def build_request_url(record: RawQueueRecord) -> str:
    """Rebuild the URL the provider posted to: https://{domainName}{path}"""
    domain = _require_attribute(record, DOMAIN_ATTRIBUTE)
    path = _require_attribute(record, PATH_ATTRIBUTE)
    return f"https://{domain}{path}"


def extract_provided_signature(record: RawQueueRecord, attribute: str) -> str:
    """The signature header value captured alongside the body."""
    return _require_attribute(record, attribute)


def parse_receipt_timestamp(record: RawQueueRecord) -> int:
    """
    Receipt time in epoch seconds.

    The queue reports milliseconds; second-resolution values pass through.
    """
    raw = record.attributes.get(RECEIVE_TIMESTAMP_ATTRIBUTE)
    if raw is None:
        raise DecodeFault(
            f"Missing attribute: {RECEIVE_TIMESTAMP_ATTRIBUTE}", record.message_id
        )
    try:
        value = int(raw)
    except ValueError:
        raise DecodeFault(
            f"Non-numeric {RECEIVE_TIMESTAMP_ATTRIBUTE}: {raw!r}", record.message_id
        )
    if value >= _MILLISECOND_THRESHOLD:
        return value // 1000
    return value


def normalize_event(
    record: RawQueueRecord,
    params: DecodedParams,
    received_at_epoch_seconds: int,
) -> NormalizedEvent:
    """Wrap verified params with their traceability fields."""
    return NormalizedEvent(
        params=dict(params),
        source_record_id=record.message_id,
        received_at_epoch_seconds=received_at_epoch_seconds,
    )
