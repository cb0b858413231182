"""SMS Webhook Transport Layer - Module Exports"""

from .decode import (
    build_request_url,
    decode_body,
    extract_provided_signature,
    normalize_event,
    parse_receipt_timestamp,
)
from .faults import (
    AuthenticationFault,
    BatchEnvelopeError,
    DataIntegrityFault,
    DecodeFault,
    PipelineFault,
    TransportFault,
)
from .media import (
    MediaExtraction,
    extract_media,
    media_id_from_url,
    media_indices,
    parse_media_count,
)
from .schemas import DecodedParams, MediaAttachment, NormalizedEvent, RawQueueRecord
from .security import build_signing_string, compute_signature, verify_signature

__all__ = [
    # Schemas
    "DecodedParams",
    "RawQueueRecord",
    "NormalizedEvent",
    "MediaAttachment",
    # Faults
    "PipelineFault",
    "DecodeFault",
    "AuthenticationFault",
    "DataIntegrityFault",
    "TransportFault",
    "BatchEnvelopeError",
    # Decoding
    "decode_body",
    "build_request_url",
    "extract_provided_signature",
    "parse_receipt_timestamp",
    "normalize_event",
    # Security
    "build_signing_string",
    "compute_signature",
    "verify_signature",
    # Media
    "MediaExtraction",
    "extract_media",
    "media_id_from_url",
    "media_indices",
    "parse_media_count",
]
