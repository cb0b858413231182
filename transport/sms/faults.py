"""
SMS Pipeline Fault Taxonomy

Every per-record failure is one of these kinds.
Faults are logged, never raised out of a batch.
"""

from typing import Optional


class PipelineFault(Exception):
    """Base class for per-record pipeline faults."""

    kind = "pipeline"

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id

    def log_context(self) -> dict:
        """Fields attached to log records for alerting."""
        return {"record_id": self.record_id, "fault_kind": self.kind}


class DecodeFault(PipelineFault):
    """Record body or envelope attributes could not be decoded."""

    kind = "decode"


class AuthenticationFault(PipelineFault):
    """Computed signature did not match the one supplied by the caller."""

    kind = "authentication"


class DataIntegrityFault(PipelineFault):
    """Attachment count claims an index whose fields are missing."""

    kind = "data_integrity"

    def __init__(
        self,
        message: str,
        record_id: Optional[str] = None,
        index: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message, record_id)
        self.index = index
        self.field = field

    def log_context(self) -> dict:
        context = super().log_context()
        context.update({"media_index": self.index, "missing_field": self.field})
        return context


class TransportFault(PipelineFault):
    """A publish call to a downstream channel failed."""

    kind = "transport"

    def __init__(
        self,
        message: str,
        record_id: Optional[str] = None,
        channel: Optional[str] = None,
    ):
        super().__init__(message, record_id)
        self.channel = channel

    def log_context(self) -> dict:
        context = super().log_context()
        context["channel"] = self.channel
        return context


class BatchEnvelopeError(Exception):
    """The batch itself is malformed (not a per-record fault)."""
    pass
