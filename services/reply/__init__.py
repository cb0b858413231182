"""SMS reply boundary exports."""

from .sender import ReplyResult, ReplyStatus, SMSReplySender, SMSSenderError, extract_reply_text

__all__ = [
    "ReplyResult",
    "ReplyStatus",
    "SMSReplySender",
    "SMSSenderError",
    "extract_reply_text",
]
