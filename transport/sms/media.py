"""
SMS Media Fan-out

PURE EXTRACTION - NO PUBLISHING

The provider encodes attachments as a flat, index-suffixed field set:
NumMedia=2, MediaUrl0, MediaContentType0, MediaUrl1, MediaContentType1.
This module rebuilds them as an explicit ordered list.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional
from urllib.parse import urlsplit

from .faults import DataIntegrityFault
from .schemas import MediaAttachment, NormalizedEvent

logger = logging.getLogger(__name__)

MEDIA_COUNT_FIELD = "NumMedia"
MEDIA_URL_FIELD = "MediaUrl{index}"
MEDIA_CONTENT_TYPE_FIELD = "MediaContentType{index}"

_COUNT_PATTERN = re.compile(r"-?\d+", re.ASCII)
_MEDIA_FIELD_PATTERN = re.compile(r"Media(?:Url|ContentType)(0|[1-9]\d*)", re.ASCII)


@dataclass
class MediaExtraction:
    """Attachments found in an event, plus faults for indices that were not."""

    attachments: list[MediaAttachment] = field(default_factory=list)
    faults: list[DataIntegrityFault] = field(default_factory=list)

    def __iter__(self) -> Iterator[MediaAttachment]:
        return iter(self.attachments)

    def __len__(self) -> int:
        return len(self.attachments)


def parse_media_count(value: Optional[str]) -> int:
    """Absent, non-numeric or negative counts mean no attachments."""
    if value is None:
        return 0
    text = value.strip()
    if not _COUNT_PATTERN.fullmatch(text):
        logger.warning(f"Ignoring non-numeric {MEDIA_COUNT_FIELD}: {value!r}")
        return 0
    return max(int(text), 0)


def media_indices(params: Mapping[str, str], count: int) -> list[int]:
    """Indices below count that have a MediaUrlN or MediaContentTypeN field, ascending."""
    indices = set()
    for name in params:
        match = _MEDIA_FIELD_PATTERN.fullmatch(name)
        if match:
            index = int(match.group(1))
            if index < count:
                indices.add(index)
    return sorted(indices)


def media_id_from_url(url: str) -> str:
    """Final path segment of the media URL."""
    return urlsplit(url).path.rsplit("/", 1)[-1]


def _gap_fault(event: NormalizedEvent, count: int, first: int, last: int) -> DataIntegrityFault:
    url_field = MEDIA_URL_FIELD.format(index=first)
    if first == last:
        detail = f"{url_field}, {MEDIA_CONTENT_TYPE_FIELD.format(index=first)} missing"
    else:
        detail = f"no media fields for indices {first} to {last}"
    return DataIntegrityFault(
        f"{MEDIA_COUNT_FIELD}={count} but {detail}",
        record_id=event.source_record_id,
        index=first,
        field=url_field,
    )


def extract_media(event: NormalizedEvent) -> MediaExtraction:
    """
    Split a verified event into one MediaAttachment per index.

    A missing URL or content type for an index below the count is reported
    as a DataIntegrityFault for that index; extraction continues with the
    next index. A run of indices with no media fields at all is reported as
    one fault at its first index, so the work done is bounded by the fields
    present rather than by the claimed count. Nothing is raised.
    """
    result = MediaExtraction()
    count = parse_media_count(event.get(MEDIA_COUNT_FIELD))
    expected = 0

    for index in media_indices(event.params, count):
        if index > expected:
            result.faults.append(_gap_fault(event, count, expected, index - 1))
        expected = index + 1

        url_field = MEDIA_URL_FIELD.format(index=index)
        type_field = MEDIA_CONTENT_TYPE_FIELD.format(index=index)
        url = event.get(url_field)
        content_type = event.get(type_field)

        missing = [name for name, value in ((url_field, url), (type_field, content_type)) if not value]
        if missing:
            result.faults.append(DataIntegrityFault(
                f"{MEDIA_COUNT_FIELD}={count} but {', '.join(missing)} missing",
                record_id=event.source_record_id,
                index=index,
                field=missing[0],
            ))
            continue

        media_id = media_id_from_url(url)
        if not media_id:
            result.faults.append(DataIntegrityFault(
                f"{url_field} has no final path segment: {url!r}",
                record_id=event.source_record_id,
                index=index,
                field=url_field,
            ))
            continue

        result.attachments.append(MediaAttachment(
            index=index,
            content_type=content_type,
            url=url,
            media_id=media_id,
            message_sid=event.get("MessageSid"),
            account_sid=event.get("AccountSid"),
            body=event.get("Body"),
            sender=event.get("From"),
            recipient=event.get("To"),
            timestamp=event.received_at_epoch_seconds,
        ))

    if expected < count:
        result.faults.append(_gap_fault(event, count, expected, count - 1))

    return result
