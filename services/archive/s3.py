"""
Object-store archive for published messages.

Requires: boto3 (AWS SDK). One put per message, no retries.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import boto3

logger = logging.getLogger(__name__)


def build_object_key(message: dict[str, Any], now: Optional[datetime] = None) -> str:
    """
    Key objects by UTC date, then receipt time and message id.

    {YYYY-MM-DD}/{timestamp}-{MessageSid}/{MediaId}.json   analyzed media
    {YYYY-MM-DD}/{timestamp}-{MessageSid}/message.json     anything else
    """
    now = now or datetime.now(timezone.utc)
    date_prefix = now.astimezone(timezone.utc).strftime("%Y-%m-%d")
    if "openAIResult" in message:
        filename = f"{message.get('MediaId')}.json"
    else:
        filename = "message.json"
    return f"{date_prefix}/{message.get('timestamp')}-{message.get('MessageSid')}/{filename}"


class S3ArchiveWriter:
    """Writes messages as JSON objects to one bucket."""

    def __init__(self, bucket: str, region: Optional[str] = None, client: Any = None):
        self.bucket = bucket
        self.client = client or boto3.client("s3", region_name=region)

    async def save(self, message: dict[str, Any], now: Optional[datetime] = None) -> bool:
        """
        Store a message. Failures are logged and reported as False.
        """
        key = build_object_key(message, now)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=json.dumps(message),
                ContentType="application/json",
            )
        except Exception as e:
            logger.error(
                f"Error saving object to bucket {self.bucket}: {e}",
                exc_info=True,
                extra={"object_key": key},
            )
            return False

        logger.info(f"Saved object {key}", extra={"object_key": key, "bucket": self.bucket})
        return True
