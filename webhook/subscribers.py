"""
Topic-subscribed entry points for the downstream collaborators.

Each handler receives topic notifications, makes one external call per
message and logs failures. No retries.

  media channel    → vision_handler   → analysis channel
  general channel  → archive_handler  (also subscribed to analysis)
  analysis channel → reply_handler
"""

import asyncio
import json
import logging
from typing import Any

from config import configure_logging
from infra.bootstrap import bootstrap_pipeline
from pipeline import EventPublisher
from services.archive import S3ArchiveWriter
from services.reply import ReplyResult, SMSReplySender
from services.vision import OpenAIVisionClient, VisionError, build_vision_request

configure_logging()
logger = logging.getLogger(__name__)


def parse_notifications(event: dict[str, Any]) -> list[dict[str, Any]]:
    """JSON messages out of a topic notification event. Unreadable ones are skipped."""
    messages = []
    for position, record in enumerate(event.get("Records", [])):
        try:
            messages.append(json.loads(record["Sns"]["Message"]))
        except (KeyError, TypeError, json.JSONDecodeError) as e:
            logger.error(f"Unreadable notification at position {position}: {e}")
    return messages


async def analyze_media(
    message: dict[str, Any],
    client: OpenAIVisionClient,
    publisher: EventPublisher,
    model: str,
    analysis_channel: str,
) -> bool:
    """Run one media message through the vision model and publish the result."""
    if not message.get("MediaUrl"):
        logger.info("Message is not a media message, skipping vision")
        return False

    try:
        result = await client.analyze(build_vision_request(message, model))
    except VisionError as e:
        logger.error(
            f"Vision call failed for {message.get('MediaId')}: {e}",
            extra={"message_sid": message.get("MessageSid")},
        )
        return False

    outcome = await publisher.publish(
        analysis_channel,
        {**message, "openAIResult": result},
        record_id=message.get("MessageSid"),
    )
    return outcome.ok


def vision_handler(event: dict[str, Any], context: Any = None) -> dict[str, int]:
    bootstrap = bootstrap_pipeline()
    config = bootstrap.config
    client = OpenAIVisionClient(api_key=config.openai_api_key)

    async def _run() -> list[bool]:
        return await asyncio.gather(*(
            analyze_media(message, client, bootstrap.get_publisher(),
                          config.vision_model, config.analysis_channel)
            for message in parse_notifications(event)
        ))

    results = asyncio.run(_run())
    return {"analyzed": sum(results), "messages": len(results)}


def archive_handler(event: dict[str, Any], context: Any = None) -> dict[str, int]:
    config = bootstrap_pipeline().config
    writer = S3ArchiveWriter(bucket=config.archive_bucket, region=config.region)

    async def _run() -> list[bool]:
        return await asyncio.gather(*(
            writer.save(message) for message in parse_notifications(event)
        ))

    results = asyncio.run(_run())
    return {"saved": sum(results), "messages": len(results)}


def reply_handler(event: dict[str, Any], context: Any = None) -> dict[str, int]:
    config = bootstrap_pipeline().config
    sender = SMSReplySender(
        account_sid=config.account_sid,
        auth_token=config.auth_token,
        enabled=config.send_sms,
    )

    async def _run() -> list[ReplyResult]:
        return await asyncio.gather(*(
            sender.send(message) for message in parse_notifications(event)
        ))

    results = asyncio.run(_run())
    return {
        "sent": sum(1 for result in results if result.status == "sent"),
        "messages": len(results),
    }
