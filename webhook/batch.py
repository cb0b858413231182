"""
Batch Webhook Receiver

FastAPI router that accepts a queue-shaped batch and runs it through the
pipeline. Used for local development and replaying captured batches; in
production the queue triggers webhook.sqs.lambda_handler directly.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from infra.bootstrap import bootstrap_pipeline
from pipeline import BatchProcessor, parse_batch
from transport.sms.faults import BatchEnvelopeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["SMS Webhook Pipeline"])


def get_batch_processor() -> BatchProcessor:
    """Processor from the process-wide bootstrap."""
    return bootstrap_pipeline().get_processor()


@router.post("/batch")
async def receive_batch(
    event: Any = Body(...),
    processor: BatchProcessor = Depends(get_batch_processor),
) -> dict[str, Any]:
    """
    Process a batch of queued webhooks.

    Expected payload (SQS event shape):
    {
        "Records": [{
            "messageId": "...",
            "body": "Body=dog&NumMedia=1&...",
            "attributes": {"ApproximateFirstReceiveTimestamp": "1707500000000"},
            "messageAttributes": {
                "domainName": {"stringValue": "abc.execute-api.us-east-1.amazonaws.com"},
                "path": {"stringValue": "/prod/webhook"},
                "x-signature": {"stringValue": "..."}
            }
        }]
    }

    Returns:
        The batch report (per-record status and publish counts)

    Raises:
        HTTPException(422): Malformed batch envelope
    """
    try:
        records = parse_batch(event)
    except BatchEnvelopeError as e:
        logger.warning(f"Rejected malformed batch: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    report = await processor.process_batch(records)
    return report.to_dict()


@router.get("/batch/health")
async def batch_health(processor: BatchProcessor = Depends(get_batch_processor)) -> dict[str, Any]:
    """Health check for the batch pipeline."""
    return {
        "status": "ok",
        "backend": processor.publisher.transport.name,
        "general_channel_set": bool(processor.general_channel),
        "media_channel_set": bool(processor.media_channel),
    }
