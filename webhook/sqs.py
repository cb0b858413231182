"""
Queue-triggered entry point.

The queue delivers batches of captured webhooks. Each batch is verified
and fanned out; faults are logged per record and never fail the
invocation. Records abandoned at the batch timeout are reported back as
item failures so the queue redelivers them.
"""

import asyncio
import logging
from typing import Any

from config import configure_logging
from infra.bootstrap import bootstrap_pipeline
from pipeline import parse_batch

configure_logging()
logger = logging.getLogger(__name__)


def lambda_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """
    Process an SQS batch.

    Raises:
        BatchEnvelopeError: the event is not an SQS batch
    """
    records = parse_batch(event)
    processor = bootstrap_pipeline().get_processor()
    report = asyncio.run(processor.process_batch(records))

    logger.debug(f"Batch report: {report.to_dict()}")

    # Only abandoned records go back to the queue; other faults are terminal.
    return {
        "batchItemFailures": [
            {"itemIdentifier": outcome.record_id}
            for outcome in report.outcomes
            if outcome.status == "timed_out"
        ]
    }
