"""
Webhook module - entry points for the SMS media pipeline.

Includes:
- batch.py: FastAPI receiver for queue-shaped batches
- sqs.py: Queue-triggered lambda handler
- subscribers.py: Topic-subscribed handlers (vision, archive, reply)
"""

from webhook.batch import router as batch_router

__all__ = ["batch_router"]
