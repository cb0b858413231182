"""Shared builders for queue records carrying captured SMS webhooks."""

import base64
import hashlib
import hmac
from urllib.parse import parse_qsl

SECRET = "test_auth_token"
DOMAIN = "abc123.execute-api.us-east-1.amazonaws.com"
PATH = "/prod/webhook"
URL = f"https://{DOMAIN}{PATH}"
GENERAL = "arn:aws:sns:us-east-1:123456789012:webhook-general"
MEDIA = "arn:aws:sns:us-east-1:123456789012:webhook-media"
RECEIVED_MS = "1707500000123"
RECEIVED_S = 1707500000

DOG_BODY = (
    "Body=dog&NumMedia=1&MediaUrl0=https://host/media/M1"
    "&MediaContentType0=image/jpeg&From=%2B1555&To=%2B1666"
)


def reference_signature(secret: str, url: str, body: str) -> str:
    """Signature computed independently of the code under test."""
    signing = url + "".join(k + v for k, v in parse_qsl(body, keep_blank_values=True))
    digest = hmac.new(secret.encode(), signing.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()


def sqs_record(
    message_id: str,
    body: str,
    signature: str = None,
    secret: str = SECRET,
    received: str = RECEIVED_MS,
    domain: str = DOMAIN,
    path: str = PATH,
) -> dict:
    """An SQS Lambda-event record carrying a captured webhook."""
    if signature is None:
        signature = reference_signature(secret, f"https://{domain}{path}", body)
    return {
        "messageId": message_id,
        "body": body,
        "attributes": {"ApproximateFirstReceiveTimestamp": received},
        "messageAttributes": {
            "domainName": {"stringValue": domain, "dataType": "String"},
            "path": {"stringValue": path, "dataType": "String"},
            "x-signature": {"stringValue": signature, "dataType": "String"},
        },
    }
