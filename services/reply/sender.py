"""
SMS Reply Sender

Sends the vision model's answer back to the original sender.
No formatting intelligence. No retries. No logic beyond the feature flag.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

import httpx

logger = logging.getLogger(__name__)

ReplyStatus = Literal["sent", "disabled", "skipped", "failed"]


class SMSSenderError(Exception):
    """Failed to send a reply SMS."""
    pass


@dataclass
class ReplyResult:
    status: ReplyStatus
    provider_message_id: Optional[str] = None
    error: Optional[str] = None


def extract_reply_text(message: dict[str, Any]) -> Optional[str]:
    """openAIResult.choices[0].message.content, or None when absent."""
    try:
        return message["openAIResult"]["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None


class SMSReplySender:
    """
    Replies through the SMS provider's Messages REST API.

    The reply goes from the number that received the message to the number
    that sent it.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        enabled: bool = False,
        api_base: str = "https://api.twilio.com/2010-04-01",
        timeout_s: float = 30.0,
    ):
        self.account_sid = account_sid
        self._auth_token = auth_token
        self.enabled = enabled
        self.api_base = api_base.rstrip("/")
        self.timeout_s = timeout_s

    async def send(self, message: dict[str, Any]) -> ReplyResult:
        """
        Send the analysis text back as an SMS.

        If the provider fails → log and return a failed result.

        Args:
            message: Analysis-channel message (From, To, openAIResult)

        Returns:
            ReplyResult
        """
        text = extract_reply_text(message)
        if text is None:
            logger.info("Message has no analysis text, no reply sent")
            return ReplyResult(status="skipped")

        if not self.enabled:
            logger.info("SMS sending is OFF per the SEND_SMS setting")
            return ReplyResult(status="disabled")

        try:
            result = await self._post(
                from_number=message.get("To"),
                to_number=message.get("From"),
                body=text,
            )
        except SMSSenderError as e:
            logger.error(
                f"Failed to send reply SMS: {e}",
                exc_info=True,
                extra={"message_sid": message.get("MessageSid")},
            )
            return ReplyResult(status="failed", error=str(e))

        logger.info(
            "Reply SMS sent",
            extra={
                "message_sid": message.get("MessageSid"),
                "reply_sid": result.get("sid"),
            },
        )
        return ReplyResult(status="sent", provider_message_id=result.get("sid"))

    async def _post(self, from_number: str, to_number: str, body: str) -> dict[str, Any]:
        if not self.account_sid:
            raise SMSSenderError("ACCOUNT_SID not configured")

        endpoint = f"{self.api_base}/Accounts/{self.account_sid}/Messages.json"
        form = {"From": from_number, "To": to_number, "Body": body}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    endpoint,
                    data=form,
                    auth=(self.account_sid, self._auth_token),
                    timeout=self.timeout_s,
                )
        except httpx.RequestError as e:
            raise SMSSenderError(f"HTTP request failed: {e}")

        if response.status_code not in (200, 201):
            raise SMSSenderError(
                f"SMS API returned {response.status_code}: {response.text}"
            )
        return response.json()
