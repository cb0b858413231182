"""
Downstream Boundary Tests

Vision prompt selection and call, archive keys and writes, SMS replies.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from services.archive import S3ArchiveWriter, build_object_key
from services.reply import SMSReplySender, extract_reply_text
from services.vision import (
    MEDIA_PROMPTS,
    OpenAIVisionClient,
    VisionError,
    build_vision_request,
    select_prompt,
)

MEDIA_MESSAGE = {
    "MediaContentType": "image/jpeg",
    "MediaUrl": "https://host/media/ME1",
    "MessageSid": "MM1",
    "AccountSid": "AC1",
    "MediaId": "ME1",
    "Body": " Dog ",
    "From": "+1555",
    "To": "+1666",
    "timestamp": 1707500000,
}

ANALYZED = {
    **MEDIA_MESSAGE,
    "openAIResult": {"choices": [{"message": {"content": "A golden retriever."}}]},
}


def _mock_async_client(response=None, error=None):
    instance = AsyncMock()
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    if error is not None:
        instance.post.side_effect = error
    else:
        instance.post.return_value = response
    return instance


def _response(status_code, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    response.text = "error body"
    return response


class TestPromptSelection:

    def test_keyword_trimmed_and_lowercased(self):
        assert select_prompt(" Dog ") == MEDIA_PROMPTS["dog"]

    @pytest.mark.parametrize("body", [None, "", "unknown keyword"])
    def test_default_prompt(self, body):
        assert select_prompt(body) == MEDIA_PROMPTS["default"]

    def test_request_shape(self):
        request = build_vision_request(MEDIA_MESSAGE, "gpt-4o")
        content = request["messages"][0]["content"]

        assert request["model"] == "gpt-4o"
        assert request["max_tokens"] == 1024
        assert content[0] == {"type": "text", "text": MEDIA_PROMPTS["dog"]}
        assert content[1]["image_url"] == {"url": "https://host/media/ME1", "detail": "low"}


class TestVisionClient:

    @pytest.mark.asyncio
    async def test_returns_completion_json(self):
        completion = {"choices": [{"message": {"content": "caption"}}]}
        with patch("httpx.AsyncClient") as mock_class:
            mock_class.return_value = _mock_async_client(_response(200, completion))
            client = OpenAIVisionClient(api_key="sk-test")
            result = await client.analyze({"model": "m"})

        assert result == completion

    @pytest.mark.asyncio
    async def test_non_200_raises_vision_error(self):
        with patch("httpx.AsyncClient") as mock_class:
            mock_class.return_value = _mock_async_client(_response(429))
            client = OpenAIVisionClient(api_key="sk-test")
            with pytest.raises(VisionError):
                await client.analyze({"model": "m"})

    @pytest.mark.asyncio
    async def test_request_error_raises_vision_error(self):
        with patch("httpx.AsyncClient") as mock_class:
            mock_class.return_value = _mock_async_client(error=httpx.TimeoutException("slow"))
            client = OpenAIVisionClient(api_key="sk-test")
            with pytest.raises(VisionError):
                await client.analyze({"model": "m"})

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(VisionError):
            await OpenAIVisionClient(api_key="").analyze({})


class TestArchive:

    NOW = datetime(2024, 2, 9, 17, 30, tzinfo=timezone.utc)

    def test_key_for_analyzed_media(self):
        assert build_object_key(ANALYZED, self.NOW) == "2024-02-09/1707500000-MM1/ME1.json"

    def test_key_for_plain_message(self):
        message = {"MessageSid": "MM1", "timestamp": 1707500000, "Body": "hi"}
        assert build_object_key(message, self.NOW) == "2024-02-09/1707500000-MM1/message.json"

    @pytest.mark.asyncio
    async def test_save_puts_json_object(self):
        client = MagicMock()
        writer = S3ArchiveWriter(bucket="archive", client=client)

        assert await writer.save(ANALYZED, self.NOW) is True

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "archive"
        assert kwargs["Key"] == "2024-02-09/1707500000-MM1/ME1.json"
        assert kwargs["ContentType"] == "application/json"

    @pytest.mark.asyncio
    async def test_save_failure_reported_not_raised(self):
        client = MagicMock()
        client.put_object.side_effect = RuntimeError("denied")
        writer = S3ArchiveWriter(bucket="archive", client=client)

        assert await writer.save(ANALYZED, self.NOW) is False


class TestReply:

    def test_extract_reply_text(self):
        assert extract_reply_text(ANALYZED) == "A golden retriever."
        assert extract_reply_text(MEDIA_MESSAGE) is None
        assert extract_reply_text({"openAIResult": {"choices": []}}) is None

    @pytest.mark.asyncio
    async def test_disabled_by_flag(self):
        with patch("httpx.AsyncClient") as mock_class:
            sender = SMSReplySender("AC1", "token", enabled=False)
            result = await sender.send(ANALYZED)

        assert result.status == "disabled"
        mock_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_skipped_without_analysis(self):
        sender = SMSReplySender("AC1", "token", enabled=True)
        assert (await sender.send(MEDIA_MESSAGE)).status == "skipped"

    @pytest.mark.asyncio
    async def test_reply_goes_back_to_sender(self):
        with patch("httpx.AsyncClient") as mock_class:
            instance = _mock_async_client(_response(201, {"sid": "SM9"}))
            mock_class.return_value = instance
            sender = SMSReplySender("AC1", "token", enabled=True)
            result = await sender.send(ANALYZED)

        assert result.status == "sent"
        assert result.provider_message_id == "SM9"
        call = instance.post.call_args
        assert call.args[0].endswith("/Accounts/AC1/Messages.json")
        assert call.kwargs["data"] == {"From": "+1666", "To": "+1555", "Body": "A golden retriever."}
        assert call.kwargs["auth"] == ("AC1", "token")

    @pytest.mark.asyncio
    async def test_provider_error_is_failed_result(self):
        with patch("httpx.AsyncClient") as mock_class:
            mock_class.return_value = _mock_async_client(_response(400))
            sender = SMSReplySender("AC1", "token", enabled=True)
            result = await sender.send(ANALYZED)

        assert result.status == "failed"
