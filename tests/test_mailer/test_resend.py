"""Tests for the Resend email sender."""

import json
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from pytest_httpx import HTTPXMock

from limer_properties.config import Settings
from limer_properties.exceptions import EmailDeliveryError
from limer_properties.mailer.resend import (
    RESEND_API_URL,
    ResendEmailSender,
    render_inquiry_html,
)


@pytest_asyncio.fixture
async def sender() -> AsyncGenerator[ResendEmailSender, None]:
    s = ResendEmailSender(api_key="re_test_key", from_address="Limer <noreply@limer.example>")
    yield s
    await s.aclose()


class TestRenderInquiryHtml:
    def test_escapes_user_text(self) -> None:
        body = render_inquiry_html(
            "Hi <b>there</b>\nSecond line", from_name="Ada & Co", from_email=None
        )

        assert "Hi &lt;b&gt;there&lt;/b&gt;" in body
        assert "Second line</p>" in body
        assert "<strong>From:</strong> Ada &amp; Co" in body
        assert "<strong>Email:</strong>" not in body


class TestSend:
    async def test_posts_message_and_returns_id(
        self, sender: ResendEmailSender, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=RESEND_API_URL, method="POST", json={"id": "msg_123"})

        message_id = await sender.send(
            to="hello@limer.example",
            subject="Property Inquiry",
            message="Hello",
            from_email="ada@x.io",
            from_name="Ada",
        )

        assert message_id == "msg_123"
        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == "Bearer re_test_key"
        body = json.loads(request.content)
        assert body["from"] == "Limer <noreply@limer.example>"
        assert body["to"] == ["hello@limer.example"]
        assert body["subject"] == "Property Inquiry"
        assert body["text"] == "Hello"
        assert body["reply_to"] == "ada@x.io"
        assert "Ada" in body["html"]

    async def test_no_reply_to_without_sender_email(
        self, sender: ResendEmailSender, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=RESEND_API_URL, method="POST", json={"id": "msg_1"})

        await sender.send(to="hello@limer.example", subject="Hi", message="Hello")

        request = httpx_mock.get_request()
        assert request is not None
        assert "reply_to" not in json.loads(request.content)

    async def test_provider_rejection_carries_details(
        self, sender: ResendEmailSender, httpx_mock: HTTPXMock
    ) -> None:
        error_body = {"statusCode": 422, "name": "validation_error", "message": "Invalid `to`"}
        httpx_mock.add_response(url=RESEND_API_URL, method="POST", status_code=422, json=error_body)

        with pytest.raises(EmailDeliveryError) as exc_info:
            await sender.send(to="not-an-email", subject="Hi", message="Hello")
        assert exc_info.value.details == error_body

    async def test_unreachable_provider(
        self, sender: ResendEmailSender, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectTimeout("timed out"))

        with pytest.raises(EmailDeliveryError, match="unreachable"):
            await sender.send(to="hello@limer.example", subject="Hi", message="Hello")

    async def test_missing_id_is_an_error(
        self, sender: ResendEmailSender, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=RESEND_API_URL, method="POST", json={})

        with pytest.raises(EmailDeliveryError, match="no message id"):
            await sender.send(to="hello@limer.example", subject="Hi", message="Hello")


class TestFromSettings:
    async def test_uses_configured_key_and_sender(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=RESEND_API_URL, method="POST", json={"id": "msg_9"})
        settings = Settings(resend_api_key="re_from_env", email_from="Ops <ops@limer.example>")

        sender = ResendEmailSender.from_settings(settings)
        try:
            await sender.send(to="hello@limer.example", subject="Hi", message="Hello")
        finally:
            await sender.aclose()

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == "Bearer re_from_env"
        assert json.loads(request.content)["from"] == "Ops <ops@limer.example>"
