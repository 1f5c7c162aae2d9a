"""Tests for channel routing of inquiries."""

import asyncio
import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from limer_properties.config import Settings
from limer_properties.inquiry.dispatcher import (
    DeepLink,
    DispatchStatus,
    InquiryDispatcher,
)
from limer_properties.inquiry.messages import compose_message, rent_inquiry
from limer_properties.models import Channel, CompanyContact, InquiryPayload

ENDPOINT = "https://limer.example/api/send-email"


@pytest.fixture
def payload() -> InquiryPayload:
    return rent_inquiry(location="Lekki", bedrooms="3", from_name="Ada", from_email="ada@x.io")


@pytest.fixture
def opened() -> list[DeepLink]:
    return []


class TestDeepLinkChannels:
    async def test_call_opens_tel_link(
        self, company: CompanyContact, payload: InquiryPayload, opened: list[DeepLink]
    ) -> None:
        dispatcher = InquiryDispatcher(navigate=opened.append)

        result = await dispatcher.dispatch(Channel.CALL, company, payload)

        assert result.status is DispatchStatus.OPENED
        assert result.ok
        assert opened == [DeepLink("tel:+2348031234567")]

    async def test_whatsapp_opens_new_window(
        self, company: CompanyContact, payload: InquiryPayload, opened: list[DeepLink]
    ) -> None:
        dispatcher = InquiryDispatcher(navigate=opened.append)

        result = await dispatcher.dispatch(Channel.WHATSAPP, company, payload)

        assert result.link is not None
        assert result.link.new_window
        assert result.link.url.startswith("https://wa.me/2348031234567?text=")
        assert opened == [result.link]

    @pytest.mark.parametrize("channel", [Channel.CALL, Channel.WHATSAPP])
    async def test_missing_phone_is_skipped(
        self, channel: Channel, payload: InquiryPayload, opened: list[DeepLink]
    ) -> None:
        dispatcher = InquiryDispatcher(navigate=opened.append)
        contact = CompanyContact(email="hello@limer.example")

        result = await dispatcher.dispatch(channel, contact, payload)

        assert result.status is DispatchStatus.SKIPPED
        assert not result.ok
        assert opened == []


class TestEmailChannel:
    async def test_missing_address_is_invalid(self, payload: InquiryPayload) -> None:
        dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT)

        result = await dispatcher.dispatch(Channel.EMAIL, CompanyContact(phone="1"), payload)

        assert result.status is DispatchStatus.INVALID
        assert result.error == "No email address is available for this inquiry."

    async def test_blank_subject_is_invalid(self, company: CompanyContact) -> None:
        dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT)

        result = await dispatcher.dispatch(
            Channel.EMAIL, company, InquiryPayload(subject="  ", intro="Hi")
        )

        assert result.status is DispatchStatus.INVALID

    async def test_mailto_fallback_without_endpoint(
        self, company: CompanyContact, payload: InquiryPayload, opened: list[DeepLink]
    ) -> None:
        dispatcher = InquiryDispatcher(navigate=opened.append)

        result = await dispatcher.dispatch(Channel.EMAIL, company, payload)

        assert result.status is DispatchStatus.OPENED
        assert opened[0].url.startswith("mailto:hello@limer.example?subject=")

    async def test_posts_composed_message(
        self, company: CompanyContact, payload: InquiryPayload, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=ENDPOINT, method="POST", json={"success": True, "messageId": "msg_123"}
        )
        dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT)

        result = await dispatcher.dispatch(Channel.EMAIL, company, payload)

        assert result.status is DispatchStatus.SENT
        assert result.send_result is not None
        assert result.send_result.message_id == "msg_123"
        request = httpx_mock.get_request()
        assert request is not None
        assert json.loads(request.content) == {
            "to": "hello@limer.example",
            "subject": "Property Rental Inquiry",
            "message": compose_message(payload),
            "fromEmail": "ada@x.io",
            "fromName": "Ada",
        }
        assert not dispatcher.is_sending

    async def test_endpoint_error_is_reported(
        self, company: CompanyContact, payload: InquiryPayload, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=ENDPOINT,
            method="POST",
            status_code=500,
            json={"error": "Failed to send email", "details": {"name": "validation_error"}},
        )
        dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT)

        result = await dispatcher.dispatch(Channel.EMAIL, company, payload)

        assert result.status is DispatchStatus.FAILED
        assert result.error == "Failed to send email"
        assert result.send_result is not None
        assert result.send_result.details == {"name": "validation_error"}

    async def test_unreachable_endpoint(
        self, company: CompanyContact, payload: InquiryPayload, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT)

        result = await dispatcher.dispatch(Channel.EMAIL, company, payload)

        assert result.status is DispatchStatus.FAILED
        assert result.error == "Could not reach the email service."
        assert dispatcher.can_close

    async def test_second_send_while_in_flight_is_busy(
        self, company: CompanyContact, payload: InquiryPayload
    ) -> None:
        release = asyncio.Event()
        requests: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            await release.wait()
            return httpx.Response(200, json={"success": True, "messageId": "msg_1"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            dispatcher = InquiryDispatcher(endpoint_url=ENDPOINT, client=client)

            first = asyncio.create_task(dispatcher.dispatch(Channel.EMAIL, company, payload))
            while not requests:
                await asyncio.sleep(0)
            assert dispatcher.is_sending
            assert not dispatcher.can_close

            second = await dispatcher.dispatch(Channel.EMAIL, company, payload)
            assert second.status is DispatchStatus.BUSY

            release.set()
            result = await first

        assert result.status is DispatchStatus.SENT
        assert len(requests) == 1
        assert not dispatcher.is_sending


class TestFromSettings:
    def test_reads_endpoint(self) -> None:
        settings = Settings(email_endpoint_url=ENDPOINT)
        assert InquiryDispatcher.from_settings(settings).endpoint_url == ENDPOINT
