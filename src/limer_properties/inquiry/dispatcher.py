"""Route an inquiry to the chosen contact channel."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

import httpx

from limer_properties.config import Settings
from limer_properties.inquiry.messages import compose_message, mailto_link, tel_link, whatsapp_link
from limer_properties.logging import get_logger
from limer_properties.models import Channel, CompanyContact, InquiryPayload, SendResult

logger = get_logger(__name__)

_TIMEOUT = 10.0


class DispatchStatus(str, Enum):
    """What a dispatch did."""

    OPENED = "opened"  # deep link handed to the navigator
    SENT = "sent"
    FAILED = "failed"
    INVALID = "invalid"
    SKIPPED = "skipped"  # channel unavailable for this contact
    BUSY = "busy"


@dataclass(frozen=True)
class DeepLink:
    """An outbound link and whether it opens in a new browsing context."""

    url: str
    new_window: bool = False


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    link: DeepLink | None = None
    send_result: SendResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (DispatchStatus.OPENED, DispatchStatus.SENT)


Navigator = Callable[[DeepLink], None]


def _log_navigation(link: DeepLink) -> None:
    logger.info("deep_link_ready", scheme=link.url.split(":", 1)[0], new_window=link.new_window)


class InquiryDispatcher:
    """Turns a chosen channel plus an inquiry into an external action.

    ``call`` and ``whatsapp`` hand a deep link to ``navigate``; ``email``
    posts to the email-send endpoint (or falls back to a ``mailto:`` link when
    no endpoint is configured). At most one email send is in flight per
    dispatcher; none of the side effects are retried.
    """

    def __init__(
        self,
        *,
        endpoint_url: str = "",
        navigate: Navigator | None = None,
        timeout: float = _TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._navigate = navigate or _log_navigation
        self._client = client
        self._timeout = timeout
        self._sending = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        navigate: Navigator | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> Self:
        return cls(
            endpoint_url=settings.email_endpoint_url,
            navigate=navigate,
            timeout=settings.http_timeout_seconds,
            client=client,
        )

    @property
    def is_sending(self) -> bool:
        """Whether an email send is in flight (submission should be disabled)."""
        return self._sending

    @property
    def can_close(self) -> bool:
        """Closing the surrounding form is blocked while a send is in flight."""
        return not self._sending

    async def dispatch(
        self, channel: Channel, contact: CompanyContact, payload: InquiryPayload
    ) -> DispatchResult:
        if channel is Channel.CALL:
            return self._call(contact)
        if channel is Channel.WHATSAPP:
            return self._whatsapp(contact, payload)
        return await self._email(contact, payload)

    def _open(self, link: DeepLink) -> DispatchResult:
        self._navigate(link)
        return DispatchResult(status=DispatchStatus.OPENED, link=link)

    def _call(self, contact: CompanyContact) -> DispatchResult:
        if not contact.phone.strip():
            logger.debug("dispatch_skipped", channel="call", reason="no_phone")
            return DispatchResult(status=DispatchStatus.SKIPPED)
        return self._open(DeepLink(tel_link(contact.phone)))

    def _whatsapp(self, contact: CompanyContact, payload: InquiryPayload) -> DispatchResult:
        if not contact.phone.strip():
            logger.debug("dispatch_skipped", channel="whatsapp", reason="no_phone")
            return DispatchResult(status=DispatchStatus.SKIPPED)
        link = DeepLink(whatsapp_link(contact.phone, compose_message(payload)), new_window=True)
        return self._open(link)

    async def _email(self, contact: CompanyContact, payload: InquiryPayload) -> DispatchResult:
        if not contact.email.strip():
            return DispatchResult(
                status=DispatchStatus.INVALID,
                error="No email address is available for this inquiry.",
            )
        if not payload.subject.strip():
            return DispatchResult(status=DispatchStatus.INVALID, error="A subject is required.")

        message = compose_message(payload)
        if not self.endpoint_url:
            return self._open(DeepLink(mailto_link(contact.email, payload.subject, message)))

        if self._sending:
            return DispatchResult(
                status=DispatchStatus.BUSY,
                error="An email is already being sent.",
            )

        self._sending = True
        try:
            result = await self._post_email(contact.email, payload, message)
        finally:
            self._sending = False

        if result.success:
            return DispatchResult(status=DispatchStatus.SENT, send_result=result)
        return DispatchResult(status=DispatchStatus.FAILED, send_result=result, error=result.error)

    async def _post_email(self, to: str, payload: InquiryPayload, message: str) -> SendResult:
        body: dict[str, Any] = {"to": to, "subject": payload.subject, "message": message}
        if payload.from_email:
            body["fromEmail"] = payload.from_email
        if payload.from_name:
            body["fromName"] = payload.from_name

        try:
            if self._client is not None:
                resp = await self._client.post(self.endpoint_url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self.endpoint_url, json=body)
        except httpx.HTTPError as e:
            logger.warning("inquiry_email_transport_error", error=str(e))
            return SendResult(success=False, error="Could not reach the email service.")

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.is_success and data.get("success"):
            logger.info("inquiry_email_sent", message_id=data.get("messageId"))
            return SendResult(success=True, message_id=data.get("messageId"))

        error = data.get("error") or f"Email service returned {resp.status_code}"
        logger.warning("inquiry_email_failed", status=resp.status_code, error=error)
        return SendResult(success=False, error=error, details=data.get("details"))
