"""Transactional email delivery via the Resend HTTP API."""

import html
from typing import Any, Self

import httpx

from limer_properties.config import Settings
from limer_properties.exceptions import EmailDeliveryError
from limer_properties.logging import get_logger

logger = get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
_TIMEOUT = 10.0


def render_inquiry_html(message: str, *, from_name: str | None, from_email: str | None) -> str:
    """Wrap an inquiry message in a minimal HTML body, one paragraph per line."""
    sender_lines = ""
    if from_name:
        sender_lines += f"<p><strong>From:</strong> {html.escape(from_name)}</p>"
    if from_email:
        sender_lines += f"<p><strong>Email:</strong> {html.escape(from_email)}</p>"
    body = "".join(
        f'<p style="margin: 5px 0;">{html.escape(line)}</p>' for line in message.split("\n")
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>New Inquiry from Limer Properties Website</h2>"
        f"{sender_lines}"
        f'<div style="background-color: #f5f5f5; padding: 20px; margin: 20px 0;">{body}</div>'
        '<p style="color: #666; font-size: 12px;">'
        "This email was sent from the Limer Properties website contact form.</p>"
        "</div>"
    )


class ResendEmailSender:
    """Send inquiry emails through Resend."""

    def __init__(
        self,
        *,
        api_key: str,
        from_address: str,
        timeout: float = _TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self.from_address = from_address
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, client: httpx.AsyncClient | None = None
    ) -> Self:
        return cls(
            api_key=settings.resend_api_key.get_secret_value(),
            from_address=settings.email_from,
            timeout=settings.http_timeout_seconds,
            client=client,
        )

    async def send(
        self,
        *,
        to: str,
        subject: str,
        message: str,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> str:
        """Send one email and return the provider's delivery id.

        Raises:
            EmailDeliveryError: If the provider rejects the message or cannot
                be reached. ``details`` carries the provider's error body.
        """
        payload: dict[str, Any] = {
            "from": self.from_address,
            "to": [to],
            "subject": subject,
            "html": render_inquiry_html(message, from_name=from_name, from_email=from_email),
            "text": message,
        }
        if from_email:
            payload["reply_to"] = from_email

        try:
            resp = await self._client.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("email_provider_unreachable", error=str(e))
            raise EmailDeliveryError(
                "Email provider unreachable", details={"message": str(e)}
            ) from e

        try:
            data = resp.json()
        except ValueError:
            data = {"message": resp.text[:200]}

        if resp.status_code >= 400:
            logger.error("email_provider_rejected", status=resp.status_code, details=data)
            raise EmailDeliveryError("Email provider rejected the message", details=data)

        message_id = data.get("id") if isinstance(data, dict) else None
        if not message_id:
            raise EmailDeliveryError("Email provider returned no message id", details=data)

        logger.info("email_sent", message_id=message_id, subject=subject)
        return str(message_id)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
