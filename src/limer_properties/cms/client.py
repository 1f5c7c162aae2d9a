"""Read-only Sanity content store client.

Queries are GROQ strings sent to the HTTP query endpoint; the ``result``
member of the response is returned as plain JSON data.
"""

import json
from types import TracebackType
from typing import Any, Self

import httpx

from limer_properties.config import Settings
from limer_properties.exceptions import ContentStoreError
from limer_properties.logging import get_logger

logger = get_logger(__name__)

_TIMEOUT = 10.0


def _error_description(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return str(error.get("description") or error.get("type") or error)
    return str(error or data)


class SanityClient:
    """Minimal async GROQ client for one project/dataset."""

    def __init__(
        self,
        query_url: str,
        *,
        token: str = "",
        timeout: float = _TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            query_url: Query endpoint, e.g.
                ``https://<project>.apicdn.sanity.io/v2024-01-01/data/query/production``.
            token: Optional read token.
            timeout: Request timeout in seconds (ignored for injected clients).
            client: Shared httpx client. Owned (and closed) by the caller.
        """
        self.query_url = query_url
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers

    @classmethod
    def from_settings(
        cls, settings: Settings, *, client: httpx.AsyncClient | None = None
    ) -> Self:
        return cls(
            settings.sanity_query_url,
            token=settings.sanity_token.get_secret_value(),
            timeout=settings.http_timeout_seconds,
            client=client,
        )

    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a GROQ query and return its ``result``.

        Query parameters are JSON-encoded as ``$name`` URL parameters.

        Raises:
            ContentStoreError: On transport failure, a non-200 response, or a
                body without a ``result`` member.
        """
        url_params = {"query": query}
        for name, value in (params or {}).items():
            url_params[f"${name}"] = json.dumps(value)

        try:
            resp = await self._client.get(self.query_url, params=url_params, headers=self._headers)
        except httpx.HTTPError as e:
            logger.warning("content_query_transport_error", error=str(e))
            raise ContentStoreError(f"Content store unreachable: {e}") from e

        if resp.status_code != 200:
            description = _error_description(resp)
            logger.warning(
                "content_query_failed",
                status=resp.status_code,
                error=description,
            )
            raise ContentStoreError(
                f"Content query failed ({resp.status_code}): {description}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ContentStoreError("Content store returned invalid JSON") from e
        if not isinstance(data, dict) or "result" not in data:
            raise ContentStoreError("Content store response has no result")
        return data["result"]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
