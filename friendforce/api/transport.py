"""HTTP transport for the remote FriendForce API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from friendforce.core.config import Settings
from friendforce.errors import ApiError

CSRF_HEADER = "X-CSRFToken"

logger = logging.getLogger(__name__)


class ApiTransport:
    """Send JSON requests to the API and normalise failures into :class:`ApiError`.

    Session credentials live in the client's cookie jar and go out with every
    request. The anti-forgery header is attached only while the CSRF cookie is
    present. There are no retries, and no timeout unless one is configured.
    """

    def __init__(
        self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ):
        self.settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                cookies=self.settings.initial_cookies,
                timeout=httpx.Timeout(self.settings.request_timeout),
                transport=self._transport,
            )
        return self._client

    def csrf_token(self) -> str | None:
        # The jar may hold the configured token and one set by the server; prefer the last.
        token = None
        for cookie in self.client.cookies.jar:
            if cookie.name == self.settings.csrf_cookie_name and cookie.value:
                token = cookie.value
        return token

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.csrf_token()
        if token:
            headers[CSRF_HEADER] = token
        return headers

    async def request(self, path: str, method: str = "GET", body: Any | None = None) -> Any:
        """Perform a request and return the decoded JSON body, or ``None`` for 204."""

        try:
            response = await self.client.request(
                method, path, headers=self.build_headers(), json=body
            )
        except httpx.HTTPError as exc:
            logger.error(
                "FriendForce API request failed",
                exc_info=exc,
                extra={"method": method, "path": path},
            )
            raise ApiError("Unable to reach the FriendForce API") from exc

        if not response.is_success:
            message = _extract_error_message(response)
            logger.error(
                "FriendForce API error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise ApiError(message, status_code=response.status_code, body=response.text)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                "Invalid JSON in API response",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _extract_error_message(response: httpx.Response) -> str:
    fallback = f"Request failed: {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if detail:
            return str(detail)
    return fallback
