# src/task_tally/asana/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """A single upstream call failed (transport, HTTP status, JSON or API error body)."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


def _api_error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if not errors:
        return None
    first = errors[0] if isinstance(errors, list) else errors
    if isinstance(first, dict):
        return str(first.get("message") or "Unknown API error")
    return str(first)


class AsanaClient:
    """
    Bearer-authenticated JSON client for the Asana REST API.

    The access token is read once (from Settings) and never changes for the
    lifetime of the client. No retries: every failure surfaces as UpstreamError.
    """

    def __init__(
        self,
        access_token: str | None,
        *,
        base_url: str = "https://app.asana.com/api/1.0",
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not access_token or not str(access_token).strip():
            raise RuntimeError("Asana access token is not set. Set TALLY_ASANA_ACCESS_TOKEN in your .env.")

        if not base_url.strip():
            raise RuntimeError("Asana base URL is not set. Set TALLY_ASANA_BASE_URL in your .env.")

        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            headers={
                "Authorization": f"Bearer {access_token.strip()}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds)),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> AsanaClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _check_same_origin(self, url: str) -> None:
        base = self._client.base_url
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise UpstreamError(f"Invalid URL from Asana: {e}", url=url) from e
        if (parsed.scheme, parsed.host, parsed.port) != (base.scheme, base.host, base.port):
            raise UpstreamError(f"Refusing to follow URL outside {base.scheme}://{base.host}", url=url)

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Execute a GET request and return the decoded JSON body."""
        # Relative paths join onto the base URL; absolute next_page URIs pass through
        # only when they point at the API host (the bearer token goes with them).
        if url.startswith(("http://", "https://")):
            target = url
            self._check_same_origin(url)
        else:
            target = url.lstrip("/")
        logger.debug("GET %s params=%s", url, params)

        try:
            resp = self._client.get(target, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Asana request failed: {e.__class__.__name__}: {e}", url=url) from e

        try:
            body = resp.json()
        except ValueError as e:
            if resp.is_error:
                raise UpstreamError(
                    f"Asana returned HTTP {resp.status_code}", url=url, status_code=resp.status_code
                ) from e
            raise UpstreamError("Asana returned a non-JSON body", url=url, status_code=resp.status_code) from e

        api_error = _api_error_message(body)
        if resp.is_error or api_error:
            message = api_error or f"HTTP {resp.status_code}"
            raise UpstreamError(f"Asana API error: {message}", url=url, status_code=resp.status_code)

        return body
