"""Synchronous httpx-backed implementation of :class:`~itemrest.client.HttpApi`.

:class:`SyncClient` wraps :class:`httpx.Client` and layers on:

- **Auth injection** -- a bearer token or API key resolved once from the
  profile's :class:`~itemrest.models.AuthConfig` and sent with every
  request whose options do not set ``is_authenticated`` to ``False``.
- **Default headers** -- ``Accept: application/json`` plus the profile's
  ``headers``; per-request ``headers`` override both.
- **Error mapping** -- 401/403, 404, and other HTTP error statuses become
  :class:`~itemrest.exceptions.AuthError`,
  :class:`~itemrest.exceptions.NotFoundError`, and
  :class:`~itemrest.exceptions.ServerError`; network failures become
  :class:`~itemrest.exceptions.ConnectionError_`.
- **Body decoding** -- JSON bodies are decoded, empty bodies become
  ``None``, anything else is returned as text.

Requests are sent exactly once; there is no retry.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from itemrest.client.protocol import RequestOptions
from itemrest.config import resolve_credential
from itemrest.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from itemrest.models import Profile
from itemrest.output import get_output


class SyncClient:
    """Blocking HTTP client for item APIs.

    Must be used as a context manager so that the underlying transport is
    opened and closed.

    Args:
        profile: The connection profile (``base_url``, auth, request
            settings, default headers).

    Example::

        with SyncClient(profile) as http:
            orders = create_primary_api(http, "order", "orders")
            orders.all({})
    """

    def __init__(self, profile: Profile) -> None:
        self._profile = profile
        self._auth_headers: dict[str, str] = {}
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        config = self._profile.request
        self._auth_headers = self._resolve_auth_headers()
        self._client = httpx.Client(
            base_url=self._profile.base_url or "",
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # HttpApi
    # ------------------------------------------------------------------ #

    def get(self, path: str, options: Optional[RequestOptions] = None) -> Any:
        return self.request("GET", path, options=options)

    def post(self, path: str, body: Any = None, options: Optional[RequestOptions] = None) -> Any:
        return self.request("POST", path, body=body, options=options)

    def put(self, path: str, body: Any = None, options: Optional[RequestOptions] = None) -> Any:
        return self.request("PUT", path, body=body, options=options)

    def delete(self, path: str, options: Optional[RequestOptions] = None) -> Any:
        return self.request("DELETE", path, options=options)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """Send one request and return the decoded response body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: URL path appended to the profile's ``base_url``.
            body: JSON-serialisable request body, or ``None``.
            options: Request options: ``params``, ``headers``, and
                ``is_authenticated`` (default ``True``).

        Returns:
            The decoded JSON body, the raw text for non-JSON bodies, or
            ``None`` for an empty body.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other 4xx / 5xx status.
            ConnectionError_: On network or timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        options = dict(options or {})
        headers: dict[str, str] = {"Accept": "application/json"}
        headers.update(self._profile.headers)
        if options.get("is_authenticated", True):
            headers.update(self._auth_headers)
        headers.update(options.get("headers") or {})
        params = {k: v for k, v in (options.get("params") or {}).items() if v is not None}

        output = get_output()
        output.debug(f"{method} {path} params={params}")

        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "headers": headers,
            "params": params,
        }
        if body is not None:
            kwargs["json"] = body

        try:
            response = self._client.request(**kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection failed: {method} {path}: {exc}") from exc

        output.debug(f"HTTP {response.status_code} {method} {path}")
        self._map_response_error(response)
        return decode_body(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _resolve_auth_headers(self) -> dict[str, str]:
        auth = self._profile.auth
        if auth is None:
            return {}
        credential = resolve_credential(auth.source)
        if auth.type == "bearer":
            return {auth.header or "Authorization": f"Bearer {credential}"}
        return {auth.header or "X-API-Key": credential}

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg, status_code=status)


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when possible, text otherwise, ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
