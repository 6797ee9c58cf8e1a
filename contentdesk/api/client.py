"""Content service client.

One :class:`ContentClient` is created per process (or per CLI command) and
injected into every service.  It attaches the bearer credential, maps
non-2xx responses and transport failures to ContentDesk errors, and applies
the "log in again" policy in one place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Type

import httpx

from contentdesk.config import DEFAULT_API_ORIGIN, DEFAULT_TIMEOUT
from contentdesk.errors import ApiError, AuthError, AuthReason, FetchError

if TYPE_CHECKING:
    from contentdesk.auth.store import CredentialStore

logger = logging.getLogger(__name__)

_REJECTED_STATUSES = (401, 403)


def _error_message(resp: httpx.Response) -> str:
    """Best-effort human message for a failed response."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "error"):
            if data.get(key):
                return str(data[key])
    return f"API error: {resp.status_code}"


class ContentClient:
    """Thin async wrapper around :class:`httpx.AsyncClient`.

    Parameters
    ----------
    credentials : CredentialStore
        Source of the bearer token.  Read before every authenticated call.
    api_origin : str
        Origin of the content service.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        credentials: "CredentialStore",
        api_origin: str = DEFAULT_API_ORIGIN,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.credentials = credentials
        self.api_origin = api_origin.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.api_origin,
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    # -- lifecycle -----------------------------------------------------------

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ContentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -- requests ------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        payload: Any = None,
        auth: bool = True,
        error: Type[ApiError] = ApiError,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises :class:`AuthError` when an authenticated call has no valid
        credential or the service rejects it, and *error* for any other
        failure.  An empty 2xx body decodes to *None*.
        """
        headers: dict[str, str] = {}
        if auth:
            self.credentials.require()
            headers = self.credentials.attach(headers)

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            resp = await self._http.request(
                method, path, params=params or None, json=payload, headers=headers
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise error(f"Network error: {exc}") from exc

        if auth and resp.status_code in _REJECTED_STATUSES:
            raise AuthError(AuthReason.REJECTED, _error_message(resp))
        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("%s %s -> %d: %s", method, path, resp.status_code, message)
            raise error(message, status_code=resp.status_code)

        logger.debug("%s %s -> %d", method, path, resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise error("Invalid response format", status_code=resp.status_code) from exc

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        *,
        auth: bool = True,
        error: Type[ApiError] = FetchError,
    ) -> Any:
        return await self.request("GET", path, params=params, auth=auth, error=error)

    async def post(
        self,
        path: str,
        payload: Any = None,
        *,
        auth: bool = True,
        error: Type[ApiError] = ApiError,
    ) -> Any:
        return await self.request("POST", path, payload=payload, auth=auth, error=error)
