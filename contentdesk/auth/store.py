"""File-based JSON storage for the admin credential.

The credential lives in ``~/.contentdesk/credentials.json`` so that it
survives across CLI invocations.  It is read on every access and only
written by :meth:`CredentialStore.login` and :meth:`CredentialStore.clear`.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable, Optional

import httpx

from contentdesk.api.schemas import LoginResponse, parse_payload
from contentdesk.auth.models import Credential
from contentdesk.config import DEFAULT_API_ORIGIN, DEFAULT_TIMEOUT
from contentdesk.errors import ApiError, AuthError, AuthReason

logger = logging.getLogger(__name__)

LOGIN_PATH = "/admin/login"


class CredentialStore:
    """Holds the bearer credential used to authorize every admin request.

    Parameters
    ----------
    base_dir : str | Path | None
        Directory for ``credentials.json``.  Defaults to ``~/.contentdesk``.
    api_origin : str
        Origin of the content service, used by :meth:`login`.
    clock : callable
        Returns the current time in epoch seconds.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        api_origin: str = DEFAULT_API_ORIGIN,
        clock: Callable[[], float] = time.time,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".contentdesk"
        self._base.mkdir(parents=True, exist_ok=True)
        self._path = self._base / "credentials.json"
        self._api_origin = api_origin.rstrip("/")
        self._clock = clock
        self._transport = transport
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read(self) -> Optional[Credential]:
        if not self._path.exists():
            return None
        try:
            return Credential.from_dict(json.loads(self._path.read_text()))
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError):
            return None

    def _write(self, credential: Credential) -> None:
        self._path.write_text(json.dumps(credential.to_dict(), indent=2))
        self._path.chmod(0o600)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def current(self) -> Optional[Credential]:
        """Return the stored credential, valid or not."""
        return self._read()

    def store(self, token: str, expires_at: int) -> Credential:
        credential = Credential(token=token, expires_at=int(expires_at))
        self._write(credential)
        return credential

    def now(self) -> float:
        return self._clock()

    def is_valid(self) -> bool:
        """True iff a credential exists and has not yet expired."""
        credential = self._read()
        return credential is not None and credential.is_valid(self._clock())

    def require(self) -> Credential:
        """Return a valid credential or raise :class:`AuthError`."""
        credential = self._read()
        if credential is None or not credential.token:
            raise AuthError(AuthReason.MISSING)
        if not credential.is_valid(self._clock()):
            raise AuthError(AuthReason.EXPIRED)
        return credential

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
        logger.info("Stored credential cleared")

    def attach(self, headers: Optional[dict[str, str]] = None) -> dict[str, str]:
        """Return a copy of *headers* carrying the bearer token, if any."""
        result = dict(headers or {})
        credential = self._read()
        if credential is not None and credential.token:
            result["Authorization"] = f"Bearer {credential.token}"
        return result

    async def login(self, email: str, password: str) -> Credential:
        """Exchange *email*/*password* for a credential and persist it."""
        url = f"{self._api_origin}{LOGIN_PATH}"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                resp = await client.post(url, json={"email": email, "password": password})
        except httpx.TransportError as exc:
            logger.warning("Login request failed: %s", exc)
            raise AuthError(AuthReason.NETWORK) from exc

        if not resp.is_success:
            message = ""
            try:
                message = resp.json().get("message", "")
            except (ValueError, AttributeError):
                pass
            raise AuthError(
                AuthReason.INVALID_CREDENTIALS,
                message or f"Login failed with status: {resp.status_code}",
            )

        try:
            body = parse_payload(LoginResponse, resp.json())
        except (ValueError, ApiError) as exc:
            raise AuthError(AuthReason.INVALID_CREDENTIALS, "Malformed login response") from exc

        credential = self.store(body.apiKey, int(body.expiresAt))
        logger.info("Logged in as %s", email)
        return credential
