"""Credential model."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class Credential:
    """Bearer token issued by ``/admin/login``.

    ``expires_at`` is in epoch seconds.  A credential is valid only while
    ``expires_at`` is strictly in the future.
    """

    token: str
    expires_at: int

    def is_valid(self, now: Optional[float] = None) -> bool:
        if not self.token:
            return False
        now = time.time() if now is None else now
        return self.expires_at > now

    def seconds_left(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        return max(int(self.expires_at - now), 0)

    @property
    def masked(self) -> str:
        """Token prefix safe for display."""
        return f"{self.token[:6]}..." if len(self.token) > 6 else "***"

    def to_dict(self) -> dict:
        return {"apiKey": self.token, "expiresAt": self.expires_at}

    @staticmethod
    def from_dict(d: dict) -> "Credential":
        return Credential(token=str(d["apiKey"]), expires_at=int(float(d["expiresAt"])))
