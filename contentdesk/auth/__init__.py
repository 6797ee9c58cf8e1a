"""Admin authentication: the bearer credential and its durable store."""

from contentdesk.auth.models import Credential
from contentdesk.auth.store import CredentialStore

__all__ = ["Credential", "CredentialStore"]
