"""Review session states."""

from __future__ import annotations

from enum import Enum


class ReviewState(str, Enum):
    """Lifecycle of a review session.

    ``IDLE -> LOADING -> LOADED | EMPTY | ERRORED``.  A ``LOADED`` session is
    either viewing or editing its item (see ``ReviewSession.editing``).
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERRORED = "errored"
