"""Selection Set: the operator's unsaved choice of entities for the next job."""

from __future__ import annotations

from typing import Hashable, Iterable, Iterator


class SelectionSet:
    """In-memory set of entity ids, kept in selection order.

    Membership is keyed by id, so two distinct objects describing the same
    entity are the same member.  Never persisted.
    """

    def __init__(self, ids: Iterable[Hashable] = ()) -> None:
        self._ids: dict[Hashable, None] = dict.fromkeys(ids)

    def toggle(self, entity_id: Hashable) -> bool:
        """Add *entity_id* if absent, remove it if present.

        Returns *True* when the id is selected after the call.
        """
        if entity_id in self._ids:
            del self._ids[entity_id]
            return False
        self._ids[entity_id] = None
        return True

    def clear(self) -> None:
        self._ids.clear()

    def select_all(self, ids: Iterable[Hashable]) -> None:
        """Replace the selection with exactly *ids*."""
        self._ids = dict.fromkeys(ids)

    def contains(self, entity_id: Hashable) -> bool:
        return entity_id in self._ids

    def size(self) -> int:
        return len(self._ids)

    def ids(self) -> list[Hashable]:
        return list(self._ids)

    # -- container protocol --------------------------------------------------

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._ids))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return set(self._ids) == set(other._ids)

    def __repr__(self) -> str:
        return f"SelectionSet({list(self._ids)!r})"
