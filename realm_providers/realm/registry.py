"""Provider registry: read-only, insertion-ordered name -> handle mapping."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Tuple

from ..base.errors import UnknownProviderError
from ..base.handles import Handle


class ProviderRegistry(Mapping):
    """Immutable mapping of provider name to :class:`Handle`.

    Iteration order is discovery order. Names are case-sensitive and unique;
    building a registry from duplicate names raises ``ValueError``. A handle
    was valid when discovered; the remote service may invalidate it later.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Tuple[str, Handle]] = ()) -> None:
        data: Dict[str, Handle] = {}
        for name, handle in entries:
            if name in data:
                raise ValueError(f"Duplicate provider name '{name}'")
            data[name] = handle
        self._entries = data

    def __getitem__(self, name: str) -> Handle:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ProviderRegistry({list(self._entries)!r})"

    def names(self) -> List[str]:
        """Return provider names in discovery order."""
        return list(self._entries)

    def handle_for(self, name: str) -> Handle:
        """Return the handle for ``name`` or raise :class:`UnknownProviderError`."""
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownProviderError(name, tuple(self._entries)) from None


__all__ = ["ProviderRegistry"]
