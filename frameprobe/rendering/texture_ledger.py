"""Ordered record of texture deltas awaiting a render."""

from __future__ import annotations

from collections.abc import Iterator

from frameprobe.api.textures import TexturesDelta


class TextureDeltaLedger:
    """Append-only sequence of per-frame texture deltas.

    Entries must be replayed in insertion order: a later update to the same
    id supersedes an earlier one, and an id may be allocated in one delta and
    freed in a later one. Only a render clears the ledger.
    """

    def __init__(self) -> None:
        self._entries: list[TexturesDelta] = []

    def append(self, delta: TexturesDelta) -> None:
        self._entries.append(delta)

    def entries(self) -> tuple[TexturesDelta, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TexturesDelta]:
        return iter(tuple(self._entries))


__all__ = ["TextureDeltaLedger"]
