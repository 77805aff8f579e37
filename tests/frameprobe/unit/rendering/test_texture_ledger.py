from __future__ import annotations

from frameprobe.api.textures import TexturesDelta
from frameprobe.rendering.texture_ledger import TextureDeltaLedger
from tests.frameprobe.conftest import white_texture_delta


def test_ledger_preserves_insertion_order() -> None:
    ledger = TextureDeltaLedger()
    first = white_texture_delta(1)
    second = TexturesDelta(free=(1,))
    third = TexturesDelta()

    for delta in (first, second, third):
        ledger.append(delta)

    assert ledger.entries() == (first, second, third)
    assert list(ledger) == [first, second, third]
    assert len(ledger) == 3


def test_ledger_keeps_empty_deltas() -> None:
    ledger = TextureDeltaLedger()

    ledger.append(TexturesDelta())

    assert len(ledger) == 1


def test_entries_snapshot_is_unaffected_by_later_appends() -> None:
    ledger = TextureDeltaLedger()
    ledger.append(TexturesDelta())
    snapshot = ledger.entries()

    ledger.append(TexturesDelta())

    assert len(snapshot) == 1
    assert len(ledger) == 2


def test_clear_empties_ledger() -> None:
    ledger = TextureDeltaLedger()
    ledger.append(white_texture_delta())

    ledger.clear()

    assert len(ledger) == 0
    assert ledger.entries() == ()
