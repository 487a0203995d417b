from pathlib import Path

import pytest

from sks.as3 import LevelId
from sks.block import BLOCK, DARK, EMPTY, LEVEL_SIZE, LEVEL_WIDTH, PLAYER, background, note
from sks.errors import (
    ExtraLogicBlocks,
    InvalidLength,
    LogicBlockNotAllowed,
    MissingLevelIdentifier,
    UnknownToken,
)
from sks.level import Level


LEVELS = Path(__file__).parent / "levels"


def _read(name: str) -> str:
    return (LEVELS / name).read_text(encoding="utf-8")


def test_new_level_is_blank() -> None:
    level = Level()
    assert level.cells == (EMPTY,) * LEVEL_SIZE
    assert level.dark is False
    assert level.background == "cobble"
    assert level.level_id is None
    assert level.export_raw() == [EMPTY] * LEVEL_SIZE


def test_import_raw_extracts_logic_blocks() -> None:
    raw = [EMPTY] * LEVEL_SIZE
    raw[3] = DARK
    raw[10] = background("waterfall")
    raw[11] = PLAYER
    level = Level.from_raw(raw)
    assert level.dark is True
    assert level.background == "waterfall"
    assert level.cells[3] == EMPTY
    assert level.cells[10] == EMPTY
    assert level.cells[11] == PLAYER
    assert not any(b.is_logic() for b in level.cells)


def test_import_raw_last_background_wins() -> None:
    blocks = Level.from_str(_read("kitchen_sink.lbl.txt"))
    # Row 0 holds M0..M6 in order.
    assert blocks.background == "reserved3"
    assert blocks.dark is True


def test_import_raw_resets_previous_attributes() -> None:
    level = Level(dark=True, background="skullfall")
    level.import_raw([BLOCK] * LEVEL_SIZE)
    assert level.dark is False
    assert level.background == "cobble"


def test_export_places_background_before_dark() -> None:
    level = Level(dark=True, background="concrete")
    level.set_block(0, BLOCK)
    out = level.export_raw()
    assert out[0] == BLOCK
    assert out[1] == background("concrete")
    assert out[2] == DARK
    assert out[3:] == [EMPTY] * (LEVEL_SIZE - 3)


def test_export_round_trips_first_empty_placement() -> None:
    raw = [BLOCK] * LEVEL_WIDTH + [EMPTY] * (LEVEL_SIZE - LEVEL_WIDTH)
    raw[LEVEL_WIDTH] = background("skullfall")
    raw[LEVEL_WIDTH + 1] = DARK
    assert Level.from_raw(raw).export_raw() == raw

    only_dark = [BLOCK] * LEVEL_SIZE
    only_dark[100] = DARK
    assert Level.from_raw(only_dark).export_raw() == only_dark


def test_cobble_is_never_written() -> None:
    raw = [EMPTY] * LEVEL_SIZE
    raw[5] = background("cobble")
    level = Level.from_raw(raw)
    assert level.background == "cobble"
    assert level.export_raw() == [EMPTY] * LEVEL_SIZE


def test_no_empty_cell_for_darkness() -> None:
    level = Level(cells=[BLOCK] * LEVEL_SIZE, dark=True)
    with pytest.raises(ExtraLogicBlocks) as ei:
        level.export_raw()
    assert ei.value.remaining == (DARK,)


def test_one_empty_cell_for_two_markers_fails() -> None:
    cells = [BLOCK] * LEVEL_SIZE
    cells[42] = EMPTY
    level = Level(cells=cells, dark=True, background="waterfall")
    with pytest.raises(ExtraLogicBlocks) as ei:
        level.export_raw()
    assert ei.value.remaining == (DARK,)


def test_cell_edits() -> None:
    level = Level()
    level.set_block_at(2, 1, PLAYER)
    assert level.block_at(2, 1) == PLAYER
    assert level.get_block(LEVEL_WIDTH + 2) == PLAYER

    with pytest.raises(LogicBlockNotAllowed):
        level.set_block(0, DARK)
    with pytest.raises(LogicBlockNotAllowed):
        level.set_block(0, background("concrete"))
    with pytest.raises(IndexError):
        level.set_block(LEVEL_SIZE, BLOCK)
    with pytest.raises(IndexError):
        level.block_at(LEVEL_WIDTH, 0)
    with pytest.raises(IndexError):
        level.get_block(-1)
    with pytest.raises(IndexError):
        level.get_block(LEVEL_SIZE)


def test_cells_only_change_through_set_block() -> None:
    level = Level()
    with pytest.raises(TypeError):
        level.cells[0] = DARK  # type: ignore[index]

    level.cells = (DARK,) + level.cells[1:]
    with pytest.raises(LogicBlockNotAllowed):
        level.export_raw()


def test_constructor_validation() -> None:
    with pytest.raises(InvalidLength):
        Level(cells=[EMPTY] * 3)
    with pytest.raises(LogicBlockNotAllowed):
        Level(cells=[DARK] * LEVEL_SIZE)
    with pytest.raises(ValueError):
        Level(background="lava")  # type: ignore[arg-type]
    with pytest.raises(InvalidLength):
        Level().import_raw([EMPTY])


def test_import_str_sets_level_id() -> None:
    level = Level.from_str(_read("commented.as3.txt"))
    assert level.level_id == LevelId.identifier("X")

    level.import_str(_read("kitchen_sink.lbl.txt"))
    assert level.level_id is None


def test_failed_import_leaves_level_untouched() -> None:
    level = Level.from_str(_read("commented.as3.txt"))
    before = (level.cells, level.dark, level.background, level.level_id)
    with pytest.raises(UnknownToken):
        level.import_str("00\nZZ\n")
    assert (level.cells, level.dark, level.background, level.level_id) == before


def test_export_str_lbl_places_markers() -> None:
    level = Level.from_str(_read("kitchen_sink.lbl.txt"))
    lines = level.export_str("lbl").splitlines()
    assert len(lines) == LEVEL_SIZE
    # Cell 0 is the first Empty, cell 1 was the Dark marker and is Empty now.
    assert lines[:3] == ["M6", "A0", "B0"]
    assert lines[13:20] == ["00"] * 7
    assert lines[LEVEL_WIDTH] == "Note:hello, world"


def test_export_str_as3_needs_level_id() -> None:
    level = Level.from_str(_read("kitchen_sink.lbl.txt"))
    with pytest.raises(MissingLevelIdentifier):
        level.export_str("as3")

    level.level_id = LevelId.number(9)
    again = Level.from_str(level.export_str("as3"))
    assert again == level


def test_note_cells_survive_both_formats() -> None:
    level = Level(level_id=LevelId.string("notes"))
    level.set_block(0, note("hello"))
    level.set_block(1, note('with "quotes", commas'))
    for fmt in ("lbl", "as3"):
        again = Level.from_str(level.export_str(fmt))  # type: ignore[arg-type]
        assert again.cells == level.cells
