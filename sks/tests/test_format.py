from pathlib import Path

import pytest

from sks import format as level_format
from sks.as3 import LevelId
from sks.block import EMPTY, LEVEL_SIZE
from sks.errors import MissingLevelIdentifier, UnknownFileFormat


LEVELS = Path(__file__).parent / "levels"


def _read(name: str) -> str:
    return (LEVELS / name).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("00\nB0\n", "lbl"),
        ("\n\n   B0   \n00\n", "lbl"),
        ("Note:anything\n", "lbl"),
        ("lvlArray[0][0] = [...]", "as3"),
        ("// level 3\nlvlArray[3][0] = [];", "as3"),
        ("hello", None),
        ("var lvlArray = [];", None),
        ("", None),
        ("  \n\t\n", None),
    ],
)
def test_guess_format(text: str, expected: str | None) -> None:
    assert level_format.guess_format(text) == expected


def test_decode_dispatches_to_both_codecs() -> None:
    lbl_id, from_lbl = level_format.decode(_read("kitchen_sink.lbl.txt"))
    as3_id, from_as3 = level_format.decode(_read("kitchen_sink.as3.txt"))
    assert lbl_id is None
    assert as3_id == LevelId.number(0)
    assert from_lbl == from_as3

    level_id, _ = level_format.decode(_read("commented.as3.txt"))
    assert level_id == LevelId.identifier("X")


def test_decode_unknown_format() -> None:
    with pytest.raises(UnknownFileFormat):
        level_format.decode("<level/>")


def test_encode_dispatch() -> None:
    blocks = [EMPTY] * LEVEL_SIZE
    assert level_format.encode(blocks, "lbl") == "00\n" * LEVEL_SIZE
    out = level_format.encode(blocks, "as3", LevelId.number(1))
    assert out.startswith("lvlArray[1][0] = [00, ")

    with pytest.raises(MissingLevelIdentifier):
        level_format.encode(blocks, "as3")
    with pytest.raises(UnknownFileFormat):
        level_format.encode(blocks, "json")  # type: ignore[arg-type]
