from __future__ import annotations

import logging
from typing import Literal, Sequence

from . import as3, lbl
from .as3 import LEVEL_ARRAY_NAME, LevelId
from .block import Block, decode_token
from .errors import MissingLevelIdentifier, UnknownFileFormat, UnknownToken


logger = logging.getLogger(__name__)

FileFormat = Literal["lbl", "as3"]
FILE_FORMATS: tuple[FileFormat, ...] = ("lbl", "as3")


def _first_line(text: str) -> str | None:
    for ln in text.splitlines():
        s = ln.strip()
        if s:
            return s
    return None


def guess_format(text: str) -> FileFormat | None:
    """
    Looks only at the first non-blank line: a valid cell token means LBL, a
    `lvlArray` statement or a `//` comment means AS3, anything else is None.
    """
    first = _first_line(text)
    if first is None:
        return None
    try:
        decode_token(first)
    except UnknownToken:
        pass
    else:
        return "lbl"
    if first.startswith(LEVEL_ARRAY_NAME) or first.startswith("//"):
        return "as3"
    return None


def decode(text: str) -> tuple[LevelId | None, list[Block]]:
    """Guesses the format and decodes. LBL carries no level id, so it comes back as None."""
    fmt = guess_format(text)
    logger.debug("guessed format: %s", fmt)
    if fmt == "lbl":
        return None, lbl.decode(text)
    if fmt == "as3":
        level_id, blocks = as3.decode(text)
        return level_id, blocks
    raise UnknownFileFormat("first line is neither a cell token nor an lvlArray statement")


def encode(blocks: Sequence[Block], fmt: FileFormat, level_id: LevelId | None = None) -> str:
    if fmt == "lbl":
        return lbl.encode(blocks)
    if fmt == "as3":
        if level_id is None:
            raise MissingLevelIdentifier("as3 output needs a level id")
        return as3.encode(blocks, level_id)
    raise UnknownFileFormat(repr(fmt))
