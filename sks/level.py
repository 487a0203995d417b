from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, cast

from . import format as level_format
from .as3 import LevelId
from .block import (
    BACKGROUND_TYPES,
    DARK,
    EMPTY,
    LEVEL_HEIGHT,
    LEVEL_SIZE,
    LEVEL_WIDTH,
    BackgroundType,
    Block,
    background,
)
from .errors import ExtraLogicBlocks, InvalidLength, LogicBlockNotAllowed
from .format import FileFormat


logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND: BackgroundType = "cobble"


@dataclass(slots=True)
class Level:
    """
    A level with its logic attributes pulled out of the grid.

    `cells` never holds Dark or Background blocks. In file formats those are
    stashed in Empty cells; `import_raw` extracts them into `dark` and
    `background`, and `export_raw` puts them back. `cells` is a tuple; edit it
    through `set_block`.
    """

    cells: tuple[Block, ...] = (EMPTY,) * LEVEL_SIZE
    dark: bool = False
    background: BackgroundType = DEFAULT_BACKGROUND
    level_id: LevelId | None = None

    def __post_init__(self) -> None:
        self.cells = tuple(self.cells)
        if len(self.cells) != LEVEL_SIZE:
            raise InvalidLength(len(self.cells), LEVEL_SIZE)
        for b in self.cells:
            if b.is_logic():
                raise LogicBlockNotAllowed(b)
        if self.background not in BACKGROUND_TYPES:
            raise ValueError(f"unknown background type: {self.background!r}")

    @classmethod
    def from_raw(cls, blocks: Sequence[Block], *, level_id: LevelId | None = None) -> Level:
        level = cls(level_id=level_id)
        level.import_raw(blocks)
        return level

    @classmethod
    def from_str(cls, text: str) -> Level:
        level = cls()
        level.import_str(text)
        return level

    def get_block(self, i: int) -> Block:
        return self.cells[_check_index(i)]

    def block_at(self, x: int, y: int) -> Block:
        return self.cells[_index(x, y)]

    def set_block(self, i: int, block: Block) -> None:
        _check_index(i)
        if block.is_logic():
            raise LogicBlockNotAllowed(block)
        cells = list(self.cells)
        cells[i] = block
        self.cells = tuple(cells)

    def set_block_at(self, x: int, y: int, block: Block) -> None:
        self.set_block(_index(x, y), block)

    def import_raw(self, blocks: Sequence[Block]) -> None:
        """
        Replaces the level from a raw grid. Background and Dark cells become
        level attributes and leave Empty behind; if several are present the
        last one in index order wins.
        """
        if len(blocks) != LEVEL_SIZE:
            raise InvalidLength(len(blocks), LEVEL_SIZE)

        dark = False
        bg: BackgroundType = DEFAULT_BACKGROUND
        cells: list[Block] = []
        for b in blocks:
            if b.kind == "background":
                bg = cast(BackgroundType, b.background)
                cells.append(EMPTY)
            elif b.kind == "dark":
                dark = True
                cells.append(EMPTY)
            else:
                cells.append(b)

        self.cells = tuple(cells)
        self.dark = dark
        self.background = bg
        logger.debug("imported raw level: dark=%s background=%s", dark, bg)

    def export_raw(self) -> list[Block]:
        """
        The raw grid with logic attributes written into Empty cells.

        Pending markers are pushed Dark first, then Background, and popped on
        each Empty cell in index order: Background takes the first Empty cell,
        Dark the next. File compatibility depends on this order.
        """
        pending: list[Block] = []
        if self.dark:
            pending.append(DARK)
        if self.background != DEFAULT_BACKGROUND:
            pending.append(background(self.background))

        out: list[Block] = []
        for i, b in enumerate(self.cells):
            if b.is_logic():
                raise LogicBlockNotAllowed(b)
            if b.kind == "empty" and pending:
                marker = pending.pop()
                logger.debug("placing %s at cell %d", marker.kind, i)
                out.append(marker)
            else:
                out.append(b)

        if pending:
            raise ExtraLogicBlocks(tuple(pending))
        return out

    def import_str(self, text: str) -> None:
        """Decodes LBL or AS3 text. The level is left untouched if decoding fails."""
        level_id, blocks = level_format.decode(text)
        self.import_raw(blocks)
        self.level_id = level_id

    def export_str(self, fmt: FileFormat) -> str:
        return level_format.encode(self.export_raw(), fmt, self.level_id)


def _check_index(i: int) -> int:
    if not 0 <= i < LEVEL_SIZE:
        raise IndexError(f"cell index out of range: {i}")
    return i


def _index(x: int, y: int) -> int:
    if not (0 <= x < LEVEL_WIDTH and 0 <= y < LEVEL_HEIGHT):
        raise IndexError(f"cell out of range: ({x}, {y})")
    return y * LEVEL_WIDTH + x
