from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

from .errors import UnknownToken


LEVEL_WIDTH = 32
LEVEL_HEIGHT = 18
LEVEL_SIZE = LEVEL_WIDTH * LEVEL_HEIGHT

NOTE_PREFIX = "Note:"

BlockKind = Literal[
    "empty",
    "block",
    "dark",
    "exit",
    "secret_exit",
    "key",
    "lock",
    "scaffold",
    "torch",
    "switch",
    "switch_ceiling",
    "wire",
    "player",
    "power_up_burrow",
    "power_up_recall",
    "pipe_in",
    "pipe_out",
    "pipe_phase",
    "pipe_solid",
    "toggle_block",
    "one_way_wall",
    "background",
    "note",
]
Direction = Literal["up", "down", "left", "right"]
BackgroundType = Literal["cobble", "waterfall", "skullfall", "concrete", "reserved1", "reserved2", "reserved3"]

BLOCK_KINDS: tuple[str, ...] = get_args(BlockKind)
DIRECTIONS: tuple[str, ...] = get_args(Direction)
BACKGROUND_TYPES: tuple[str, ...] = get_args(BackgroundType)

# kind -> the single payload field that kind carries
_PAYLOAD_FIELD = {
    "toggle_block": "solid",
    "one_way_wall": "direction",
    "background": "background",
    "note": "text",
}
_PAYLOAD_FIELDS = ("solid", "direction", "background", "text")


@dataclass(frozen=True, slots=True)
class Block:
    """
    One grid cell.

    `kind` is the variant tag; the payload fields are only set for the kind
    that owns them (see `_PAYLOAD_FIELD`), so two blocks compare and hash
    equal exactly when they are the same variant with the same payload.
    """

    kind: BlockKind = "empty"
    solid: bool | None = None
    direction: Direction | None = None
    background: BackgroundType | None = None
    text: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in BLOCK_KINDS:
            raise ValueError(f"unknown block kind: {self.kind!r}")
        owned = _PAYLOAD_FIELD.get(self.kind)
        for name in _PAYLOAD_FIELDS:
            value = getattr(self, name)
            if name == owned and value is None:
                raise ValueError(f"{self.kind} block requires {name}")
            if name != owned and value is not None:
                raise ValueError(f"{self.kind} block does not take {name}")
        if self.kind == "toggle_block" and not isinstance(self.solid, bool):
            raise ValueError("toggle_block solid must be a bool")
        if self.kind == "one_way_wall" and self.direction not in DIRECTIONS:
            raise ValueError(f"unknown direction: {self.direction!r}")
        if self.kind == "background" and self.background not in BACKGROUND_TYPES:
            raise ValueError(f"unknown background type: {self.background!r}")
        if self.kind == "note" and not isinstance(self.text, str):
            raise ValueError("note text must be a string")

    def is_empty(self) -> bool:
        return self.kind == "empty"

    def is_background(self) -> bool:
        return self.kind == "background"

    def is_dark(self) -> bool:
        return self.kind == "dark"

    def is_logic(self) -> bool:
        """Dark and Background are level attributes, not structural cells."""
        return self.kind in ("dark", "background")

    def token(self) -> str:
        return encode_token(self)


def toggle_block(solid: bool) -> Block:
    return Block("toggle_block", solid=solid)


def one_way_wall(direction: Direction) -> Block:
    return Block("one_way_wall", direction=direction)


def background(background_type: BackgroundType) -> Block:
    return Block("background", background=background_type)


def note(text: str) -> Block:
    return Block("note", text=text)


EMPTY = Block("empty")
BLOCK = Block("block")
DARK = Block("dark")
EXIT = Block("exit")
SECRET_EXIT = Block("secret_exit")
KEY = Block("key")
LOCK = Block("lock")
SCAFFOLD = Block("scaffold")
TORCH = Block("torch")
SWITCH = Block("switch")
SWITCH_CEILING = Block("switch_ceiling")
WIRE = Block("wire")
PLAYER = Block("player")
POWER_UP_BURROW = Block("power_up_burrow")
POWER_UP_RECALL = Block("power_up_recall")
PIPE_IN = Block("pipe_in")
PIPE_OUT = Block("pipe_out")
PIPE_PHASE = Block("pipe_phase")
PIPE_SOLID = Block("pipe_solid")


_TOKEN_TO_BLOCK: dict[str, Block] = {
    "00": EMPTY,
    "A0": DARK,
    "B0": BLOCK,
    "BK": LOCK,
    "CI": PIPE_IN,
    "CO": PIPE_OUT,
    "CP": PIPE_PHASE,
    "CS": PIPE_SOLID,
    "D0": SCAFFOLD,
    "D1": TORCH,
    "E0": EXIT,
    "E1": SECRET_EXIT,
    "IK": KEY,
    "M0": background("cobble"),
    "M1": background("waterfall"),
    "M2": background("skullfall"),
    "M3": background("concrete"),
    "M4": background("reserved1"),
    "M5": background("reserved2"),
    "M6": background("reserved3"),
    "OD": one_way_wall("down"),
    "OL": one_way_wall("left"),
    "OR": one_way_wall("right"),
    "OU": one_way_wall("up"),
    "P0": POWER_UP_BURROW,
    "P1": POWER_UP_RECALL,
    "S0": SWITCH,
    "S1": SWITCH_CEILING,
    "T0": toggle_block(True),
    "T1": toggle_block(False),
    "WR": WIRE,
    "X0": PLAYER,
}
_BLOCK_TO_TOKEN: dict[Block, str] = {b: t for t, b in _TOKEN_TO_BLOCK.items()}

# Every block with a fixed token, in token order.
FIXED_TOKEN_BLOCKS: tuple[Block, ...] = tuple(_TOKEN_TO_BLOCK.values())


def decode_token(token: str) -> Block:
    """
    Exact, case-sensitive lookup of a cell token.

    Falls back to `Note:<text>`; anything else raises UnknownToken.
    """
    block = _TOKEN_TO_BLOCK.get(token)
    if block is not None:
        return block
    if token.startswith(NOTE_PREFIX):
        return note(token[len(NOTE_PREFIX):])
    raise UnknownToken(token)


def encode_token(block: Block) -> str:
    if block.kind == "note":
        # No escaping: a note holding a newline cannot survive LBL.
        return NOTE_PREFIX + str(block.text)
    return _BLOCK_TO_TOKEN[block]


def is_background(block: Block) -> bool:
    return block.kind == "background"
