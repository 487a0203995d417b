from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Literal, Sequence

from .as3_parser import ArrayLiteral, Assignment, Expr, Index, Name, NumberLiteral, StringLiteral, assignments
from .block import EMPTY, LEVEL_HEIGHT, LEVEL_SIZE, LEVEL_WIDTH, Block, decode_token, encode_token
from .errors import (
    InvalidLength,
    InvalidLevelArrayName,
    InvalidLevelSize,
    InvalidRowCount,
    InvalidRowWidth,
    InvalidToken,
    LevelIdentifierMismatch,
    MalformedStatement,
    MissingLevelIdentifier,
    RowIndexMismatch,
)


logger = logging.getLogger(__name__)

LEVEL_ARRAY_NAME = "lvlArray"

LevelIdKind = Literal["number", "string", "identifier"]

_IDENTIFIER = re.compile(r"^[^\W\d]\w*$")
_QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def quote_string(value: str) -> str:
    """Double-quoted literal that the lexer reads back as `value`."""
    out = []
    for ch in value:
        esc = _QUOTE_ESCAPES.get(ch)
        if esc is None and ord(ch) < 0x20:
            esc = f"\\x{ord(ch):02x}"
        out.append(esc if esc is not None else ch)
    return '"' + "".join(out) + '"'


def _is_identifier(text: str) -> bool:
    # "$" is legal in the lexer but not matched by \w.
    return bool(_IDENTIFIER.match(text.replace("$", "_")))


@dataclass(frozen=True, slots=True)
class LevelId:
    """
    The level number an AS3 file declares for itself: `lvlArray[<id>][row]`.

    Usually a number, but a quoted string or a bare identifier (e.g. `X`) is
    allowed too. Kind and value must both match for two ids to be equal, so
    `LevelId.number(3) != LevelId.string("3")`.
    """

    kind: LevelIdKind
    value: int | str

    def __post_init__(self) -> None:
        if self.kind == "number":
            if not isinstance(self.value, int) or isinstance(self.value, bool) or self.value < 0:
                raise ValueError(f"number level id must be a non-negative int, got {self.value!r}")
        elif self.kind == "string":
            if not isinstance(self.value, str):
                raise ValueError(f"string level id must be a str, got {self.value!r}")
        elif self.kind == "identifier":
            if not isinstance(self.value, str) or not _is_identifier(self.value):
                raise ValueError(f"not a valid identifier: {self.value!r}")
        else:
            raise ValueError(f"unknown level id kind: {self.kind!r}")

    @classmethod
    def number(cls, value: int) -> LevelId:
        return cls("number", value)

    @classmethod
    def string(cls, value: str) -> LevelId:
        return cls("string", value)

    @classmethod
    def identifier(cls, value: str) -> LevelId:
        return cls("identifier", value)

    @classmethod
    def parse(cls, text: str) -> LevelId:
        """Digits -> number, identifier -> identifier, anything else -> string."""
        if text.isascii() and text.isdigit():
            return cls.number(int(text))
        if _is_identifier(text):
            return cls.identifier(text)
        return cls.string(text)

    def __str__(self) -> str:
        if self.kind == "string":
            return quote_string(str(self.value))
        return str(self.value)


# Largest integer an AS3 Number holds exactly.
MAX_SAFE_INTEGER = 2**53 - 1


def _number_value(node: NumberLiteral, what: str) -> int:
    v = node.value
    if isinstance(v, float) and not math.isfinite(v):
        raise MalformedStatement(f"{what} must be a finite number, got {node.text}", node.line, node.col)
    if v < 0 or v > MAX_SAFE_INTEGER:
        raise MalformedStatement(f"{what} out of range, got {node.text}", node.line, node.col)
    # Fractional values are truncated.
    return int(node.value)


def _parse_target(stmt: Assignment, expected_row: int) -> LevelId:
    outer = stmt.target
    if not isinstance(outer, Index):
        raise MalformedStatement("left-hand side must be lvlArray[<level>][<row>]", stmt.line, stmt.col)

    row = outer.index
    if not isinstance(row, NumberLiteral):
        raise MalformedStatement("row index must be a number", row.line, row.col)
    actual_row = _number_value(row, "row index")
    if actual_row != expected_row:
        raise RowIndexMismatch(expected=expected_row, actual=actual_row)

    inner = outer.target
    if not isinstance(inner, Index):
        raise MalformedStatement("left-hand side must be lvlArray[<level>][<row>]", inner.line, inner.col)

    array = inner.target
    if not isinstance(array, Name):
        raise MalformedStatement("level array must be a plain name", array.line, array.col)
    if array.text != LEVEL_ARRAY_NAME:
        raise InvalidLevelArrayName(array.text, array.line, array.col)

    return _parse_level_id(inner.index)


def _parse_level_id(node: Expr) -> LevelId:
    if isinstance(node, NumberLiteral):
        return LevelId.number(_number_value(node, "level id"))
    if isinstance(node, StringLiteral):
        return LevelId.string(node.value)
    if isinstance(node, Name):
        return LevelId.identifier(node.text)
    raise MalformedStatement("level id must be a number, string or name", node.line, node.col)


def _parse_row(node: Expr) -> list[Block]:
    if not isinstance(node, ArrayLiteral):
        raise MalformedStatement("row must be an array literal", node.line, node.col)
    if len(node.items) != LEVEL_WIDTH:
        raise InvalidRowWidth(len(node.items))
    return [_parse_cell(item) for item in node.items]


def _parse_cell(node: Expr) -> Block:
    if isinstance(node, NumberLiteral):
        if node.value == 0:
            return EMPTY
        raise InvalidToken(node.text)
    if isinstance(node, StringLiteral):
        return decode_token(node.value)
    if isinstance(node, Name):
        # Bare tokens like B0 are identifiers to the lexer.
        return decode_token(node.text)
    raise MalformedStatement("cell must be a number, string or name", node.line, node.col)


def decode(text: str) -> tuple[LevelId, list[Block]]:
    """
    Decodes `lvlArray[<level>][<row>] = [<cell>, ...];` statements.

    Rows must appear in order starting at 0 and every row must name the same
    level. Non-assignment statements and comments are ignored.
    """
    statements = assignments(text)
    if not statements:
        raise MissingLevelIdentifier()

    level_id = _parse_target(statements[0], 0)
    blocks: list[Block] = []
    for row, stmt in enumerate(statements):
        found = level_id if row == 0 else _parse_target(stmt, row)
        if found != level_id:
            raise LevelIdentifierMismatch(expected=level_id, actual=found)
        blocks.extend(_parse_row(stmt.value))

    if len(statements) != LEVEL_HEIGHT:
        raise InvalidRowCount(len(statements))
    if len(blocks) != LEVEL_SIZE:
        raise InvalidLevelSize(len(blocks))

    logger.debug("decoded as3 level %s (%d rows)", level_id, len(statements))
    return level_id, blocks


def _encode_cell(block: Block) -> str:
    if block.kind == "note":
        return quote_string(encode_token(block))
    return encode_token(block)


def encode(blocks: Sequence[Block], level_id: LevelId) -> str:
    """Canonical output: one statement per row, Notes quoted, all other tokens bare."""
    if len(blocks) != LEVEL_SIZE:
        raise InvalidLength(len(blocks), LEVEL_SIZE)

    out: list[str] = []
    for y in range(LEVEL_HEIGHT):
        row = blocks[y * LEVEL_WIDTH:(y + 1) * LEVEL_WIDTH]
        cells = ", ".join(_encode_cell(b) for b in row)
        out.append(f"{LEVEL_ARRAY_NAME}[{level_id}][{y}] = [{cells}];\n")
    return "".join(out)
