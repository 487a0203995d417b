from __future__ import annotations

from typing import Sequence

from .block import LEVEL_SIZE, Block, decode_token, encode_token
from .errors import InvalidLength


def split_lines(text: str) -> list[str]:
    """
    Splits on "\\n" only, dropping one trailing "\\r" per line.

    A single final newline does not produce an extra empty line; any further
    blank line does.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def decode(text: str) -> list[Block]:
    """
    Decodes one token per line. Logic blocks (Dark, Background) pass through
    untouched; interpreting them is the level's job.
    """
    blocks = [decode_token(ln) for ln in split_lines(text)]
    if len(blocks) != LEVEL_SIZE:
        raise InvalidLength(len(blocks), LEVEL_SIZE)
    return blocks


def encode(blocks: Sequence[Block]) -> str:
    if len(blocks) != LEVEL_SIZE:
        raise InvalidLength(len(blocks), LEVEL_SIZE)
    return "".join(encode_token(b) + "\n" for b in blocks)
