from __future__ import annotations

from collections import Counter
from typing import Literal, Sequence

from .block import LEVEL_SIZE, LEVEL_WIDTH, Block, encode_token
from .errors import InvalidLength
from .level import Level


PreviewView = Literal["glyph", "mask", "token"]

_GLYPHS = {
    "empty": ".",
    "block": "#",
    "dark": "*",
    "exit": "E",
    "secret_exit": "e",
    "key": "k",
    "lock": "L",
    "scaffold": "=",
    "torch": "i",
    "switch": "s",
    "switch_ceiling": "S",
    "wire": "-",
    "player": "@",
    "power_up_burrow": "b",
    "power_up_recall": "r",
    "pipe_in": "(",
    "pipe_out": ")",
    "pipe_phase": "%",
    "pipe_solid": "H",
    "note": "?",
    "background": "~",
}
_WALL_GLYPHS = {"up": "^", "down": "v", "left": "<", "right": ">"}


def _glyph(b: Block) -> str:
    if b.kind == "toggle_block":
        return "T" if b.solid else "t"
    if b.kind == "one_way_wall":
        return _WALL_GLYPHS[str(b.direction)]
    return _GLYPHS[b.kind]


def _legend_token(b: Block) -> str:
    # Notes are counted together, their text is not a token.
    return "Note:" if b.kind == "note" else encode_token(b)


def preview_blocks(
    blocks: Sequence[Block],
    *,
    view: PreviewView = "glyph",
    title: str | None = None,
) -> str:
    if len(blocks) != LEVEL_SIZE:
        raise InvalidLength(len(blocks), LEVEL_SIZE)

    lines: list[str] = []
    if title:
        lines.append(title)

    rows = [blocks[y:y + LEVEL_WIDTH] for y in range(0, LEVEL_SIZE, LEVEL_WIDTH)]
    if view == "glyph":
        for row in rows:
            lines.append("".join(_glyph(b) for b in row))
    elif view == "mask":
        for row in rows:
            lines.append("".join("." if b.kind == "empty" else "#" for b in row))
    elif view == "token":
        for row in rows:
            lines.append(" ".join("No" if b.kind == "note" else encode_token(b) for b in row))
    else:
        raise ValueError(f"unknown view: {view}")

    # Token legend + counts
    cnt = Counter(_legend_token(b) for b in blocks)
    lines.append("")
    lines.append("tokens:")
    for tok in sorted(cnt):
        lines.append(f"  {tok:<5} count={cnt[tok]}")

    notes = [b.text for b in blocks if b.kind == "note"]
    if notes:
        lines.append("")
        lines.append("notes:")
        for text in notes:
            lines.append(f"  {text!r}")

    return "\n".join(lines) + "\n"


def preview_level(level: Level, *, view: PreviewView = "glyph", title: str | None = None) -> str:
    out = preview_blocks(level.cells, view=view, title=title)
    level_id = "<none>" if level.level_id is None else str(level.level_id)
    return out + f"\ndark: {level.dark}\nbackground: {level.background}\nlevel id: {level_id}\n"


def preview_level_file(path: str, *, view: PreviewView = "glyph") -> str:
    with open(path, "r", encoding="utf-8") as f:
        level = Level.from_str(f.read())
    return preview_level(level, view=view, title=f"{path} ({LEVEL_WIDTH}x{LEVEL_SIZE // LEVEL_WIDTH})")
