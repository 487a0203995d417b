from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence, cast

from .block import LEVEL_HEIGHT, LEVEL_SIZE, LEVEL_WIDTH, Block, background
from .errors import InvalidLength
from .level import Level

if TYPE_CHECKING:  # pragma: no cover
    from PIL.Image import Image


logger = logging.getLogger(__name__)


def _pil() -> Any:
    """
    Requires Pillow, but imports lazily so text-only workflows don't break.
    """
    try:
        from PIL import Image, ImageDraw  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("Pillow is required for PNG rendering; install with: pip install '.[image]'") from e
    return Image, ImageDraw


# Cell colors. Kinds missing here have no visual (Empty, Dark, SecretExit,
# SwitchCeiling, Wire).
BLOCK_COLORS: dict[str, str] = {
    "block": "#5B4A3A",
    "exit": "#3FA34D",
    "key": "#F2C14E",
    "lock": "#B5651D",
    "note": "#E8E3C8",
    "one_way_wall": "#7A7A8C",
    "pipe_in": "#2E86AB",
    "pipe_out": "#A23B72",
    "pipe_phase": "#6C91C2",
    "pipe_solid": "#1B4965",
    "player": "#E63946",
    "power_up_burrow": "#8D6A9F",
    "power_up_recall": "#43AA8B",
    "scaffold": "#A68A64",
    "switch": "#F4A259",
    "toggle_block": "#457B9D",
    "torch": "#FFB703",
}

BACKGROUND_COLORS: dict[str, str] = {
    "cobble": "#3C3C46",
    "waterfall": "#1F4E79",
    "skullfall": "#4A2C2A",
    "concrete": "#8A8D91",
    "reserved1": "#2F3E46",
    "reserved2": "#354F52",
    "reserved3": "#52796F",
}


def hex_to_rgb(hx: str) -> tuple[int, int, int]:
    s = hx.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        raise ValueError(f"Invalid hex color: {hx!r}")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


@dataclass(frozen=True, slots=True)
class RenderOptions:
    width: int = 1920  # not 16:9 -> cells get stretched
    height: int = 1080
    draw_grid: bool = False
    shade_dark: bool = True


@dataclass(frozen=True, slots=True)
class ImageRequest:
    """Cache key for one resized sprite."""

    w: int
    h: int
    block: Block


def generate_block_image(req: ImageRequest) -> Image | None:
    """Draws the sprite for one block, or None if the block has no visual."""
    Image, ImageDraw = _pil()
    b = req.block
    w, h = max(1, req.w), max(1, req.h)

    if b.kind == "background":
        return Image.new("RGBA", (w, h), hex_to_rgb(BACKGROUND_COLORS[str(b.background)]) + (255,))

    hx = BLOCK_COLORS.get(b.kind)
    if hx is None:
        return None
    rgba = hex_to_rgb(hx) + (255,)

    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    if b.kind == "one_way_wall":
        bar = max(1, min(w, h) // 4)
        box = {
            "up": [0, 0, w - 1, bar - 1],
            "down": [0, h - bar, w - 1, h - 1],
            "left": [0, 0, bar - 1, h - 1],
            "right": [w - bar, 0, w - 1, h - 1],
        }[str(b.direction)]
        draw.rectangle(box, fill=rgba)
    elif b.kind == "toggle_block" and not b.solid:
        draw.rectangle([0, 0, w - 1, h - 1], outline=rgba, width=max(1, min(w, h) // 8))
    else:
        draw.rectangle([0, 0, w - 1, h - 1], fill=rgba)
    return img


class ImageRenderer:
    """Composites level grids, memoizing sprites per (size, block)."""

    def __init__(self) -> None:
        self._cache: dict[ImageRequest, Image | None] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def lookup_or_render(self, width: int, height: int, block: Block) -> Image | None:
        req = ImageRequest(width, height, block)
        if req not in self._cache:
            logger.debug("sprite cache miss: %s %dx%d", block.kind, width, height)
            self._cache[req] = generate_block_image(req)
        return self._cache[req]

    def render(self, blocks: Sequence[Block], options: RenderOptions | None = None) -> Image:
        """Renders a raw grid; the last Background cell picks the backdrop (default cobble)."""
        Image, ImageDraw = _pil()
        opts = options or RenderOptions()
        if len(blocks) != LEVEL_SIZE:
            raise InvalidLength(len(blocks), LEVEL_SIZE)

        bg = background("cobble")
        dark = False
        for b in blocks:
            if b.kind == "background":
                bg = b
            elif b.kind == "dark":
                dark = True

        # Background sprites are never None.
        base = cast("Image", self.lookup_or_render(opts.width, opts.height, bg)).copy()

        tw = opts.width // LEVEL_WIDTH
        th = opts.height // LEVEL_HEIGHT
        for i, b in enumerate(blocks):
            if b.is_background():
                continue
            sprite = self.lookup_or_render(tw, th, b)
            if sprite is None:
                continue
            y, x = divmod(i, LEVEL_WIDTH)
            base.alpha_composite(sprite, (x * tw, y * th))

        if dark and opts.shade_dark:
            base = Image.alpha_composite(base, Image.new("RGBA", base.size, (0, 0, 0, 110)))

        if opts.draw_grid and tw >= 6 and th >= 6:
            draw = ImageDraw.Draw(base)
            for x in range(LEVEL_WIDTH + 1):
                xx = min(x * tw, opts.width - 1)
                draw.line([(xx, 0), (xx, opts.height)], fill=(0, 0, 0, 40), width=1)
            for y in range(LEVEL_HEIGHT + 1):
                yy = min(y * th, opts.height - 1)
                draw.line([(0, yy), (opts.width, yy)], fill=(0, 0, 0, 40), width=1)

        return base

    def render_level(self, level: Level, options: RenderOptions | None = None) -> Image:
        return self.render(level.export_raw(), options)


def level_file_to_png(
    level_path: str,
    *,
    out_path: str,
    width: int = 1920,
    height: int = 1080,
    draw_grid: bool = False,
) -> None:
    """Renders an LBL or AS3 level file to a PNG."""
    with open(level_path, "r", encoding="utf-8") as f:
        level = Level.from_str(f.read())
    img = ImageRenderer().render_level(level, RenderOptions(width=width, height=height, draw_grid=draw_grid))
    img.save(out_path, format="PNG")
