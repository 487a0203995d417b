from __future__ import annotations

import argparse
import logging
import sys

from .as3 import LevelId
from .errors import SksError
from .format import FILE_FORMATS, guess_format
from .level import Level
from .preview import preview_level_file
from .render_png import level_file_to_png


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write(out: str, data: str) -> None:
    if out == "-":
        sys.stdout.write(data)
    else:
        with open(out, "w", encoding="utf-8", newline="\n") as f:
            f.write(data)


def _cmd_guess(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(prog="sks guess")
    ap.add_argument("path", type=str, help="Level file, or '-' for stdin")
    ns = ap.parse_args(argv)

    fmt = guess_format(_read(ns.path))
    print(fmt or "unknown")
    return 0 if fmt else 1


def _cmd_convert(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(prog="sks convert")
    ap.add_argument("path", type=str, help="Level file (lbl or as3), or '-' for stdin")
    ap.add_argument("--to", type=str, required=True, choices=list(FILE_FORMATS))
    ap.add_argument("--level-id", type=str, default=None, help="Level id for as3 output (overrides the input's)")
    ap.add_argument("--out", type=str, default="-", help="Output path or '-' for stdout")
    ns = ap.parse_args(argv)

    level = Level.from_str(_read(ns.path))
    if ns.level_id is not None:
        level.level_id = LevelId.parse(ns.level_id)
    _write(ns.out, level.export_str(ns.to))
    return 0


def _cmd_preview(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(prog="sks preview")
    ap.add_argument("path", type=str, help="Level file (lbl or as3)")
    ap.add_argument("--view", type=str, default="glyph", choices=["glyph", "mask", "token"])
    ns = ap.parse_args(argv)

    sys.stdout.write(preview_level_file(ns.path, view=ns.view))
    return 0


def _cmd_export_png(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(prog="sks export-png")
    ap.add_argument("path", type=str, help="Level file (lbl or as3)")
    ap.add_argument("--width", type=int, default=1920)
    ap.add_argument("--height", type=int, default=1080)
    ap.add_argument("--grid", action="store_true", help="Draw cell grid lines")
    ap.add_argument("--out", type=str, required=True, help="Output .png path")
    ns = ap.parse_args(argv)

    level_file_to_png(ns.path, out_path=ns.out, width=ns.width, height=ns.height, draw_grid=ns.grid)
    return 0


_COMMANDS = {
    "guess": _cmd_guess,
    "convert": _cmd_convert,
    "preview": _cmd_preview,
    "export-png": _cmd_export_png,
}


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in ("-v", "--verbose"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        argv = argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        print("sks commands: guess, convert, preview, export-png")
        print("Example: sks guess level.txt")
        print("Example: sks convert level.lbl.txt --to as3 --level-id 3 --out level.as3.txt")
        print("Example: sks preview level.as3.txt --view token")
        print("Example: sks export-png level.lbl.txt --out level.png")
        return 0

    cmd = argv[0]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        return 2

    try:
        return handler(argv[1:])
    except SksError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
