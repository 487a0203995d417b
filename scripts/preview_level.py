#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import sys

_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

from sks.errors import SksError  # noqa: E402
from sks.preview import preview_level_file  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("path", help="Path to an .lbl or .as3 level file")
    ap.add_argument("--view", default="glyph", choices=["glyph", "mask", "token"])
    ns = ap.parse_args(argv)
    try:
        sys.stdout.write(preview_level_file(ns.path, view=ns.view))
    except SksError as e:
        print(f"{ns.path}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
