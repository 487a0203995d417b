from __future__ import annotations

from typing import Any


class SksError(ValueError):
    """Base class for every failure raised by the level codecs."""


# Token level


class TokenError(SksError):
    pass


class UnknownToken(TokenError):
    def __init__(self, token: str):
        super().__init__(f"unknown token {token!r}")
        self.token = token


class InvalidToken(UnknownToken):
    """A numeric AS3 cell other than 0."""


# Length / shape


class ShapeError(SksError):
    pass


class InvalidLength(ShapeError):
    def __init__(self, actual: int, expected: int):
        super().__init__(f"invalid length {actual} (expected {expected})")
        self.actual = actual
        self.expected = expected


class InvalidRowWidth(ShapeError):
    def __init__(self, actual: int):
        super().__init__(f"invalid row width {actual}")
        self.actual = actual


class InvalidRowCount(ShapeError):
    def __init__(self, actual: int):
        super().__init__(f"invalid row count {actual}")
        self.actual = actual


class InvalidLevelSize(ShapeError):
    def __init__(self, actual: int):
        super().__init__(f"invalid level size {actual}")
        self.actual = actual


# Structural / grammar


class As3SyntaxError(SksError):
    def __init__(self, message: str, line: int, col: int):
        super().__init__(f"{line}:{col}: {message}")
        self.message = message
        self.line = line
        self.col = col


class LexError(As3SyntaxError):
    pass


class MalformedStatement(As3SyntaxError):
    pass


class InvalidLevelArrayName(MalformedStatement):
    def __init__(self, name: str, line: int, col: int):
        super().__init__(f"invalid level array name {name!r}", line, col)
        self.name = name


# Semantic consistency


class ConsistencyError(SksError):
    pass


class RowIndexMismatch(ConsistencyError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"row index mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class LevelIdentifierMismatch(ConsistencyError):
    def __init__(self, expected: Any, actual: Any):
        super().__init__(f"level identifier mismatch: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class MissingLevelIdentifier(ConsistencyError):
    def __init__(self, message: str = "missing level identifier"):
        super().__init__(message)


# Format detection


class FormatError(SksError):
    pass


class UnknownFileFormat(FormatError):
    def __init__(self, detail: str = ""):
        super().__init__(f"unknown file format{': ' + detail if detail else ''}")
        self.detail = detail


# Level aggregate


class LevelError(SksError):
    pass


class ExtraLogicBlocks(LevelError):
    """The level has more logic attributes than Empty cells to stash them in."""

    def __init__(self, remaining: tuple[Any, ...]):
        super().__init__(f"no empty cell left for {len(remaining)} logic block(s): {list(remaining)!r}")
        self.remaining = remaining


class LogicBlockNotAllowed(LevelError):
    def __init__(self, block: Any):
        super().__init__(f"logic block {block!r} cannot be stored as a cell; set the level attribute instead")
        self.block = block
