"""
as3_parser.py - lexer + recursive-descent parser for AS3 level arrays.

Only the slice of ActionScript/JavaScript that level files use is understood:

    program     ::= statement* EOF
    statement   ::= ";"
                  | ("var" | "let" | "const") NAME ("=" expression)? end
                  | expression ("=" expression)? end
    end         ::= ";" | <line break before next token> | EOF
    expression  ::= primary ("[" expression "]")*
    primary     ::= NAME | NUMBER | STRING | array
    array       ::= "[" (expression ("," expression)* ","?)? "]"

Comments (`// ...` and `/* ... */`) are skipped by the lexer. There are no
operators, calls or control flow; anything else is a LexError or a
MalformedStatement carrying the line/column where it went wrong.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union, cast

from .errors import LexError, MalformedStatement


TokenType = Literal["name", "number", "string", "punct", "eof"]

_PUNCT = "[]=,;"
_LINE_BREAKS = "\n\u2028\u2029"
_SPACE = " \t\r\f\v\u00a0\ufeff"
_HEX = "0123456789abcdefABCDEF"
_DECLARATION_KEYWORDS = ("var", "let", "const")
_MAX_DEPTH = 64

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


def _is_ident_start(ch: str) -> bool:
    return bool(ch) and (ch.isalpha() or ch in "_$")


def _is_ident_part(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch in "_$")


def _is_digit(ch: str) -> bool:
    return bool(ch) and ch in "0123456789"


def _is_hex(ch: str) -> bool:
    return bool(ch) and ch in _HEX


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    text: str  # source text, quotes included for strings
    value: int | float | str | None
    line: int
    col: int
    newline_before: bool = False


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.col = 1

    def _peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        if ch in _LINE_BREAKS:
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            newline = self._skip_trivia()
            if self._at_end():
                tokens.append(Token("eof", "", None, self.line, self.col, newline))
                return tokens
            tokens.append(self._next_token(newline))

    def _skip_trivia(self) -> bool:
        """Skips whitespace and comments; returns True if a line break was crossed."""
        saw_newline = False
        while not self._at_end():
            ch = self._peek()
            if ch in _LINE_BREAKS:
                saw_newline = True
                self._advance()
            elif ch in _SPACE:
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() not in _LINE_BREAKS:
                    self._advance()
            elif ch == "/" and self._peek(1) == "*":
                line, col = self.line, self.col
                self._advance()
                self._advance()
                while True:
                    if self._at_end():
                        raise LexError("unterminated block comment", line, col)
                    if self._peek() == "*" and self._peek(1) == "/":
                        self._advance()
                        self._advance()
                        break
                    if self._advance() in _LINE_BREAKS:
                        saw_newline = True
            else:
                break
        return saw_newline

    def _next_token(self, newline: bool) -> Token:
        line, col = self.line, self.col
        ch = self._peek()

        if ch in _PUNCT:
            self._advance()
            return Token("punct", ch, None, line, col, newline)
        if ch in ("'", '"'):
            return self._string(line, col, newline)
        if _is_digit(ch) or (ch == "." and _is_digit(self._peek(1))):
            return self._number(line, col, newline)
        if _is_ident_start(ch):
            start = self.pos
            while _is_ident_part(self._peek()):
                self._advance()
            text = self.text[start:self.pos]
            return Token("name", text, text, line, col, newline)

        raise LexError(f"unexpected character {ch!r}", line, col)

    def _digits(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

    def _number(self, line: int, col: int, newline: bool) -> Token:
        start = self.pos
        value: int | float
        if self._peek() == "0" and self._peek(1) in ("x", "X") and _is_hex(self._peek(2)):
            self._advance()
            self._advance()
            while _is_hex(self._peek()):
                self._advance()
            text = self.text[start:self.pos]
            value = int(text[2:], 16)
        else:
            is_float = False
            self._digits()
            if self._peek() == ".":
                is_float = True
                self._advance()
                self._digits()
            nxt = self._peek(1)
            if self._peek() in ("e", "E") and (_is_digit(nxt) or (nxt in ("+", "-") and _is_digit(self._peek(2)))):
                is_float = True
                self._advance()
                if self._peek() in ("+", "-"):
                    self._advance()
                self._digits()
            text = self.text[start:self.pos]
            try:
                value = float(text) if is_float else int(text)
            except ValueError:
                # int() refuses decimal literals past the interpreter digit limit.
                raise LexError(f"numeric literal too long ({len(text)} characters)", line, col) from None

        if _is_ident_part(self._peek()):
            raise LexError("identifier starts immediately after numeric literal", self.line, self.col)
        return Token("number", text, value, line, col, newline)

    def _string(self, line: int, col: int, newline: bool) -> Token:
        start = self.pos
        quote = self._advance()
        parts: list[str] = []
        while True:
            if self._at_end() or self._peek() in _LINE_BREAKS:
                raise LexError("unterminated string literal", line, col)
            ch = self._advance()
            if ch == quote:
                break
            if ch == "\\":
                parts.append(self._escape(line, col))
            else:
                parts.append(ch)
        return Token("string", self.text[start:self.pos], "".join(parts), line, col, newline)

    def _escape(self, line: int, col: int) -> str:
        if self._at_end():
            raise LexError("unterminated string literal", line, col)
        esc_line, esc_col = self.line, self.col - 1  # at the backslash
        ch = self._advance()
        if ch in _ESCAPES:
            return _ESCAPES[ch]
        if ch == "\r":
            # Line continuation; "\r\n" counts as one break.
            if self._peek() == "\n":
                self._advance()
            return ""
        if ch in _LINE_BREAKS:
            return ""
        if ch == "x":
            return chr(self._hex_value(2, esc_line, esc_col))
        if ch == "u":
            if self._peek() == "{":
                self._advance()
                digits = ""
                while _is_hex(self._peek()):
                    digits += self._advance()
                if not digits or self._peek() != "}" or int(digits, 16) > 0x10FFFF:
                    raise LexError("invalid unicode escape", esc_line, esc_col)
                self._advance()
                return chr(int(digits, 16))
            return chr(self._hex_value(4, esc_line, esc_col))
        # Identity escape, e.g. "\q" -> "q".
        return ch

    def _hex_value(self, n: int, line: int, col: int) -> int:
        digits = ""
        for _ in range(n):
            if not _is_hex(self._peek()):
                raise LexError("invalid hexadecimal escape", line, col)
            digits += self._advance()
        return int(digits, 16)


# ----------------------------
# Syntax tree
# ----------------------------


@dataclass(frozen=True, slots=True)
class Name:
    text: str
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    value: int | float
    text: str
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class StringLiteral:
    value: str
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    items: tuple[Expr, ...]
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class Index:
    target: Expr
    index: Expr
    line: int
    col: int


Expr = Union[Name, NumberLiteral, StringLiteral, ArrayLiteral, Index]


@dataclass(frozen=True, slots=True)
class Assignment:
    target: Expr
    value: Expr
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class Declaration:
    keyword: str
    name: str
    value: Expr | None
    line: int
    col: int


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    expr: Expr
    line: int
    col: int


Statement = Union[Assignment, Declaration, ExpressionStatement]


def _describe(tok: Token) -> str:
    return "end of input" if tok.type == "eof" else repr(tok.text)


class Parser:
    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != "eof":
            raise ValueError("token stream must end with an eof token")
        self.tokens = tokens
        self.i = 0
        self.depth = 0

    def _peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.i + offset, len(self.tokens) - 1)]

    def _next(self) -> Token:
        tok = self.tokens[self.i]
        if tok.type != "eof":
            self.i += 1
        return tok

    def _at(self, punct: str) -> bool:
        tok = self._peek()
        return tok.type == "punct" and tok.text == punct

    def _fail(self, message: str, tok: Token) -> MalformedStatement:
        return MalformedStatement(message, tok.line, tok.col)

    def _expect(self, punct: str, context: str) -> Token:
        if not self._at(punct):
            tok = self._peek()
            raise self._fail(f"expected {punct!r} {context}, found {_describe(tok)}", tok)
        return self._next()

    def parse_program(self) -> list[Statement]:
        out: list[Statement] = []
        while self._peek().type != "eof":
            if self._at(";"):
                self._next()
                continue
            out.append(self._statement())
        return out

    def _statement(self) -> Statement:
        tok = self._peek()
        nxt = self._peek(1)
        if (
            tok.type == "name"
            and tok.text in _DECLARATION_KEYWORDS
            and nxt.type == "name"
            and not nxt.newline_before
        ):
            return self._declaration()

        target = self._expression()
        if self._at("="):
            self._next()
            value = self._expression()
            self._end_statement()
            return Assignment(target, value, tok.line, tok.col)
        self._end_statement()
        return ExpressionStatement(target, tok.line, tok.col)

    def _declaration(self) -> Declaration:
        kw = self._next()
        name = self._next()
        value: Expr | None = None
        if self._at("="):
            self._next()
            value = self._expression()
        self._end_statement()
        return Declaration(kw.text, name.text, value, kw.line, kw.col)

    def _end_statement(self) -> None:
        tok = self._peek()
        if self._at(";"):
            self._next()
            return
        if tok.type == "eof" or tok.newline_before:
            return
        raise self._fail(f"expected ';' or line break, found {_describe(tok)}", tok)

    def _expression(self) -> Expr:
        self.depth += 1
        if self.depth > _MAX_DEPTH:
            raise self._fail("expression nested too deeply", self._peek())
        try:
            expr = self._primary()
            while self._at("["):
                open_tok = self._next()
                index = self._expression()
                self._expect("]", "to close index")
                expr = Index(expr, index, open_tok.line, open_tok.col)
            return expr
        finally:
            self.depth -= 1

    def _primary(self) -> Expr:
        tok = self._peek()
        if tok.type == "name":
            self._next()
            return Name(tok.text, tok.line, tok.col)
        if tok.type == "number":
            self._next()
            return NumberLiteral(cast("int | float", tok.value), tok.text, tok.line, tok.col)
        if tok.type == "string":
            self._next()
            return StringLiteral(cast(str, tok.value), tok.line, tok.col)
        if self._at("["):
            return self._array()
        raise self._fail(f"expected an expression, found {_describe(tok)}", tok)

    def _array(self) -> ArrayLiteral:
        open_tok = self._next()
        items: list[Expr] = []
        while not self._at("]"):
            if self._at(","):
                raise self._fail("empty array element", self._peek())
            items.append(self._expression())
            if self._at(","):
                self._next()
            elif not self._at("]"):
                tok = self._peek()
                raise self._fail(f"expected ',' or ']' in array literal, found {_describe(tok)}", tok)
        self._next()
        return ArrayLiteral(tuple(items), open_tok.line, open_tok.col)


def tokenize(text: str) -> list[Token]:
    return Lexer(text).tokenize()


def parse(text: str) -> list[Statement]:
    return Parser(tokenize(text)).parse_program()


def assignments(text: str) -> list[Assignment]:
    """Assignment statements in document order; everything else is dropped."""
    return [s for s in parse(text) if isinstance(s, Assignment)]
