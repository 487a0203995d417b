import pytest

from sks.as3_parser import (
    ArrayLiteral,
    Assignment,
    Declaration,
    ExpressionStatement,
    Index,
    Name,
    NumberLiteral,
    StringLiteral,
    assignments,
    parse,
    tokenize,
)
from sks.errors import LexError, MalformedStatement


def test_tokenize_statement() -> None:
    toks = tokenize("lvlArray[0][1] = [B0, 'x'];")
    assert [t.type for t in toks] == [
        "name", "punct", "number", "punct", "punct", "number", "punct",
        "punct", "punct", "name", "punct", "string", "punct", "punct", "eof",
    ]
    assert toks[0].text == "lvlArray"
    assert toks[11].value == "x"
    assert toks[11].text == "'x'"


def test_tokenize_tracks_lines_and_line_breaks() -> None:
    toks = tokenize("a // comment\n/* block\ncomment */ b c")
    assert [(t.text, t.line, t.col, t.newline_before) for t in toks[:3]] == [
        ("a", 1, 1, False),
        ("b", 3, 12, True),
        ("c", 3, 14, False),
    ]


def test_numbers() -> None:
    values = [t.value for t in tokenize("00 0 7 1.5 .5 0x1F 1e2 2.") if t.type == "number"]
    assert values == [0, 0, 7, 1.5, 0.5, 31, 100.0, 2.0]
    assert isinstance(values[0], int)


def test_string_escapes() -> None:
    src = r"""'\x41B\u{43}' "a\"b" 'it\'s' "\n\t\\" '\q' "x\
y" """
    values = [t.value for t in tokenize(src) if t.type == "string"]
    assert values == ["ABC", 'a"b', "it's", "\n\t\\", "q", "xy"]


@pytest.mark.parametrize(
    "src, line, col",
    [
        ("'abc", 1, 1),
        ("x = 'ab\ncd'", 1, 5),
        ("\n  a + b", 2, 5),
        ("0A", 1, 2),
        ("a /* never closed", 1, 3),
        ("'\\u12'", 1, 2),
    ],
)
def test_lex_errors_carry_position(src: str, line: int, col: int) -> None:
    with pytest.raises(LexError) as ei:
        tokenize(src)
    assert (ei.value.line, ei.value.col) == (line, col)


def test_parse_assignment_shape() -> None:
    (stmt,) = parse('lvlArray[X]["1"] = [00, B0, "Note:hi"];')
    assert isinstance(stmt, Assignment)
    outer = stmt.target
    assert isinstance(outer, Index)
    assert isinstance(outer.index, StringLiteral) and outer.index.value == "1"
    inner = outer.target
    assert isinstance(inner, Index)
    assert inner.target == Name("lvlArray", 1, 1)
    assert isinstance(inner.index, Name) and inner.index.text == "X"

    row = stmt.value
    assert isinstance(row, ArrayLiteral)
    assert [type(i) for i in row.items] == [NumberLiteral, Name, StringLiteral]


def test_statement_kinds() -> None:
    stmts = parse("var lvlArray = [];\nlet n\nfoo[1];\n;;\na = b")
    assert isinstance(stmts[0], Declaration) and stmts[0].name == "lvlArray"
    assert isinstance(stmts[0].value, ArrayLiteral)
    assert isinstance(stmts[1], Declaration) and stmts[1].value is None
    assert isinstance(stmts[2], ExpressionStatement)
    assert isinstance(stmts[3], Assignment)
    assert len(stmts) == 4


def test_assignments_drops_other_statements() -> None:
    got = assignments("// header\nvar lvlArray = [];\nx;\na = 1;\nb = 2\n")
    assert [s.target for s in got] == [Name("a", 4, 1), Name("b", 5, 1)]


def test_line_break_ends_statement_without_semicolon() -> None:
    assert len(parse("a = [1]\nb = [2]")) == 2
    with pytest.raises(MalformedStatement) as ei:
        parse("a = [1] b = [2]")
    assert (ei.value.line, ei.value.col) == (1, 9)


def test_array_literal_edges() -> None:
    (stmt,) = parse("a = [1, 2,]")
    assert isinstance(stmt, Assignment)
    assert isinstance(stmt.value, ArrayLiteral) and len(stmt.value.items) == 2

    (stmt,) = parse("a = [\n  1,\n  [2, 3],\n]")
    assert isinstance(stmt, Assignment)
    assert isinstance(stmt.value, ArrayLiteral) and isinstance(stmt.value.items[1], ArrayLiteral)

    with pytest.raises(MalformedStatement, match="empty array element"):
        parse("a = [1,,2]")
    with pytest.raises(MalformedStatement, match="end of input"):
        parse("a = [1, 2")
    with pytest.raises(MalformedStatement, match="expected ',' or ']'"):
        parse("a = [1 2]")


def test_malformed_statements() -> None:
    with pytest.raises(MalformedStatement):
        parse("a = ")
    with pytest.raises(MalformedStatement):
        parse("a[1 = 2")
    with pytest.raises(MalformedStatement):
        parse("a = b = c")
    with pytest.raises(MalformedStatement):
        parse("= 1")


def test_nesting_limit() -> None:
    with pytest.raises(MalformedStatement, match="nested too deeply"):
        parse("a = " + "[" * 200 + "]" * 200)
