"""Tokenizer tests."""

import pytest

from gotots.frontend.tokens import (
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_IMAG,
    TK_INT,
    TK_OP,
    TK_RUNE,
    TK_STRING,
    TokenizeError,
    tokenize,
)


def values(source: str) -> list[str]:
    return [t.value for t in tokenize(source) if t.type != TK_EOF]


def test_keywords_are_their_own_type():
    toks = tokenize("type T struct")
    assert [t.type for t in toks] == ["type", TK_IDENT, "struct", TK_EOF]


def test_semicolon_after_identifier_at_newline():
    assert values("type A int\ntype B string\n") == [
        "type", "A", "int", ";", "type", "B", "string", ";",
    ]


def test_no_semicolon_after_open_brace():
    assert values("struct {\n\ta int\n}\n") == ["struct", "{", "a", "int", ";", "}", ";"]


def test_no_semicolon_after_operator():
    assert values("a,\nb") == ["a", ",", "b", ";"]


def test_semicolon_at_eof():
    toks = tokenize("package main")
    assert toks[-2].value == ";"
    assert toks[-1].type == TK_EOF


def test_empty_source():
    toks = tokenize("")
    assert len(toks) == 1
    assert toks[0].type == TK_EOF


def test_line_comment_keeps_newline():
    assert values("a // comment\nb") == ["a", ";", "b", ";"]


def test_block_comment_on_one_line_is_space():
    assert values("a /* c */ b") == ["a", "b", ";"]


def test_block_comment_spanning_lines_acts_as_newline():
    assert values("a /* one\ntwo */ b") == ["a", ";", "b", ";"]


def test_unterminated_block_comment():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize("a /* never closed")
    assert excinfo.value.msg == "comment not terminated"


def test_positions():
    toks = tokenize("package main\n\ntype  Foo int")
    foo = [t for t in toks if t.value == "Foo"][0]
    assert (foo.line, foo.col) == (3, 7)


def test_position_after_multiline_raw_string():
    toks = tokenize("a `x\ny` b")
    b = [t for t in toks if t.value == "b"][0]
    assert (b.line, b.col) == (2, 4)


@pytest.mark.parametrize(
    "source,kind",
    [
        ("42", TK_INT),
        ("0x1F", TK_INT),
        ("0o17", TK_INT),
        ("0b1010", TK_INT),
        ("1_000_000", TK_INT),
        ("0xBEEF", TK_INT),
        ("3.14", TK_FLOAT),
        (".5", TK_FLOAT),
        ("1e10", TK_FLOAT),
        ("6.02E+23", TK_FLOAT),
        ("0x1p-2", TK_FLOAT),
        ("2i", TK_IMAG),
        ("1.5i", TK_IMAG),
    ],
)
def test_number_literals(source, kind):
    toks = tokenize(source)
    assert toks[0].type == kind
    assert toks[0].value == source


def test_interpreted_string_escapes():
    toks = tokenize(r'"a\tb\n\x41é\101\""')
    assert toks[0].type == TK_STRING
    assert toks[0].value == 'a\tb\nAéA"'


def test_raw_string_is_verbatim():
    toks = tokenize('`json:"name" \\n`')
    assert toks[0].type == TK_STRING
    assert toks[0].value == 'json:"name" \\n'


def test_raw_string_drops_carriage_returns():
    toks = tokenize("`a\r\nb`")
    assert toks[0].value == "a\nb"


def test_unterminated_string():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize('x "abc\n')
    assert excinfo.value.msg == "string literal not terminated"
    assert (excinfo.value.line, excinfo.value.col) == (1, 3)


def test_unterminated_raw_string():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize("`abc")
    assert excinfo.value.msg == "raw string literal not terminated"


def test_unknown_escape():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize(r'"\q"')
    assert excinfo.value.msg == "unknown escape sequence: \\q"


def test_runes():
    toks = tokenize(r"'a' '\n' '\''")
    assert [t.type for t in toks[:3]] == [TK_RUNE, TK_RUNE, TK_RUNE]
    assert [t.value for t in toks[:3]] == ["a", "\n", "'"]


def test_empty_rune():
    with pytest.raises(TokenizeError):
        tokenize("''")


def test_unicode_identifiers():
    toks = tokenize("type Größe int")
    assert toks[1].type == TK_IDENT
    assert toks[1].value == "Größe"


def test_multi_char_operators_are_greedy():
    assert values("<-chan ... &^= :=") == ["<-", "chan", "...", "&^=", ":="]


def test_operators_have_op_type():
    toks = tokenize("*[]~")
    assert [t.type for t in toks[:3]] == [TK_OP, TK_OP, TK_OP]


def test_invalid_character():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize("type A @")
    assert excinfo.value.msg.startswith("invalid character")
    assert (excinfo.value.line, excinfo.value.col) == (1, 8)


def test_leading_byte_order_mark_is_skipped():
    toks = tokenize("\ufeffpackage main")
    assert toks[0].type == "package"
    assert (toks[0].line, toks[0].col) == (1, 1)


def test_byte_order_mark_elsewhere_is_invalid():
    with pytest.raises(TokenizeError) as excinfo:
        tokenize("package \ufeffmain")
    assert excinfo.value.msg.startswith("invalid character")
