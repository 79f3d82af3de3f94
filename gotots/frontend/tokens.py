"""Go tokenizer: lexes source into a flat token list with semicolons inserted."""

from __future__ import annotations


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_IMAG = "IMAG"
TK_STRING = "STRING"
TK_RUNE = "RUNE"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Multi-character operators, sorted by length descending for greedy matching
MULTI_OPS: list[str] = [
    "<<=",
    ">>=",
    "&^=",
    "...",
    "&&",
    "||",
    "<-",
    "++",
    "--",
    "==",
    "!=",
    "<=",
    ">=",
    ":=",
    "<<",
    ">>",
    "&^",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
]

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "&",
    "|",
    "^",
    "<",
    ">",
    "=",
    "!",
    "~",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    ",",
    ";",
    ".",
    ":",
}

ESCAPE_MAP: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}

# A newline after one of these ends the statement
_SEMI_TYPES: set[str] = {TK_IDENT, TK_INT, TK_FLOAT, TK_IMAG, TK_STRING, TK_RUNE}
_SEMI_VALUES: set[str] = {"break", "continue", "fallthrough", "return", "++", "--", ")", "]", "}"}


class TokenizeError(Exception):
    """Error during tokenization."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Token:
    """A token with type, value, and position."""

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_hex(c: str) -> bool:
    return (c >= "0" and c <= "9") or (c >= "a" and c <= "f") or (c >= "A" and c <= "F")


def _is_octal(c: str) -> bool:
    return c >= "0" and c <= "7"


def _is_letter(c: str) -> bool:
    return c == "_" or c.isalpha()


def _is_ident_char(c: str) -> bool:
    return _is_letter(c) or c.isdigit()


def _needs_semicolon(last: Token | None) -> bool:
    if last is None:
        return False
    return last.type in _SEMI_TYPES or last.value in _SEMI_VALUES


def _process_escape(src: str, pos: int, quote: str, line: int, col: int) -> tuple[str, int]:
    """Process escape after backslash. Returns (resolved_char, new_pos)."""
    if pos >= len(src):
        raise TokenizeError("escape sequence not terminated", line, col)
    c = src[pos]
    if c in ESCAPE_MAP:
        return ESCAPE_MAP[c], pos + 1
    if c == quote:
        return c, pos + 1
    if c == "x" or c == "u" or c == "U":
        width = 2
        if c == "u":
            width = 4
        elif c == "U":
            width = 8
        digits = src[pos + 1 : pos + 1 + width]
        if len(digits) != width or not all(_is_hex(d) for d in digits):
            raise TokenizeError("invalid character in escape sequence", line, col)
        return chr(int(digits, 16)), pos + 1 + width
    if _is_octal(c):
        digits = src[pos : pos + 3]
        if len(digits) != 3 or not all(_is_octal(d) for d in digits):
            raise TokenizeError("invalid character in escape sequence", line, col)
        return chr(int(digits, 8)), pos + 3
    raise TokenizeError("unknown escape sequence: \\" + c, line, col)


def tokenize(source: str) -> list[Token]:
    """Tokenize Go source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)
    # Leading byte order mark
    if source.startswith("\ufeff"):
        pos = 1

    while pos < length:
        c = source[pos]

        # Newlines end statements
        if c == "\n":
            last = tokens[-1] if tokens else None
            if _needs_semicolon(last):
                tokens.append(Token(TK_OP, ";", line, col))
            pos += 1
            line += 1
            col = 1
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            col += 1
            continue

        # Line comment: //
        if c == "/" and pos + 1 < length and source[pos + 1] == "/":
            while pos < length and source[pos] != "\n":
                pos += 1
            continue

        # General comment: /* */, acts like a newline if it spans lines
        if c == "/" and pos + 1 < length and source[pos + 1] == "*":
            end = source.find("*/", pos + 2)
            if end < 0:
                raise TokenizeError("comment not terminated", line, col)
            body = source[pos : end + 2]
            newlines = body.count("\n")
            if newlines > 0:
                last = tokens[-1] if tokens else None
                if _needs_semicolon(last):
                    tokens.append(Token(TK_OP, ";", line, col))
                line += newlines
                col = len(body) - body.rfind("\n")
            else:
                col += len(body)
            pos = end + 2
            continue

        start_pos = pos
        start_line = line
        start_col = col

        # Number: int, float or imaginary in any base
        if _is_digit(c) or (c == "." and pos + 1 < length and _is_digit(source[pos + 1])):
            is_hex = (
                c == "0"
                and pos + 1 < length
                and (source[pos + 1] == "x" or source[pos + 1] == "X")
            )
            while pos < length:
                ch = source[pos]
                if ((ch == "e" or ch == "E") and not is_hex) or ch == "p" or ch == "P":
                    pos += 1
                    if pos < length and (source[pos] == "+" or source[pos] == "-"):
                        pos += 1
                    continue
                if _is_ident_char(ch) or ch == ".":
                    pos += 1
                    continue
                break
            raw = source[start_pos:pos]
            col += pos - start_pos
            if raw.endswith("i"):
                tokens.append(Token(TK_IMAG, raw, start_line, start_col))
            elif "." in raw or "p" in raw.lower() or (not is_hex and "e" in raw.lower()):
                tokens.append(Token(TK_FLOAT, raw, start_line, start_col))
            else:
                tokens.append(Token(TK_INT, raw, start_line, start_col))
            continue

        # Interpreted string literal: "..."
        if c == '"':
            pos += 1
            col += 1
            chars: list[str] = []
            while pos < length and source[pos] != '"':
                if source[pos] == "\n":
                    raise TokenizeError(
                        "string literal not terminated", start_line, start_col
                    )
                if source[pos] == "\\":
                    ch, new_pos = _process_escape(source, pos + 1, '"', start_line, col)
                    col += new_pos - pos
                    pos = new_pos
                    chars.append(ch)
                else:
                    chars.append(source[pos])
                    pos += 1
                    col += 1
            if pos >= length:
                raise TokenizeError("string literal not terminated", start_line, start_col)
            pos += 1  # skip closing "
            col += 1
            tokens.append(Token(TK_STRING, "".join(chars), start_line, start_col))
            continue

        # Raw string literal: `...`, may span lines
        if c == "`":
            end = source.find("`", pos + 1)
            if end < 0:
                raise TokenizeError(
                    "raw string literal not terminated", start_line, start_col
                )
            body = source[pos + 1 : end]
            newlines = body.count("\n")
            if newlines > 0:
                line += newlines
                col = len(body) - body.rfind("\n") + 1
            else:
                col += len(body) + 2
            pos = end + 1
            tokens.append(Token(TK_STRING, body.replace("\r", ""), start_line, start_col))
            continue

        # Rune literal: '...'
        if c == "'":
            pos += 1
            col += 1
            if pos >= length or source[pos] == "\n":
                raise TokenizeError("rune literal not terminated", start_line, start_col)
            if source[pos] == "\\":
                rune_ch, new_pos = _process_escape(source, pos + 1, "'", start_line, col)
                col += new_pos - pos
                pos = new_pos
            elif source[pos] == "'":
                raise TokenizeError("empty rune literal or unescaped ' in rune literal", start_line, start_col)
            else:
                rune_ch = source[pos]
                pos += 1
                col += 1
            if pos >= length or source[pos] != "'":
                raise TokenizeError("rune literal not terminated", start_line, start_col)
            pos += 1  # skip closing '
            col += 1
            tokens.append(Token(TK_RUNE, rune_ch, start_line, start_col))
            continue

        # Identifier or keyword
        if _is_letter(c):
            while pos < length and _is_ident_char(source[pos]):
                pos += 1
                col += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                tokens.append(Token(word, word, start_line, start_col))
            else:
                tokens.append(Token(TK_IDENT, word, start_line, start_col))
            continue

        # Multi-character operators
        matched = False
        for op in MULTI_OPS:
            op_len = len(op)
            if pos + op_len <= length and source[pos : pos + op_len] == op:
                tokens.append(Token(TK_OP, op, start_line, start_col))
                pos += op_len
                col += op_len
                matched = True
                break
        if matched:
            continue

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, start_line, start_col))
            pos += 1
            col += 1
            continue

        raise TokenizeError("invalid character " + repr(c), line, col)

    last = tokens[-1] if tokens else None
    if _needs_semicolon(last):
        tokens.append(Token(TK_OP, ";", line, col))
    tokens.append(Token(TK_EOF, "", line, col))
    return tokens
