"""Go parser: recursive descent over the declarations that carry types.

Type declarations are parsed in full. const, var and func declarations are
skipped by balanced-bracket scanning: they declare no types.
"""

from __future__ import annotations

from .ast import (
    GArrayType,
    GChanType,
    GField,
    GFile,
    GFuncType,
    GImportSpec,
    GInterfaceType,
    GMapType,
    GMethod,
    GParam,
    GPointerType,
    GQualifiedName,
    GSliceType,
    GStructType,
    GType,
    GTypeName,
    GTypeParam,
    GTypeSpec,
    GTypeTerm,
    Pos,
)
from .tokens import TK_EOF, TK_IDENT, TK_RUNE, TK_STRING, Token, tokenize

OPENERS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}
CLOSERS: set[str] = {")", "]", "}"}

# Tokens that can begin a type expression
TYPE_START: set[str] = {"[", "*", "map", "chan", "<-", "func", "struct", "interface", "("}

# After `type Name [ Ident`, these make the bracket a type parameter list
TYPE_PARAM_FOLLOW: set[str] = {
    ",",
    "[",
    "~",
    "(",
    "interface",
    "map",
    "chan",
    "func",
    "struct",
    "<-",
}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


def _describe(tok: Token) -> str:
    if tok.type == TK_EOF:
        return "EOF"
    if tok.type == TK_STRING:
        return "literal " + repr(tok.value)
    if tok.value == ";":
        return "newline"
    return "'" + tok.value + "'"


class Parser:
    """Recursive descent parser for Go type declarations."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def at(self, value: str) -> bool:
        tok = self.current()
        return tok.value == value and tok.type != TK_STRING and tok.type != TK_RUNE

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def at_ident(self) -> bool:
        return self.current().type == TK_IDENT

    def at_type_start(self) -> bool:
        tok = self.current()
        if tok.type == TK_IDENT:
            return True
        return tok.type != TK_STRING and tok.type != TK_RUNE and tok.value in TYPE_START

    def expect(self, value: str) -> Token:
        if not self.at(value):
            raise self.error("expected '" + value + "', found " + _describe(self.current()))
        return self.advance()

    def expect_ident(self) -> Token:
        tok = self.current()
        if tok.type != TK_IDENT:
            raise self.error("expected identifier, found " + _describe(tok))
        return self.advance()

    def expect_semi(self) -> None:
        """Statement terminator; may be omitted before a closing ) or }."""
        if self.at(";"):
            self.advance()
            return
        if self.at(")") or self.at("}") or self.at_type(TK_EOF):
            return
        raise self.error("expected ';', found " + _describe(self.current()))

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    # ── Top Level ────────────────────────────────────────────

    def parse_file(self) -> GFile:
        self.expect("package")
        package = self.expect_ident().value
        self.expect_semi()
        imports: list[GImportSpec] = []
        while self.at("import"):
            imports.extend(self.parse_import_decl())
            self.expect_semi()
        types: list[GTypeSpec] = []
        while not self.at_type(TK_EOF):
            if self.at("type"):
                types.extend(self.parse_type_decl())
            elif self.at("const") or self.at("var"):
                self.advance()
                self.skip_decl(False)
            elif self.at("func"):
                self.advance()
                self.skip_decl(True)
            elif self.at("import"):
                raise self.error("imports must appear before other declarations")
            else:
                raise self.error(
                    "non-declaration statement outside function body: "
                    + _describe(self.current())
                )
            if not self.at_type(TK_EOF):
                if not self.at(";"):
                    raise self.error("expected ';', found " + _describe(self.current()))
                self.advance()
        return GFile(package, imports, types)

    def parse_import_decl(self) -> list[GImportSpec]:
        self.expect("import")
        specs: list[GImportSpec] = []
        if self.at("("):
            self.advance()
            while not self.at(")"):
                specs.append(self.parse_import_spec())
                self.expect_semi()
            self.expect(")")
            return specs
        specs.append(self.parse_import_spec())
        return specs

    def parse_import_spec(self) -> GImportSpec:
        pos = self._pos()
        name = ""
        if self.at_ident():
            name = self.advance().value
        elif self.at("."):
            name = self.advance().value
        tok = self.current()
        if tok.type != TK_STRING:
            raise self.error("expected import path, found " + _describe(tok))
        self.advance()
        return GImportSpec(pos, name, tok.value)

    def parse_type_decl(self) -> list[GTypeSpec]:
        self.expect("type")
        specs: list[GTypeSpec] = []
        if self.at("("):
            self.advance()
            while not self.at(")"):
                specs.append(self.parse_type_spec())
                self.expect_semi()
            self.expect(")")
            return specs
        specs.append(self.parse_type_spec())
        return specs

    def parse_type_spec(self) -> GTypeSpec:
        pos = self._pos()
        name = self.expect_ident().value
        params: list[GTypeParam] = []
        if self._at_type_params():
            params = self.parse_type_params()
        alias = False
        if self.at("="):
            self.advance()
            alias = True
        typ = self.parse_type()
        return GTypeSpec(pos, name, params, alias, typ)

    def _at_type_params(self) -> bool:
        """`type T[P C]` declares parameters; `type T [N]E` is an array."""
        if not self.at("["):
            return False
        first = self.peek(1)
        if first.type != TK_IDENT:
            return False
        follow = self.peek(2)
        if follow.type == TK_IDENT:
            return True
        if follow.type == TK_STRING or follow.type == TK_RUNE:
            return False
        return follow.value in TYPE_PARAM_FOLLOW

    def parse_type_params(self) -> list[GTypeParam]:
        self.expect("[")
        params: list[GTypeParam] = []
        while True:
            names: list[Token] = [self.expect_ident()]
            while self.at(","):
                self.advance()
                names.append(self.expect_ident())
            constraint = self.parse_type_elem()
            for tok in names:
                params.append(GTypeParam(Pos(tok.line, tok.col), tok.value, constraint))
            if not self.at(","):
                break
            self.advance()
            if self.at("]"):
                break
        self.expect("]")
        return params

    # ── Skipping ─────────────────────────────────────────────

    def skip_block(self) -> None:
        """Skip a bracketed group, from its opener through the matching closer."""
        start = self.current()
        stack: list[str] = []
        while True:
            tok = self.current()
            if tok.type == TK_EOF:
                raise ParseError("unexpected EOF, missing '" + OPENERS[start.value] + "'", start.line, start.col)
            if tok.type != TK_STRING and tok.type != TK_RUNE:
                if tok.value in OPENERS:
                    stack.append(OPENERS[tok.value])
                elif tok.value in CLOSERS:
                    if tok.value != stack[-1]:
                        raise self.error("unexpected " + _describe(tok) + ", expected '" + stack[-1] + "'")
                    stack.pop()
                    if not stack:
                        self.advance()
                        return
            self.advance()

    def skip_decl(self, is_func: bool) -> None:
        """Skip the rest of a const, var or func declaration."""
        start = self.current()
        if not is_func and self.at("("):
            self.skip_block()
            return
        while True:
            tok = self.current()
            if tok.type == TK_EOF:
                raise ParseError("unexpected EOF in declaration", start.line, start.col)
            if tok.type == TK_STRING or tok.type == TK_RUNE:
                self.advance()
                continue
            if tok.value == ";":
                return
            if tok.value == "struct" or tok.value == "interface":
                self.advance()
                if self.at("{"):
                    self.skip_block()
                continue
            if tok.value == "{" and is_func:
                # Function body
                self.skip_block()
                return
            if tok.value in OPENERS:
                self.skip_block()
                continue
            if tok.value in CLOSERS:
                raise self.error("unexpected " + _describe(tok))
            self.advance()

    # ── Types ────────────────────────────────────────────────

    def parse_type(self) -> GType:
        pos = self._pos()
        tok = self.current()
        if tok.type == TK_IDENT:
            return self.parse_type_name()
        if self.at("("):
            self.advance()
            inner = self.parse_type()
            self.expect(")")
            return inner
        if self.at("["):
            return self.parse_array_or_slice()
        if self.at("*"):
            self.advance()
            return GPointerType(pos, self.parse_type())
        if self.at("map"):
            self.advance()
            self.expect("[")
            key = self.parse_type()
            self.expect("]")
            value = self.parse_type()
            return GMapType(pos, key, value)
        if self.at("chan"):
            self.advance()
            direction = "both"
            if self.at("<-"):
                self.advance()
                direction = "send"
            return GChanType(pos, direction, self.parse_type())
        if self.at("<-"):
            self.advance()
            self.expect("chan")
            return GChanType(pos, "recv", self.parse_type())
        if self.at("func"):
            self.advance()
            return self.parse_signature(pos)
        if self.at("struct"):
            return self.parse_struct_type()
        if self.at("interface"):
            return self.parse_interface_type()
        raise self.error("expected type, found " + _describe(tok))

    def parse_type_name(self) -> GType:
        pos = self._pos()
        name = self.expect_ident().value
        if self.at("."):
            self.advance()
            member = self.expect_ident().value
            return GQualifiedName(pos, name, member, self.parse_type_args())
        return GTypeName(pos, name, self.parse_type_args())

    def parse_type_args(self) -> list[GType]:
        args: list[GType] = []
        if not self.at("["):
            return args
        self.advance()
        args.append(self.parse_type())
        while self.at(","):
            self.advance()
            if self.at("]"):
                break
            args.append(self.parse_type())
        self.expect("]")
        return args

    def parse_array_or_slice(self) -> GType:
        pos = self._pos()
        self.expect("[")
        if self.at("]"):
            self.advance()
            return GSliceType(pos, self.parse_type())
        # Length expression, kept as source text
        parts: list[str] = []
        depth = 0
        while True:
            tok = self.current()
            if tok.type == TK_EOF:
                raise self.error("expected ']', found EOF")
            if tok.type != TK_STRING and tok.type != TK_RUNE:
                if tok.value == "]" and depth == 0:
                    break
                if tok.value in OPENERS:
                    depth += 1
                elif tok.value in CLOSERS:
                    depth -= 1
            parts.append(tok.value)
            self.advance()
        if not parts:
            raise self.error("expected array length")
        self.expect("]")
        return GArrayType(pos, "".join(parts), self.parse_type())

    def parse_signature(self, pos: Pos) -> GFuncType:
        params = self.parse_parameters()
        results: list[GParam] = []
        if self.at("("):
            results = self.parse_parameters()
        elif self.at_type_start():
            rpos = self._pos()
            results = [GParam(rpos, "", self.parse_type())]
        return GFuncType(pos, params, results)

    def parse_parameters(self) -> list[GParam]:
        """( [name] [...]Type, ... ) with Go's grouped-name shorthand."""
        self.expect("(")
        entries: list[GParam] = []
        while not self.at(")"):
            pos = self._pos()
            if self.at("..."):
                self.advance()
                entries.append(GParam(pos, "", self.parse_type(), True))
            elif self.at_ident() and self._param_name_at_ident():
                name = self.advance().value
                entries.append(GParam(pos, name, self.parse_type()))
            else:
                typ = self.parse_type()
                if not self.at(",") and not self.at(")"):
                    if not isinstance(typ, GTypeName) or typ.args:
                        raise self.error("mixed named and unnamed parameters")
                    variadic = False
                    if self.at("..."):
                        self.advance()
                        variadic = True
                    entries.append(GParam(pos, typ.name, self.parse_type(), variadic))
                else:
                    entries.append(GParam(pos, "", typ))
            if not self.at(","):
                break
            self.advance()
        self.expect(")")
        any_named = False
        for entry in entries:
            if entry.name != "":
                any_named = True
        if not any_named:
            return entries
        # `a, b int`: leading unnamed entries are names sharing the next type
        group_type: GType | None = None
        i = len(entries) - 1
        while i >= 0:
            entry = entries[i]
            if entry.name != "":
                group_type = entry.typ
            else:
                if not isinstance(entry.typ, GTypeName) or group_type is None:
                    raise ParseError("mixed named and unnamed parameters", entry.pos.line, entry.pos.col)
                entry.name = entry.typ.name
                entry.typ = group_type
            i -= 1
        return entries

    def parse_struct_type(self) -> GStructType:
        pos = self._pos()
        self.expect("struct")
        self.expect("{")
        fields: list[GField] = []
        while not self.at("}"):
            fields.extend(self.parse_field_decl())
            self.expect_semi()
        self.expect("}")
        return GStructType(pos, fields)

    def _embedded_at_ident(self) -> bool:
        """Decide whether the identifier at the cursor starts an embedded field."""
        follow = self.peek(1)
        if follow.type == TK_STRING:
            return True
        if follow.value == ";" or follow.value == "}" or follow.value == ".":
            return True
        if follow.value != "[":
            return False
        # T[A] embedded vs name [N]T: look past the matching bracket
        if self.peek(2).value == "]":
            return False
        after = self._after_brackets(1)
        return after.type == TK_STRING or after.value == ";" or after.value == "}"

    def _param_name_at_ident(self) -> bool:
        """In a parameter list, `a []T` or `a [N]T` rather than the instantiation `T[A]`."""
        if self.peek(1).value != "[" or self.peek(1).type == TK_STRING:
            return False
        if self.peek(2).value == "]":
            return True
        after = self._after_brackets(1)
        if after.type == TK_IDENT:
            return True
        if after.type == TK_STRING or after.type == TK_RUNE:
            return False
        return after.value in TYPE_START

    def _after_brackets(self, offset: int) -> Token:
        """Token after the bracket group opened at offset, or EOF."""
        depth = 0
        while True:
            tok = self.peek(offset)
            if tok.type == TK_EOF:
                return tok
            if tok.type != TK_STRING and tok.type != TK_RUNE:
                if tok.value in OPENERS:
                    depth += 1
                elif tok.value in CLOSERS:
                    depth -= 1
                    if depth == 0:
                        return self.peek(offset + 1)
            offset += 1

    def parse_field_decl(self) -> list[GField]:
        pos = self._pos()
        if self.at("*") or (self.at_ident() and self._embedded_at_ident()):
            typ = self.parse_type()
            return [GField(pos, "", typ, self.parse_tag())]
        names: list[Token] = [self.expect_ident()]
        while self.at(","):
            self.advance()
            names.append(self.expect_ident())
        typ = self.parse_type()
        tag = self.parse_tag()
        fields: list[GField] = []
        for tok in names:
            fields.append(GField(Pos(tok.line, tok.col), tok.value, typ, tag))
        return fields

    def parse_tag(self) -> str:
        if self.at_type(TK_STRING):
            return self.advance().value
        return ""

    def parse_interface_type(self) -> GInterfaceType:
        pos = self._pos()
        self.expect("interface")
        self.expect("{")
        methods: list[GMethod] = []
        elems: list[list[GTypeTerm]] = []
        while not self.at("}"):
            if self.at_ident() and self.peek(1).value == "(":
                mpos = self._pos()
                name = self.advance().value
                methods.append(GMethod(mpos, name, self.parse_signature(mpos)))
            else:
                elems.append(self.parse_type_terms())
            self.expect_semi()
        self.expect("}")
        return GInterfaceType(pos, methods, elems)

    def parse_type_terms(self) -> list[GTypeTerm]:
        terms: list[GTypeTerm] = [self.parse_type_term()]
        while self.at("|"):
            self.advance()
            terms.append(self.parse_type_term())
        return terms

    def parse_type_term(self) -> GTypeTerm:
        pos = self._pos()
        tilde = False
        if self.at("~"):
            self.advance()
            tilde = True
        return GTypeTerm(pos, tilde, self.parse_type())

    def parse_type_elem(self) -> GType:
        """Constraint position: a plain type, or an implicit interface of terms."""
        pos = self._pos()
        terms = self.parse_type_terms()
        if len(terms) == 1 and not terms[0].tilde:
            return terms[0].typ
        return GInterfaceType(pos, [], [terms])


def parse(source: str) -> GFile:
    """Parse Go source code into a GFile."""
    tokens = tokenize(source)
    parser = Parser(tokens)
    return parser.parse_file()
