"""Go AST: parse-time node definitions for type declarations."""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# TYPES (parse-time, unresolved)
# ============================================================


@dataclass
class GType:
    """Base for all type expressions."""

    pos: Pos


@dataclass
class GTypeName(GType):
    """Name, optionally instantiated: T or T[A, B]."""

    name: str
    args: list[GType] = field(default_factory=list)


@dataclass
class GQualifiedName(GType):
    """Imported name: pkg.T or pkg.T[A]."""

    package: str
    name: str
    args: list[GType] = field(default_factory=list)


@dataclass
class GArrayType(GType):
    """[N]T. length is the source text of the length expression."""

    length: str
    elem: GType


@dataclass
class GSliceType(GType):
    """[]T."""

    elem: GType


@dataclass
class GPointerType(GType):
    """*T."""

    elem: GType


@dataclass
class GMapType(GType):
    """map[K]V."""

    key: GType
    value: GType


@dataclass
class GChanType(GType):
    """chan T, <-chan T, chan<- T. dir is "both", "recv" or "send"."""

    dir: str
    elem: GType


@dataclass
class GParam:
    """Function parameter or result. name is "" when unnamed."""

    pos: Pos
    name: str
    typ: GType
    variadic: bool = False


@dataclass
class GFuncType(GType):
    """func(params) results."""

    params: list[GParam]
    results: list[GParam]


@dataclass
class GField:
    """Struct field. name is "" for an embedded field."""

    pos: Pos
    name: str
    typ: GType
    tag: str = ""


@dataclass
class GStructType(GType):
    """struct { fields }."""

    fields: list[GField]


@dataclass
class GMethod:
    """Interface method: Name(params) results."""

    pos: Pos
    name: str
    typ: GFuncType


@dataclass
class GTypeTerm:
    """One term of an interface type element: T or ~T."""

    pos: Pos
    tilde: bool
    typ: GType


@dataclass
class GInterfaceType(GType):
    """interface { methods; embedded types and unions }.

    Each entry of elems is one type element; a single-term element without
    tilde is a plain embedded interface.
    """

    methods: list[GMethod]
    elems: list[list[GTypeTerm]]


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass
class GImportSpec:
    """import name "path". name is "" when omitted."""

    pos: Pos
    name: str
    path: str


@dataclass
class GTypeParam:
    """Type parameter with its constraint."""

    pos: Pos
    name: str
    constraint: GType


@dataclass
class GTypeSpec:
    """type Name[Params] Type, or type Name = Type when alias."""

    pos: Pos
    name: str
    params: list[GTypeParam]
    alias: bool
    typ: GType


@dataclass
class GFile:
    """A parsed source file: package name, imports and type declarations."""

    package: str
    imports: list[GImportSpec]
    types: list[GTypeSpec]


# ============================================================
# RENDERING
# ============================================================


def _params_string(params: list[GParam]) -> str:
    parts: list[str] = []
    for p in params:
        text = type_string(p.typ)
        if p.variadic:
            text = "..." + text
        if p.name:
            text = p.name + " " + text
        parts.append(text)
    return ", ".join(parts)


def type_string(t: GType) -> str:
    """Render a type expression in Go syntax, for diagnostics."""
    if isinstance(t, GTypeName):
        if t.args:
            return t.name + "[" + ", ".join(type_string(a) for a in t.args) + "]"
        return t.name
    if isinstance(t, GQualifiedName):
        text = t.package + "." + t.name
        if t.args:
            text += "[" + ", ".join(type_string(a) for a in t.args) + "]"
        return text
    if isinstance(t, GArrayType):
        return "[" + t.length + "]" + type_string(t.elem)
    if isinstance(t, GSliceType):
        return "[]" + type_string(t.elem)
    if isinstance(t, GPointerType):
        return "*" + type_string(t.elem)
    if isinstance(t, GMapType):
        return "map[" + type_string(t.key) + "]" + type_string(t.value)
    if isinstance(t, GChanType):
        if t.dir == "recv":
            return "<-chan " + type_string(t.elem)
        if t.dir == "send":
            return "chan<- " + type_string(t.elem)
        return "chan " + type_string(t.elem)
    if isinstance(t, GFuncType):
        text = "func(" + _params_string(t.params) + ")"
        if len(t.results) == 1 and t.results[0].name == "":
            text += " " + type_string(t.results[0].typ)
        elif t.results:
            text += " (" + _params_string(t.results) + ")"
        return text
    if isinstance(t, GStructType):
        parts: list[str] = []
        for f in t.fields:
            if f.name:
                parts.append(f.name + " " + type_string(f.typ))
            else:
                parts.append(type_string(f.typ))
        return "struct{" + "; ".join(parts) + "}"
    if isinstance(t, GInterfaceType):
        parts = []
        for m in t.methods:
            parts.append(m.name + type_string(m.typ)[4:])
        for elem in t.elems:
            terms: list[str] = []
            for term in elem:
                prefix = "~" if term.tilde else ""
                terms.append(prefix + type_string(term.typ))
            parts.append(" | ".join(terms))
        return "interface{" + "; ".join(parts) + "}"
    return "<unknown>"
