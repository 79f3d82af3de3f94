"""TypeScript backend: resolved declarations → structural type notation.

Every translation returns (text, failure). A failure is confined to the
declaration being translated: the enumerator drops that declaration and keeps
going. Run-level errors never reach this module; they are raised by the
frontend before any declaration is translated.

Output shapes:

| IR                  | Notation                         |
|---------------------|----------------------------------|
| Basic boolean       | bool                             |
| Basic numeric       | number                           |
| Basic string        | string                           |
| Named / Alias       | the referenced name              |
| Slice / Array       | []T (array length is dropped)    |
| Pointer             | [null | T]                       |
| Map                 | Map<K, V>                        |
| Struct              | { one "  name T" line per field }|
| Tuple               | [name, name]                     |
| UnionConstraint     | A | B                            |
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from gotots.ir import (
    BOOLEAN,
    NUMERIC,
    STRING,
    Alias,
    Array,
    Basic,
    Declaration,
    Map,
    Named,
    Pointer,
    Slice,
    Struct,
    Tuple,
    TypeNode,
    UnionConstraint,
)

EMBEDDED_FIELD = "Embedded fields are not supported"
NOT_IMPLEMENTED = "Type is unsupported"


@dataclass(frozen=True)
class Failure:
    """Recoverable translation failure. Abstract."""

    node: TypeNode

    @property
    def text(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.text + " : " + str(self.node)


@dataclass(frozen=True)
class TypeUnsupported(Failure):
    """The node's category has no notation equivalent."""

    @property
    def text(self) -> str:
        return NOT_IMPLEMENTED


@dataclass(frozen=True)
class EmbeddedFieldUnsupported(Failure):
    """The struct has a field without a name."""

    @property
    def text(self) -> str:
        return EMBEDDED_FIELD


Translation = tuple[str, Failure | None]

SkipHook = Callable[[Declaration, Failure], None]


def translate(node: TypeNode) -> Translation:
    """Map one type node to notation text."""
    match node:
        case Basic(category=category):
            if category == BOOLEAN:
                return "bool", None
            if category == NUMERIC:
                return "number", None
            if category == STRING:
                return "string", None
            return "", TypeUnsupported(node)
        case Alias(name=name):
            return name, None
        case Named(name=name):
            return name, None
        case Array(elem=elem):
            value, err = translate(elem)
            if err is not None:
                return "", err
            return "[]" + value, None
        case Slice(elem=elem):
            value, err = translate(elem)
            if err is not None:
                return "", err
            return "[]" + value, None
        case Pointer(elem=elem):
            value, err = translate(elem)
            if err is not None:
                return "", err
            return "[null | " + value + "]", None
        case Map(key=key, value=val):
            key_text, err = translate(key)
            if err is not None:
                return "", err
            value_text, err = translate(val)
            if err is not None:
                return "", err
            return "Map<" + key_text + ", " + value_text + ">", None
        case Struct():
            return translate_struct(node)
        case Tuple():
            return translate_tuple(node), None
        case UnionConstraint():
            return translate_union(node)
        case _:
            return "", TypeUnsupported(node)


def translate_struct(node: Struct) -> Translation:
    """One `  name type` line per field. All fields translate or none do."""
    lines: list[str] = ["{\n"]
    for f in node.fields:
        if f.embedded:
            return "", EmbeddedFieldUnsupported(node)
        value, err = translate(f.type)
        if err is not None:
            return "", err
        lines.append("  " + f.name + " " + value + "\n")
    lines.append("}")
    return "".join(lines), None


def translate_tuple(node: Tuple) -> str:
    # Element labels only; an empty tuple is "[]"
    return "[" + ", ".join(e.name for e in node.elements) + "]"


def translate_union(node: UnionConstraint) -> Translation:
    if len(node.terms) == 0:
        return "", TypeUnsupported(node)
    parts: list[str] = []
    for term in node.terms:
        value, err = translate(term)
        if err is not None:
            return "", err
        parts.append(value)
    return " | ".join(parts), None


def emit_declaration(decl: Declaration) -> Translation:
    """`type Name = value` line for one declaration."""
    value, err = translate(decl.underlying)
    if err is not None:
        return "", err
    return "type " + decl.name + " = " + value + "\n", None


def emit_typescript(declarations: list[Declaration], on_skip: SkipHook | None = None) -> str:
    """Translate declarations in order, dropping the ones that fail.

    on_skip, when given, is called with each dropped declaration and its
    failure; it does not affect the output.
    """
    out: list[str] = []
    for decl in declarations:
        text, err = emit_declaration(decl)
        if err is not None:
            if on_skip is not None:
                on_skip(decl, err)
            continue
        out.append(text)
    return "".join(out)
