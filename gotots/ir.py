"""gotots IR - resolved type graph handed from the frontend to the backend.

Architecture:
    Go source -> Frontend (tokens, parse, resolve) -> [IR] -> Backend -> TypeScript

The frontend produces a fully resolved, immutable graph. Named and alias
references stop the graph, so every structural walk terminates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


# ============================================================
# TYPES
#
# All types are frozen (immutable, hashable).
# ============================================================


@dataclass(frozen=True)
class TypeNode:
    """Base for all type nodes. Abstract."""


BasicCategory = Literal["boolean", "numeric", "string", "complex", "other"]

BOOLEAN: BasicCategory = "boolean"
NUMERIC: BasicCategory = "numeric"
STRING: BasicCategory = "string"
COMPLEX: BasicCategory = "complex"
OTHER: BasicCategory = "other"


@dataclass(frozen=True)
class Basic(TypeNode):
    """Basic type, classified by category.

    | Category | Go                                   | TS       |
    |----------|--------------------------------------|----------|
    | boolean  | bool                                 | bool     |
    | numeric  | int*, uint*, float*, byte, rune      | number   |
    | string   | string                               | string   |
    | complex  | complex64, complex128                | (none)   |
    | other    | chan, func, interface, type params   | (none)   |

    `name` is the source spelling, used in diagnostics only.
    """

    category: BasicCategory
    name: str = ""

    def __str__(self) -> str:
        if self.name:
            return self.name
        return self.category


@dataclass(frozen=True)
class Named(TypeNode):
    """Reference to a defined type by name. Never inlined."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Alias(TypeNode):
    """Reference to a type alias by name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer(TypeNode):
    """Pointer to elem."""

    elem: TypeNode

    def __str__(self) -> str:
        return "*" + str(self.elem)


@dataclass(frozen=True)
class Slice(TypeNode):
    """Growable sequence."""

    elem: TypeNode

    def __str__(self) -> str:
        return "[]" + str(self.elem)


@dataclass(frozen=True)
class Array(TypeNode):
    """Fixed-size sequence.

    Invariants:
    - length >= 0, or -1 when the length is not an integer literal
    """

    elem: TypeNode
    length: int

    def __str__(self) -> str:
        if self.length < 0:
            return "[...]" + str(self.elem)
        return "[" + str(self.length) + "]" + str(self.elem)


@dataclass(frozen=True)
class Map(TypeNode):
    """Key-value mapping."""

    key: TypeNode
    value: TypeNode

    def __str__(self) -> str:
        return "map[" + str(self.key) + "]" + str(self.value)


@dataclass(frozen=True)
class FieldSpec:
    """Struct member. An empty name marks an embedded field."""

    name: str
    type: TypeNode

    @property
    def embedded(self) -> bool:
        return self.name == ""


@dataclass(frozen=True)
class Struct(TypeNode):
    """Struct literal type. Field order is declaration order."""

    fields: tuple[FieldSpec, ...] = ()

    def __str__(self) -> str:
        parts: list[str] = []
        for f in self.fields:
            if f.embedded:
                parts.append(str(f.type))
            else:
                parts.append(f.name + " " + str(f.type))
        return "struct{" + "; ".join(parts) + "}"


@dataclass(frozen=True)
class TupleElem:
    """Tuple member. Only the label survives translation."""

    name: str


@dataclass(frozen=True)
class Tuple(TypeNode):
    """Ordered list of labelled elements (parameter/result lists)."""

    elements: tuple[TupleElem, ...] = ()

    def __str__(self) -> str:
        return "(" + ", ".join(e.name for e in self.elements) + ")"


@dataclass(frozen=True)
class UnionConstraint(TypeNode):
    """Type-set union `A | B | ...` from a constraint.

    Invariants:
    - len(terms) >= 1
    """

    terms: tuple[TypeNode, ...]

    def __str__(self) -> str:
        return " | ".join(str(t) for t in self.terms)


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass(frozen=True)
class Declaration:
    """Package-level defined type: name plus fully resolved underlying type."""

    name: str
    underlying: TypeNode
