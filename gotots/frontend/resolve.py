"""Name and type resolution: GFile -> ordered list of Declarations.

Scoping is local -> package -> universe: type parameters of the declaration
being resolved, then package-level type declarations, then predeclared names.
Imported packages are not loaded; a qualified name only has to refer to an
imported package, and its underlying type is unknown.
"""

from __future__ import annotations

from .ast import (
    GArrayType,
    GChanType,
    GFile,
    GFuncType,
    GInterfaceType,
    GMapType,
    GPointerType,
    GQualifiedName,
    GSliceType,
    GStructType,
    GType,
    GTypeName,
    GTypeSpec,
    Pos,
    type_string,
)
from gotots.ir import (
    BOOLEAN,
    COMPLEX,
    NUMERIC,
    OTHER,
    STRING,
    Alias,
    Array,
    Basic,
    BasicCategory,
    Declaration,
    FieldSpec,
    Map,
    Named,
    Pointer,
    Slice,
    Struct,
    TypeNode,
)


UNIVERSE_BASIC: dict[str, BasicCategory] = {
    "bool": BOOLEAN,
    "string": STRING,
    "int": NUMERIC,
    "int8": NUMERIC,
    "int16": NUMERIC,
    "int32": NUMERIC,
    "int64": NUMERIC,
    "uint": NUMERIC,
    "uint8": NUMERIC,
    "uint16": NUMERIC,
    "uint32": NUMERIC,
    "uint64": NUMERIC,
    "uintptr": NUMERIC,
    "float32": NUMERIC,
    "float64": NUMERIC,
    "byte": NUMERIC,
    "rune": NUMERIC,
    "complex64": COMPLEX,
    "complex128": COMPLEX,
}

# Predeclared interface types: name -> underlying spelling
UNIVERSE_NAMED: dict[str, str] = {
    "error": "interface{Error() string}",
    "comparable": "comparable",
}

UNIVERSE_ALIAS: dict[str, str] = {
    "any": "interface{}",
}


class ResolveError(Exception):
    """Resolution error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class ResolveResult:
    """Declarations in name order, plus every error found."""

    def __init__(self) -> None:
        self.declarations: list[Declaration] = []
        self._errors: list[ResolveError] = []

    def add_error(self, err: ResolveError) -> None:
        for existing in self._errors:
            if existing.msg == err.msg and existing.line == err.line and existing.col == err.col:
                return
        self._errors.append(err)

    def errors(self) -> list[ResolveError]:
        return sorted(self._errors, key=lambda e: (e.line, e.col))


def _array_length(text: str) -> int:
    """Integer value of a literal length, or -1 for constant expressions."""
    try:
        return int(text, 0)
    except ValueError:
        return -1


class Resolver:
    """Binds names in one file and computes underlying types."""

    def __init__(self, result: ResolveResult) -> None:
        self.result: ResolveResult = result
        self.specs: dict[str, GTypeSpec] = {}
        self.imports: dict[str, str] = {}
        self.dot_imports: bool = False
        self.cache: dict[str, TypeNode] = {}
        self.cyclic: set[str] = set()

    def error(self, msg: str, pos: Pos) -> None:
        self.result.add_error(ResolveError(msg, pos.line, pos.col))

    # ── Declarations ─────────────────────────────────────────

    def collect(self, file: GFile) -> None:
        for imp in file.imports:
            if imp.name == "_":
                continue
            if imp.name == ".":
                self.dot_imports = True
                continue
            local = imp.name
            if local == "":
                local = imp.path.rsplit("/", 1)[-1]
            if local in self.imports:
                self.error(local + " redeclared in this block", imp.pos)
                continue
            self.imports[local] = imp.path
        for spec in file.types:
            if spec.name == "_":
                continue
            if spec.name in self.specs:
                self.error(spec.name + " redeclared in this block", spec.pos)
                continue
            if spec.name in self.imports:
                self.error(
                    spec.name + " already declared through import of package", spec.pos
                )
                continue
            self.specs[spec.name] = spec

    def check_cycles(self) -> None:
        """Report types that contain themselves without indirection."""
        done: set[str] = set()
        for name in sorted(self.specs.keys()):
            self.visit(name, [], done)

    def visit(self, name: str, path: list[str], done: set[str]) -> None:
        if name in path:
            if name not in self.cyclic:
                self.cyclic.add(name)
                self.error("invalid recursive type " + name, self.specs[name].pos)
            return
        if name in done:
            return
        spec = self.specs[name]
        params = {p.name for p in spec.params}
        path.append(name)
        for dep in _contained_names(spec.typ, params):
            if dep in self.specs:
                self.visit(dep, path, done)
        path.pop()
        done.add(name)

    def declarations(self) -> list[Declaration]:
        decls: list[Declaration] = []
        for name in sorted(self.specs.keys()):
            spec = self.specs[name]
            env: dict[str, TypeNode] = {}
            for param in spec.params:
                env[param.name] = Basic(OTHER, param.name)
            for param in spec.params:
                self.convert_constraint(param.constraint, env)
            underlying = self.spec_underlying(spec, env, [])
            if not spec.alias:
                decls.append(Declaration(name, underlying))
        return decls

    # ── Underlying types ─────────────────────────────────────

    def spec_underlying(
        self, spec: GTypeSpec, env: dict[str, TypeNode], stack: list[str]
    ) -> TypeNode:
        if spec.name in stack:
            if spec.name not in self.cyclic:
                self.cyclic.add(spec.name)
                self.error("invalid recursive type " + spec.name, spec.pos)
            return Basic(OTHER, spec.name)
        generic = len(spec.params) > 0
        if not generic and spec.name in self.cache:
            return self.cache[spec.name]
        stack.append(spec.name)
        underlying = self.underlying(spec.typ, env, stack)
        stack.pop()
        if not generic:
            self.cache[spec.name] = underlying
        return underlying

    def underlying(self, t: GType, env: dict[str, TypeNode], stack: list[str]) -> TypeNode:
        """Follow names on the right-hand side down to a type literal."""
        if isinstance(t, GTypeName):
            if t.name in env:
                if t.args:
                    self.error(t.name + " is not a generic type", t.pos)
                if len(stack) == 1:
                    self.error("cannot use a type parameter as RHS in type declaration", t.pos)
                return env[t.name]
            if t.name in self.specs:
                spec = self.specs[t.name]
                args = [self.convert(a, env) for a in t.args]
                if not self.check_arity(spec, len(args), t.pos):
                    return Basic(OTHER, type_string(t))
                inner: dict[str, TypeNode] = {}
                i = 0
                while i < len(spec.params):
                    inner[spec.params[i].name] = args[i]
                    i += 1
                return self.spec_underlying(spec, inner, stack)
            if t.name in UNIVERSE_BASIC:
                if t.args:
                    self.error(t.name + " is not a generic type", t.pos)
                return Basic(UNIVERSE_BASIC[t.name], t.name)
            if t.name in UNIVERSE_NAMED:
                if t.name == "comparable":
                    self.error("cannot use comparable outside a type constraint", t.pos)
                return Basic(OTHER, UNIVERSE_NAMED[t.name])
            if t.name in UNIVERSE_ALIAS:
                return Basic(OTHER, UNIVERSE_ALIAS[t.name])
            return self.undefined(t)
        if isinstance(t, GQualifiedName):
            self.convert(t, env)
            return Basic(OTHER, type_string(t))
        return self.convert(t, env)

    def check_arity(self, spec: GTypeSpec, nargs: int, pos: Pos) -> bool:
        nparams = len(spec.params)
        if nparams == 0 and nargs > 0:
            self.error(spec.name + " is not a generic type", pos)
            return False
        if nparams > 0 and nargs == 0:
            self.error("cannot use generic type " + spec.name + " without instantiation", pos)
            return False
        if nargs != nparams:
            self.error(
                "got "
                + str(nargs)
                + " type arguments but "
                + spec.name
                + " has "
                + str(nparams)
                + " type parameters",
                pos,
            )
            return False
        return True

    def undefined(self, t: GTypeName) -> TypeNode:
        if not self.dot_imports:
            self.error("undefined: " + t.name, t.pos)
        return Basic(OTHER, t.name)

    # ── Nested positions ─────────────────────────────────────

    def convert(self, t: GType, env: dict[str, TypeNode]) -> TypeNode:
        """Resolve a type expression; names become references."""
        if isinstance(t, GTypeName):
            if t.name in env:
                if t.args:
                    self.error(t.name + " is not a generic type", t.pos)
                return env[t.name]
            if t.name in self.specs:
                spec = self.specs[t.name]
                for a in t.args:
                    self.convert(a, env)
                self.check_arity(spec, len(t.args), t.pos)
                if spec.alias:
                    return Alias(t.name)
                return Named(t.name)
            if t.name in UNIVERSE_BASIC:
                if t.args:
                    self.error(t.name + " is not a generic type", t.pos)
                return Basic(UNIVERSE_BASIC[t.name], t.name)
            if t.name in UNIVERSE_NAMED:
                if t.name == "comparable":
                    self.error("cannot use comparable outside a type constraint", t.pos)
                return Named(t.name)
            if t.name in UNIVERSE_ALIAS:
                return Alias(t.name)
            return self.undefined(t)
        if isinstance(t, GQualifiedName):
            for a in t.args:
                self.convert(a, env)
            if t.package not in self.imports:
                self.error("undefined: " + t.package, t.pos)
                return Basic(OTHER, type_string(t))
            if t.package == "unsafe" and self.imports[t.package] == "unsafe":
                return Basic(OTHER, type_string(t))
            return Named(t.name)
        if isinstance(t, GArrayType):
            if t.length == "...":
                self.error("invalid use of [...] array (outside a composite literal)", t.pos)
            return Array(self.convert(t.elem, env), _array_length(t.length))
        if isinstance(t, GSliceType):
            return Slice(self.convert(t.elem, env))
        if isinstance(t, GPointerType):
            return Pointer(self.convert(t.elem, env))
        if isinstance(t, GMapType):
            return Map(self.convert(t.key, env), self.convert(t.value, env))
        if isinstance(t, GStructType):
            return self.convert_struct(t, env)
        if isinstance(t, GChanType):
            self.convert(t.elem, env)
            return Basic(OTHER, type_string(t))
        if isinstance(t, GFuncType):
            self.check_signature(t, env)
            return Basic(OTHER, type_string(t))
        if isinstance(t, GInterfaceType):
            for method in t.methods:
                self.check_signature(method.typ, env)
            for elem in t.elems:
                for term in elem:
                    self.convert_constraint(term.typ, env)
            return Basic(OTHER, type_string(t))
        return Basic(OTHER, type_string(t))

    def convert_constraint(self, t: GType, env: dict[str, TypeNode]) -> TypeNode:
        """Constraint position, where the predeclared comparable is allowed."""
        if isinstance(t, GTypeName) and t.name == "comparable":
            if t.name not in env and t.name not in self.specs:
                return Named(t.name)
        return self.convert(t, env)

    def convert_struct(self, t: GStructType, env: dict[str, TypeNode]) -> Struct:
        fields: list[FieldSpec] = []
        seen: set[str] = set()
        for f in t.fields:
            key = f.name
            if key == "":
                key = _embedded_name(f.typ)
            if key != "_" and key in seen:
                self.error(key + " redeclared", f.pos)
            seen.add(key)
            fields.append(FieldSpec(f.name, self.convert(f.typ, env)))
        return Struct(tuple(fields))

    def check_signature(self, t: GFuncType, env: dict[str, TypeNode]) -> None:
        for p in t.params:
            self.convert(p.typ, env)
        for r in t.results:
            self.convert(r.typ, env)


def _contained_names(t: GType, params: set[str]) -> list[str]:
    """Names whose values are stored inline in a value of t.

    Pointers, slices, maps, channels, functions and interfaces hold their
    element by reference, so they end the walk.
    """
    if isinstance(t, GTypeName):
        if t.name in params:
            return []
        return [t.name]
    if isinstance(t, GArrayType):
        return _contained_names(t.elem, params)
    if isinstance(t, GStructType):
        names: list[str] = []
        for f in t.fields:
            names.extend(_contained_names(f.typ, params))
        return names
    return []


def _embedded_name(t: GType) -> str:
    """Field name an embedded field is promoted under."""
    if isinstance(t, GPointerType):
        return _embedded_name(t.elem)
    if isinstance(t, GTypeName):
        return t.name
    if isinstance(t, GQualifiedName):
        return t.name
    return type_string(t)


def resolve(file: GFile) -> ResolveResult:
    """Resolve all type declarations in file."""
    result = ResolveResult()
    resolver = Resolver(result)
    resolver.collect(file)
    resolver.check_cycles()
    result.declarations = resolver.declarations()
    return result
