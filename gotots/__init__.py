"""gotots: Go type declarations to TypeScript-style structural types."""

from __future__ import annotations

from .backend.typescript import (
    EmbeddedFieldUnsupported as EmbeddedFieldUnsupported,
    Failure as Failure,
    SkipHook,
    TypeUnsupported as TypeUnsupported,
    emit_typescript,
    translate as translate,
)
from .frontend import (
    ParseError as ParseError,
    ResolveError as ResolveError,
    TokenizeError as TokenizeError,
    declarations as declarations,
)


def convert(source: str, on_skip: SkipHook | None = None) -> str:
    """Convert Go source to TypeScript type declarations.

    Raises TokenizeError, ParseError or ResolveError when the file as a whole
    cannot be processed. Declarations that cannot be translated are left out.
    """
    return emit_typescript(declarations(source), on_skip)
