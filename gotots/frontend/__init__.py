"""Go frontend - tokenize, parse and resolve type declarations."""

from __future__ import annotations

from .parse import ParseError as ParseError, parse
from .resolve import ResolveError as ResolveError, ResolveResult, resolve
from .tokens import TokenizeError as TokenizeError
from gotots.ir import Declaration


def analyze(source: str) -> ResolveResult:
    """Parse and resolve Go source, collecting every resolution error.

    Raises TokenizeError or ParseError when the source is not well formed.
    """
    return resolve(parse(source))


def declarations(source: str) -> list[Declaration]:
    """Parse and resolve Go source. Raises on the first run-level error."""
    result = analyze(source)
    errors = result.errors()
    if len(errors) > 0:
        raise errors[0]
    return result.declarations
