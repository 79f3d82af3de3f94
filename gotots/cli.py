"""gotots CLI: convert the type declarations of a Go file."""

from __future__ import annotations

import sys

from gotots.backend.typescript import Failure, emit_typescript
from gotots.frontend import ParseError, ResolveError, TokenizeError, analyze
from gotots.ir import Declaration

PROG: str = "gotots"

HELP_FLAGS: set[str] = {"-h", "-help", "--help"}
VERBOSE_FLAGS: set[str] = {"-v", "-verbose", "--verbose"}

# Exit codes for an unreadable source file
EXIT_NOT_FOUND = 1
EXIT_PERMISSION = 2
EXIT_READ_ERROR = 125


def usage() -> str:
    return PROG + " ./gofile.go [./destination.ts]"


def read_source(path: str) -> tuple[str, int]:
    """Read source from file. Returns (source, exit_code) where exit_code 0 means OK."""
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("error: " + path + " does not exist", file=sys.stderr)
        return ("", EXIT_NOT_FOUND)
    except PermissionError:
        print("error: you have no permission to read " + path, file=sys.stderr)
        return ("", EXIT_PERMISSION)
    except OSError as e:
        print("error: " + path + ": " + str(e), file=sys.stderr)
        return ("", EXIT_READ_ERROR)
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("error: " + path + ": invalid utf-8", file=sys.stderr)
        return ("", EXIT_READ_ERROR)
    return (source, 0)


def write_output(output: str, path: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if path is None:
        sys.stdout.write(output)
        return 0
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(output)
    except PermissionError:
        print("error: you have no permission to write to " + path, file=sys.stderr)
        return 1
    except OSError as e:
        print("error: cannot write '" + path + "': " + str(e), file=sys.stderr)
        return 1
    return 0


def _report_skip(decl: Declaration, failure: Failure) -> None:
    print("skipped " + decl.name + ": " + str(failure), file=sys.stderr)


def _print_errors(errors: list[TokenizeError | ParseError | ResolveError]) -> None:
    for e in errors:
        print("error:" + str(e.line) + ":" + str(e.col) + ": " + e.msg, file=sys.stderr)


def run_pipeline(source: str, verbose: bool) -> tuple[int, str]:
    """Parse, resolve and translate. Returns (exit_code, output)."""
    try:
        result = analyze(source)
    except (TokenizeError, ParseError) as e:
        _print_errors([e])
        return (1, "")
    errors = result.errors()
    if len(errors) > 0:
        _print_errors(errors)
        return (1, "")
    on_skip = _report_skip if verbose else None
    return (0, emit_typescript(result.declarations, on_skip))


def parse_args(args: list[str]) -> tuple[str | None, str | None, bool, int | None]:
    """Returns (source_path, destination_path, verbose, exit_code_if_done)."""
    source_path: str | None = None
    destination_path: str | None = None
    verbose = False
    for arg in args:
        flag = arg.lower()
        if flag in HELP_FLAGS:
            print(usage())
            return (None, None, False, 0)
        if flag in VERBOSE_FLAGS:
            verbose = True
        elif arg.startswith("-"):
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            return (None, None, False, 2)
        elif source_path is None:
            source_path = arg
        elif destination_path is None:
            destination_path = arg
        else:
            print("error: unexpected argument '" + arg + "'", file=sys.stderr)
            return (None, None, False, 2)
    if source_path is None:
        print("usage: " + usage(), file=sys.stderr)
        return (None, None, False, 2)
    return (source_path, destination_path, verbose, None)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = argv if argv is not None else sys.argv[1:]
    source_path, destination_path, verbose, done = parse_args(args)
    if done is not None:
        return done
    if source_path is None:
        return 2
    source, err = read_source(source_path)
    if err != 0:
        return err
    exit_code, output = run_pipeline(source, verbose)
    if exit_code != 0:
        return exit_code
    return write_output(output, destination_path)


if __name__ == "__main__":
    sys.exit(main())
