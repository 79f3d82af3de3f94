"""Pytest-based parser tests."""

import signal
from pathlib import Path

import pytest

from conftest import discover_tests
from gotots.frontend.ast import (
    GArrayType,
    GChanType,
    GFuncType,
    GInterfaceType,
    GMapType,
    GPointerType,
    GQualifiedName,
    GSliceType,
    GStructType,
    GTypeName,
    type_string,
)
from gotots.frontend.parse import ParseError, parse
from gotots.frontend.tokens import TokenizeError

PARSE_TIMEOUT = 5


def _timeout_handler(signum, frame):
    raise TimeoutError("parse() timed out")


signal.signal(signal.SIGALRM, _timeout_handler)

PARSE_DIR = Path(__file__).parent / "03_parse"


def pytest_generate_tests(metafunc):
    """Parametrize tests over parse test files."""
    if "parse_input" in metafunc.fixturenames:
        params = [
            pytest.param(test_input, expected, id=test_id)
            for test_id, test_input, expected in discover_tests(PARSE_DIR)
        ]
        metafunc.parametrize("parse_input,parse_expected", params)


def test_parse(parse_input: str, parse_expected: str):
    """Verify parser accepts or rejects the input as expected."""
    try:
        signal.alarm(PARSE_TIMEOUT)
        parse(parse_input)
        signal.alarm(0)
    except (ParseError, TokenizeError) as e:
        signal.alarm(0)
        if parse_expected.startswith("error:"):
            expected_msg = parse_expected[6:].strip()
            assert expected_msg in e.msg, f"expected {expected_msg!r}, got {e.msg!r}"
            return
        pytest.fail(f"Parse error: {e}")
    if parse_expected.startswith("error:"):
        pytest.fail(f"expected error, parsed OK: {parse_expected}")
    assert parse_expected == "ok"


def only_type(source: str):
    file = parse("package main\n" + source)
    assert len(file.types) == 1
    return file.types[0]


def test_file_header():
    file = parse('package demo\n\nimport (\n\t"fmt"\n\tio2 "io"\n)\n')
    assert file.package == "demo"
    assert [(i.name, i.path) for i in file.imports] == [("", "fmt"), ("io2", "io")]
    assert file.types == []


def test_type_spec_position():
    spec = only_type("\ntype  Thing int")
    assert (spec.pos.line, spec.pos.col) == (3, 7)


def test_alias_flag():
    assert only_type("type A = int").alias
    assert not only_type("type A int").alias


def test_type_params():
    spec = only_type("type Pair[K comparable, V any] struct{}")
    assert [p.name for p in spec.params] == ["K", "V"]
    assert type_string(spec.params[0].constraint) == "comparable"


def test_shared_constraint_applies_to_each_name():
    spec = only_type("type P[A, B ~int | string] struct{}")
    assert [p.name for p in spec.params] == ["A", "B"]
    assert spec.params[0].constraint is spec.params[1].constraint
    assert isinstance(spec.params[0].constraint, GInterfaceType)
    assert type_string(spec.params[0].constraint) == "interface{~int | string}"


def test_array_length_text():
    spec = only_type("type A [N * 2]byte")
    assert spec.params == []
    assert isinstance(spec.typ, GArrayType)
    assert spec.typ.length == "N*2"


def test_pointer_constraint_reads_as_array():
    spec = only_type("type A [P *C]int")
    assert spec.params == []
    assert isinstance(spec.typ, GArrayType)


def test_map_key_and_value():
    spec = only_type("type M map[int]string")
    assert isinstance(spec.typ, GMapType)
    assert type_string(spec.typ.key) == "int"
    assert type_string(spec.typ.value) == "string"


def test_struct_fields():
    spec = only_type(
        "type S struct {\n"
        '\tX, Y int `json:"x"`\n'
        "\tBase\n"
        "\t*Ptr\n"
        "\tpkg.Remote\n"
        "\tbuf [8]byte\n"
        "}"
    )
    assert isinstance(spec.typ, GStructType)
    fields = spec.typ.fields
    assert [f.name for f in fields] == ["X", "Y", "", "", "", "buf"]
    assert fields[0].tag == 'json:"x"'
    assert fields[0].typ is fields[1].typ
    assert isinstance(fields[3].typ, GPointerType)
    assert isinstance(fields[4].typ, GQualifiedName)
    assert isinstance(fields[5].typ, GArrayType)


def test_embedded_generic_field():
    spec = only_type("type S struct {\n\tList[int]\n}")
    field = spec.typ.fields[0]
    assert field.name == ""
    assert isinstance(field.typ, GTypeName)
    assert type_string(field.typ) == "List[int]"


def test_named_field_with_instantiated_type():
    spec = only_type("type S struct {\n\tl List[int]\n}")
    field = spec.typ.fields[0]
    assert field.name == "l"
    assert type_string(field.typ) == "List[int]"


def test_channel_directions():
    spec = only_type("type S struct {\n\ta chan int\n\tb <-chan int\n\tc chan<- int\n}")
    dirs = [f.typ.dir for f in spec.typ.fields]
    assert dirs == ["both", "recv", "send"]
    assert all(isinstance(f.typ, GChanType) for f in spec.typ.fields)


def test_grouped_parameter_names():
    spec = only_type("type F func(a, b int, rest ...string) (n int, err error)")
    assert isinstance(spec.typ, GFuncType)
    params = [(p.name, type_string(p.typ), p.variadic) for p in spec.typ.params]
    assert params == [("a", "int", False), ("b", "int", False), ("rest", "string", True)]
    assert [p.name for p in spec.typ.results] == ["n", "err"]


def test_type_string_round_trips_syntax():
    cases = [
        "[]*int",
        "map[string][]T",
        "func(int) string",
        "func(a int, b ...string) (bool, error)",
        "chan<- <-chan int",
        "struct{a int; Base}",
        "interface{String() string; ~int | ~uint}",
        "pkg.Box[int]",
    ]
    for text in cases:
        spec = only_type("type X " + text)
        assert type_string(spec.typ) == text


def test_skipped_declarations_leave_types():
    file = parse(
        "package main\n"
        "const A = 1\n"
        "var b = []int{1}\n"
        "func f() { type Local int }\n"
        "type Kept int\n"
    )
    assert [t.name for t in file.types] == ["Kept"]


def test_slice_vs_array():
    spec = only_type("type S struct {\n\ta []int\n\tb [3]int\n}")
    assert isinstance(spec.typ.fields[0].typ, GSliceType)
    assert isinstance(spec.typ.fields[1].typ, GArrayType)
    assert spec.typ.fields[1].typ.length == "3"


def test_error_position():
    with pytest.raises(ParseError) as excinfo:
        parse("package main\n\ntype A struct {\n\ta int,\n}\n")
    assert excinfo.value.msg == "expected ';', found ','"
    assert (excinfo.value.line, excinfo.value.col) == (4, 7)


def test_named_parameters_with_slice_and_array_types():
    spec = only_type("type F func(data []byte, a, b [2]int) (out []string)")
    params = [(p.name, type_string(p.typ)) for p in spec.typ.params]
    assert params == [("data", "[]byte"), ("a", "[2]int"), ("b", "[2]int")]
    assert [(p.name, type_string(p.typ)) for p in spec.typ.results] == [("out", "[]string")]


def test_unnamed_instantiated_parameters():
    spec = only_type("type F func(List[int], Map[K, V])")
    params = [(p.name, type_string(p.typ)) for p in spec.typ.params]
    assert params == [("", "List[int]"), ("", "Map[K, V]")]
