import pytest

from feverish.ron import RonError, dumps, loads


def test_struct_parses_to_dict():
    assert loads("(a: 1.5, b: true, c: \"hi\")") == {"a": 1.5, "b": True, "c": "hi"}


def test_named_struct_and_comments():
    text = "// header\nSettings( /* x */ a: 2, )"
    assert loads(text) == {"a": 2}


def test_option_and_collections():
    assert loads("[Some(1), None, (1, 2)]") == [1, None, (1, 2)]
    assert loads("{\"k\": [1]}") == {"k": [1]}


def test_round_trip():
    value = {"x": 0.2, "flag": False, "name": "a\"b\n", "items": [1, 2], "nested": {"y": None}}
    assert loads(dumps(value)) == value


def test_named_dump_prefix():
    assert dumps({"a": 1}, "Thing").startswith("Thing(")


def test_float_always_has_point():
    assert loads(dumps({"v": 1.0})) == {"v": 1.0}
    assert isinstance(loads(dumps({"v": 1.0}))["v"], float)


@pytest.mark.parametrize("bad", ["(a: 1", "[1 2]", "\"open", "(a: 1) x", ""])
def test_errors(bad):
    with pytest.raises(RonError):
        loads(bad)