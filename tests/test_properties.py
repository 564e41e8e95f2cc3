import numpy as np
import pytest

from lumenrdr.properties import Properties, RenderError


def test_scalars_from_dict():
    props = Properties.from_json({"b": True, "i": 3, "f": 2.5, "s": "mesh"})
    assert props.get("b") is True
    assert props.get("i") == 3 and isinstance(props.get("i"), int)
    assert props.get("f") == 2.5
    assert props.get("s") == "mesh"


def test_from_json_text():
    props = Properties.from_json('{"radius": 2.0, "type": "sphere"}')
    assert props.get_float("radius") == 2.0
    assert props.get("type") == "sphere"


def test_float_and_int_vectors():
    props = Properties.from_json({"c": [1.0, 2, 3], "r": [640, 480]})
    assert props.get("c").dtype.kind == "f"
    assert props.get("c").tolist() == [1.0, 2.0, 3.0]
    assert props.get("r").dtype.kind == "i"
    assert props.get("r").tolist() == [640, 480]


def test_matrix_is_row_major():
    values = [float(i) for i in range(16)]
    matrix = Properties.from_json({"m": values}).get("m")
    assert matrix.shape == (4, 4)
    assert matrix[0, 1] == values[1]
    assert matrix[1, 0] == values[4]
    assert matrix[3, 3] == values[15]


def test_nested_and_object_arrays():
    props = Properties.from_json(
        {"film": {"resolution": [4, 4]}, "objects": [{"type": "a"}, {"type": "b"}]}
    )
    film = props.get("film")
    assert isinstance(film, Properties)
    assert film.get("resolution").tolist() == [4, 4]
    assert [o.get("type") for o in props.get("objects")] == ["a", "b"]


@pytest.mark.parametrize(
    "data",
    [
        {"v": [1, 2, 3, 4]},
        {"v": []},
        {"v": ["a", "b"]},
        {"v": [{"x": 1}, 2]},
        {"v": None},
    ],
)
def test_unsupported_values_raise(data):
    with pytest.raises(RenderError):
        Properties.from_json(data)


def test_bool_array_is_not_numeric():
    with pytest.raises(RenderError):
        Properties.from_json({"v": [True, False]})


def test_missing_without_default_raises():
    with pytest.raises(RenderError):
        Properties().get("nothing")


def test_missing_with_default_returns_default():
    props = Properties()
    assert props.get("type", "path") == "path"
    assert props.get_float("radius", 1) == 1.0
    assert props.get_vec("center", [0, 0, 0]).tolist() == [0.0, 0.0, 0.0]


def test_get_float_widens_int_and_rejects_string():
    props = Properties.from_json({"n": 7, "s": "x"})
    assert props.get_float("n") == 7.0
    with pytest.raises(RenderError):
        props.get_float("s")


def test_get_vec_widens_int_vector():
    props = Properties.from_json({"r": [2, 3], "s": "x"})
    result = props.get_vec("r")
    assert result.dtype.kind == "f"
    assert result.tolist() == [2.0, 3.0]
    with pytest.raises(RenderError):
        props.get_vec("s")


def test_set_has_and_clear():
    props = Properties()
    props.set("resolution", (8, 6))
    assert props.has("resolution")
    props.set("resolution", (10, 12))
    assert props.get("resolution").tolist() == [10, 12]
    props.clear()
    assert not props.has("resolution")
    assert len(props) == 0


def test_equality():
    a = Properties.from_json({"x": 1, "v": [1.0, 2.0]})
    b = Properties.from_json({"v": [1.0, 2.0], "x": 1})
    c = Properties.from_json({"x": 1.0, "v": [1.0, 2.0]})
    assert a == b
    assert not (a == c)


def test_iteration_is_sorted():
    props = Properties.from_json({"b": 1, "a": 2, "c": 3})
    assert list(props) == ["a", "b", "c"]


def test_to_string_flat():
    props = Properties.from_json({"a": 1})
    assert props.to_string() == '{\n  "a": 1\n}'


def test_to_string_empty():
    assert Properties().to_string() == "{\n}"


def test_to_string_nested_layout():
    props = Properties.from_json(
        {"name": "x", "sub": {"flag": True}, "items": [{"k": "v"}]}
    )
    text = props.to_string()
    lines = text.split("\n")
    assert lines[0] == "{"
    assert lines[-1] == "}"
    assert '  "name": "x",' in lines
    assert '    "flag": true' in lines
    assert '      "k": "v"' in lines
    assert text.index('"items"') < text.index('"name"') < text.index('"sub"')