import pytest

from lumenrdr.factory import Factory
from lumenrdr.properties import Properties, RenderError


class _Thing:
    def __init__(self, props):
        self.props = props


def test_create_passes_props_and_records_context():
    factory = Factory()
    factory.register("Thing", _Thing)
    props = Properties.from_json({"type": "x"})
    product = factory.create("Thing", props)
    assert product.props.get("type") == "x"
    assert factory.context == [product]


def test_context_grows_in_creation_order():
    factory = Factory()
    factory.register("Thing", _Thing)
    first = factory.create("Thing", Properties())
    second = factory.create("Thing", Properties())
    assert factory.context == [first, second]


def test_duplicate_registration_raises():
    factory = Factory()
    factory.register("Thing", _Thing)
    with pytest.raises(RenderError):
        factory.register("Thing", _Thing)


def test_unknown_identifier_raises():
    with pytest.raises(RenderError):
        Factory().create("Missing", Properties())


def test_unregister_removes_creator():
    factory = Factory()
    factory.register("Thing", _Thing)
    factory.unregister("Thing")
    assert "Thing" not in factory
    with pytest.raises(RenderError):
        factory.create("Thing", Properties())


def test_unregister_unknown_is_ignored_and_reregister_works():
    factory = Factory()
    factory.unregister("Nothing")
    factory.register("Nothing", _Thing)
    assert "Nothing" in factory


def test_clear_empties_context_but_keeps_registry():
    factory = Factory()
    factory.register("Thing", _Thing)
    factory.create("Thing", Properties())
    factory.clear()
    assert factory.context == []
    assert isinstance(factory.create("Thing", Properties()), _Thing)


def test_creator_returning_none_raises():
    factory = Factory()
    factory.register("Empty", lambda props: None)
    with pytest.raises(RenderError):
        factory.create("Empty", Properties())
    assert factory.context == []


def test_creator_can_dispatch_on_type():
    factory = Factory()

    def make(props):
        kind = props.get("type", "diffuse")
        if kind != "diffuse":
            raise RenderError(f"Material type {kind} not supported")
        return _Thing(props)

    factory.register("BSDF", make)
    assert isinstance(factory.create("BSDF", Properties()), _Thing)
    with pytest.raises(RenderError):
        factory.create("BSDF", Properties.from_json({"type": "metal"}))