"""Shape model loading and traversal tests."""

from __future__ import annotations

import pytest

from shapegen.codegen.core.errors import ModelError
from shapegen.codegen.core.model import Model, ShapeId, ShapeType


def test_shape_id_parse_and_str() -> None:
    shape_id = ShapeId.parse("example.weather#City$name")
    assert shape_id.namespace == "example.weather"
    assert shape_id.name == "City"
    assert shape_id.member == "name"
    assert str(shape_id) == "example.weather#City$name"


def test_shape_id_requires_namespace() -> None:
    with pytest.raises(ModelError):
        ShapeId.parse("City")
    assert ShapeId.parse("String", default_namespace="smithy.api") == ShapeId(
        "smithy.api", "String"
    )


def test_relative_trait_names_resolve_to_prelude(weather_model: Model) -> None:
    shape = weather_model.expect_shape("example.weather#SimpleYesNo")
    assert shape.is_enum
    assert [d.value for d in shape.enum_definitions()] == ["YES", "NO"]


def test_prelude_shapes_are_available(weather_model: Model) -> None:
    assert weather_model.expect_shape("smithy.api#String").type == ShapeType.STRING
    assert "smithy.api#Timestamp" in weather_model


def test_walk_returns_closure_sorted_by_id(weather_model: Model) -> None:
    shapes = weather_model.walk("example.weather#Weather")
    ids = [str(s.id) for s in shapes]
    assert ids == sorted(ids, key=ShapeId.parse)
    assert "example.weather#CityCoordinates" in ids
    assert "smithy.api#Float" in ids
    assert "smithy.api#Blob" not in ids


def test_walk_reports_dangling_targets(weather_document: dict) -> None:
    weather_document["shapes"]["example.weather#TagList"]["member"]["target"] = (
        "example.weather#Missing"
    )
    model = Model.from_dict(weather_document)
    with pytest.raises(ModelError, match="example.weather#Missing"):
        model.walk("example.weather#Weather")


def test_unknown_shape_type_is_rejected() -> None:
    with pytest.raises(ModelError, match="Unsupported shape type"):
        Model.from_dict({"shapes": {"a.b#C": {"type": "widget"}}})


def test_resource_lifecycle_operations_are_collected() -> None:
    model = Model.from_dict(
        {
            "shapes": {
                "a.b#City": {
                    "type": "resource",
                    "read": {"target": "a.b#GetCity"},
                    "operations": [{"target": "a.b#Rename"}],
                },
                "a.b#GetCity": {"type": "operation"},
                "a.b#Rename": {"type": "operation"},
            }
        }
    )
    resource = model.expect_shape("a.b#City")
    assert [str(op) for op in resource.operations] == ["a.b#GetCity", "a.b#Rename"]


def test_missing_enum_trait_is_a_model_error(weather_model: Model) -> None:
    with pytest.raises(ModelError, match="smithy.api#enum"):
        weather_model.expect_shape("example.weather#CityId").enum_definitions()
