"""Enum generator tests."""

from __future__ import annotations

import pytest

from shapegen.codegen.core.errors import NamingCollisionError
from shapegen.codegen.core.model import EnumDefinition, Model
from shapegen.codegen.languages.go.enums import EnumGenerator, enum_label, enum_labels


def _generate(make_context, make_writer, shape_id: str, model: Model | None = None) -> str:
    context = make_context(model=model) if model else make_context()
    writer = make_writer("types/enums.go")
    EnumGenerator(context, writer, context.model.expect_shape(shape_id)).run()
    return writer.body()


def test_simple_yes_no_constants(make_context, make_writer) -> None:
    body = _generate(make_context, make_writer, "example.weather#SimpleYesNo")

    assert "type SimpleYesNo string" in body
    assert '\tSimpleYesNoYes SimpleYesNo = "YES"' in body
    assert '\tSimpleYesNoNo SimpleYesNo = "NO"' in body
    assert body.count(" SimpleYesNo = ") == 2


def test_constants_keep_source_order(make_context, make_writer) -> None:
    body = _generate(make_context, make_writer, "example.weather#Skies")
    assert body.index("SkiesSunny") < body.index("SkiesPartlyCloudy")
    assert '\tSkiesPartlyCloudy Skies = "partly-cloudy"' in body
    assert "\t// Some clouds." in body


def test_values_method_lists_every_value(make_context, make_writer) -> None:
    body = _generate(make_context, make_writer, "example.weather#SimpleYesNo")
    assert (
        "func (SimpleYesNo) Values() []SimpleYesNo {\n"
        "\treturn []SimpleYesNo{\n"
        '\t\t"YES",\n'
        '\t\t"NO",\n'
        "\t}\n"
        "}"
    ) in body


def test_label_uses_value_without_name() -> None:
    assert enum_label("Skies", EnumDefinition(value="partly-cloudy")) == "SkiesPartlyCloudy"
    assert enum_label("Skies", EnumDefinition(value="x", name="MOSTLY_SUNNY")) == "SkiesMostly_sunny"


def test_colliding_labels_fail() -> None:
    definitions = [EnumDefinition(value="a-b"), EnumDefinition(value="A.B")]
    with pytest.raises(NamingCollisionError) as excinfo:
        enum_labels("Kind", definitions)
    assert excinfo.value.identifier == "KindAB"
    assert excinfo.value.scope == "Kind"


def test_colliding_labels_abort_generation(make_context, make_writer) -> None:
    model = Model.from_dict(
        {
            "shapes": {
                "example.weather#Weather": {"type": "service"},
                "example.weather#Kind": {
                    "type": "string",
                    "traits": {"smithy.api#enum": [{"value": "a b"}, {"value": "A-B"}]},
                },
            }
        }
    )
    with pytest.raises(NamingCollisionError):
        _generate(make_context, make_writer, "example.weather#Kind", model=model)


def test_enum_generator_only_applies_to_enums(weather_model: Model) -> None:
    assert EnumGenerator.applies_to(weather_model.expect_shape("example.weather#Skies"))
    assert not EnumGenerator.applies_to(weather_model.expect_shape("example.weather#CityId"))
