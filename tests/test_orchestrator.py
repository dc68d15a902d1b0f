"""End-to-end generation tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from shapegen.codegen import generate_client
from shapegen.codegen.core.config import GoSettings
from shapegen.codegen.core.errors import ModelError, NamingCollisionError
from shapegen.codegen.core.generator import FileManifest, GeneratedFile, ShapeGenerator
from shapegen.codegen.core.model import Model
from shapegen.codegen.integration import Integration, IntegrationRegistry
from shapegen.codegen.languages.go.generator import GoCodegen
from shapegen.codegen.languages.go.protocol import resolve_protocol
from shapegen.codegen.registry import GeneratorRegistry, RegistryError, create_default_registry
from tests.test_integration import RestJsonGenerator

EXPECTED_FILES = [
    "api_client.go",
    "doc.go",
    "go.mod",
    "types/enums.go",
    "types/errors.go",
    "types/types.go",
]


def _contents(manifest: FileManifest) -> list[tuple[str, str]]:
    return [(f.path, f.content) for f in manifest]


def test_generates_expected_files(weather_model: Model, settings: GoSettings) -> None:
    manifest = GoCodegen(weather_model, settings).execute()
    assert [f.path for f in manifest] == EXPECTED_FILES


def test_generation_is_deterministic(weather_model: Model, settings: GoSettings) -> None:
    first = GoCodegen(weather_model, settings).execute()
    second = GoCodegen(weather_model, settings).execute()
    assert _contents(first) == _contents(second)


def test_types_units_use_types_package(weather_model: Model, settings: GoSettings) -> None:
    manifest = GoCodegen(weather_model, settings).execute()
    types_go = manifest.get("types/types.go").content
    errors_go = manifest.get("types/errors.go").content

    assert "\npackage types\n" in types_go
    assert "type CityCoordinates struct {" in types_go
    assert "type GetCityInput struct {" in types_go
    assert "type NoSuchResource struct {" not in types_go
    assert "type NoSuchResource struct {" in errors_go
    assert '\t"fmt"\n\n\tsmithy "github.com/awslabs/smithy-go"\n' in errors_go


def test_enums_are_collected_in_one_unit(weather_model: Model, settings: GoSettings) -> None:
    enums_go = GoCodegen(weather_model, settings).execute().get("types/enums.go").content
    # Shape-id order: SimpleYesNo before Skies
    assert enums_go.index("type SimpleYesNo string") < enums_go.index("type Skies string")
    assert "import" not in enums_go


def test_client_unit_imports(weather_model: Model, settings: GoSettings) -> None:
    client_go = GoCodegen(weather_model, settings).execute().get("api_client.go").content
    assert client_go.startswith("// Code generated by shapegen. DO NOT EDIT.\n\npackage weather\n")
    assert (
        "import (\n"
        '\t"net/http"\n'
        "\n"
        '\t"github.com/awslabs/smithy-go/middleware"\n'
        ")\n"
    ) in client_go


def test_package_docs(weather_model: Model, settings: GoSettings) -> None:
    doc_go = GoCodegen(weather_model, settings).execute().get("doc.go").content
    assert "// Package weather provides the API client, operations, and parameter types" in doc_go
    assert "//\n// Provides weather forecasts.\npackage weather\n" in doc_go


def test_go_mod_requires_runtime(weather_model: Model, settings: GoSettings) -> None:
    go_mod = GoCodegen(weather_model, settings).execute().get("go.mod").content
    assert go_mod.startswith("module github.com/example/weather\n\ngo 1.15\n")
    assert "require github.com/awslabs/smithy-go v0.1.1" in go_mod


def test_protocol_generator_contributes_middleware(
    weather_model: Model, settings: GoSettings
) -> None:
    integrations = [Integration(name="restjson", protocol_generator=RestJsonGenerator())]
    manifest = GoCodegen(weather_model, settings, integrations).execute()

    serializers = manifest.get("serializers.go").content
    deserializers = manifest.get("deserializers.go").content
    assert "type restJson1_serializeOpGetCity struct {" in serializers
    assert "\treturn next.HandleSerialize(ctx, in)\n" in serializers
    assert "func (m *restJson1_deserializeOpGetCity) HandleDeserialize(" in deserializers
    assert '\t"context"\n' in serializers


def test_integrations_are_frozen_by_generation(
    weather_model: Model, settings: GoSettings
) -> None:
    registry = IntegrationRegistry([Integration(name="one")])
    GoCodegen(weather_model, settings, registry).execute()
    with pytest.raises(RegistryError):
        registry.register(Integration(name="two"))


def test_non_service_shape_is_rejected(weather_model: Model, settings: GoSettings) -> None:
    settings.service = "example.weather#GetCity"
    with pytest.raises(ModelError, match="not a service"):
        GoCodegen(weather_model, settings).execute()


def test_collision_aborts_before_output(settings: GoSettings) -> None:
    model = Model.from_dict(
        {
            "shapes": {
                "example.weather#Weather": {
                    "type": "service",
                    "operations": [{"target": "example.weather#Op"}],
                },
                "example.weather#Op": {
                    "type": "operation",
                    "input": {"target": "example.weather#City"},
                    "output": {"target": "example.other#City"},
                },
                "example.weather#City": {"type": "structure"},
                "example.other#City": {"type": "structure"},
            }
        }
    )
    result = generate_client(model, settings, integrations=[])
    assert not result.success
    assert isinstance(result.exception, NamingCollisionError)
    assert result.files == []


def test_generate_client_success_metadata(weather_model: Model, settings: GoSettings) -> None:
    result = generate_client(weather_model, settings)
    assert result.success
    assert result.metadata["package"] == "weather"
    assert result.metadata["file_count"] == len(EXPECTED_FILES)
    assert result.warnings == []


def test_manifest_write(tmp_path: Path, weather_model: Model, settings: GoSettings) -> None:
    manifest = GoCodegen(weather_model, settings).execute()
    written = manifest.write(tmp_path)
    assert len(written) == len(EXPECTED_FILES)
    assert (tmp_path / "types" / "enums.go").read_text(encoding="utf-8") == (
        manifest.get("types/enums.go").content
    )


def test_manifest_rejects_duplicate_units() -> None:
    manifest = FileManifest()
    manifest.add(GeneratedFile("a.go", ""))
    with pytest.raises(Exception, match="generated twice"):
        manifest.add(GeneratedFile("a.go", "other"))


def test_requested_protocol_must_be_supported(weather_model: Model) -> None:
    service = weather_model.expect_shape("example.weather#Weather")
    assert resolve_protocol(weather_model, service)[0] == "aws.protocols#restJson1"
    with pytest.raises(ModelError, match="restXml"):
        resolve_protocol(weather_model, service, "aws.protocols#restXml")


def test_custom_non_http_protocol_is_rejected(weather_document: dict) -> None:
    weather_document["shapes"]["example.mqtt#mqtt"] = {
        "type": "structure",
        "traits": {"smithy.api#trait": {}, "smithy.api#protocolDefinition": {}},
    }
    service_traits = weather_document["shapes"]["example.weather#Weather"]["traits"]
    del service_traits["aws.protocols#restJson1"]
    service_traits["example.mqtt#mqtt"] = {}
    model = Model.from_dict(weather_document)

    with pytest.raises(ModelError, match="other than HTTP"):
        resolve_protocol(model, model.expect_shape("example.weather#Weather"))


def test_default_registry_dispatch(weather_model: Model) -> None:
    registry = create_default_registry()
    assert registry.list_generators() == ["service", "enum", "structure"]
    enum_class = registry.generator_for(weather_model.expect_shape("example.weather#Skies"))
    assert enum_class.__name__ == "EnumGenerator"
    assert not registry.is_supported(weather_model.expect_shape("example.weather#CityId"))


def test_generator_registry_validation() -> None:
    registry = GeneratorRegistry()

    class Noop(ShapeGenerator):
        def run(self) -> None:
            pass

    registry.register("noop", Noop)
    with pytest.raises(RegistryError):
        registry.register("noop", Noop)
    with pytest.raises(RegistryError):
        registry.register("bad", object)
    with pytest.raises(RegistryError):
        registry.get_generator_class("missing")


def _service_model(shapes: dict) -> Model:
    return Model.from_dict(
        {
            "shapes": {
                "example.weather#Weather": {
                    "type": "service",
                    "operations": [{"target": "example.weather#Op"}],
                },
                "example.weather#Op": {
                    "type": "operation",
                    "input": {"target": "example.weather#In"},
                },
                "example.weather#In": {
                    "type": "structure",
                    "members": {
                        name: {"target": f"example.weather#{name}"} for name in shapes
                    },
                },
                **{f"example.weather#{name}": node for name, node in shapes.items()},
            }
        }
    )


def _enum(*values: str) -> dict:
    return {"type": "string", "traits": {"smithy.api#enum": [{"value": v} for v in values]}}


def test_enum_constants_collide_across_enums(settings: GoSettings) -> None:
    model = _service_model({"Foo": _enum("bar baz"), "FooBar": _enum("baz")})
    with pytest.raises(NamingCollisionError) as excinfo:
        GoCodegen(model, settings).execute()
    assert excinfo.value.identifier == "FooBarBaz"
    assert "example.weather#Foo enum value 'bar baz'" in str(excinfo.value)
    assert "example.weather#FooBar enum value 'baz'" in str(excinfo.value)


def test_enum_constant_collides_with_type(settings: GoSettings) -> None:
    model = _service_model({"Status": _enum("code"), "StatusCode": {"type": "structure"}})
    with pytest.raises(NamingCollisionError) as excinfo:
        GoCodegen(model, settings).execute()
    assert excinfo.value.identifier == "StatusCode"
    assert excinfo.value.second == "example.weather#StatusCode"


def test_member_collision_aborts_before_output(settings: GoSettings) -> None:
    model = Model.from_dict(
        {
            "shapes": {
                "example.weather#Weather": {
                    "type": "service",
                    "operations": [{"target": "example.weather#Op"}],
                },
                "example.weather#Op": {
                    "type": "operation",
                    "input": {"target": "example.weather#In"},
                },
                "example.weather#In": {
                    "type": "structure",
                    "members": {
                        "fooBar": {"target": "smithy.api#String"},
                        "foo_bar": {"target": "smithy.api#Integer"},
                    },
                },
            }
        }
    )
    result = generate_client(model, settings, integrations=[])
    assert not result.success
    assert isinstance(result.exception, NamingCollisionError)
    assert result.exception.scope == "In"
    assert result.files == []
