"""Integration registry and composition tests."""

from __future__ import annotations

import pytest

from shapegen.codegen.core.errors import NamingCollisionError
from shapegen.codegen.core.model import Model
from shapegen.codegen.core.symbols import value_symbol
from shapegen.codegen.integration import (
    ConfigField,
    Integration,
    IntegrationRegistry,
    ProtocolGenerator,
    collect_config_fields,
    for_protocols,
    load_integration,
    load_integrations,
)
from shapegen.codegen.registry import RegistryError

# Importable by load_integration in the tests below
SAMPLE_INTEGRATION = Integration(name="sample")


def build_sample_integration() -> Integration:
    return Integration(name="built")


class RestJsonGenerator(ProtocolGenerator):
    protocol = "aws.protocols#restJson1"

    def serialize_body(self, operation, generator, writer) -> None:
        writer.write("return next.HandleSerialize(ctx, in)")

    def deserialize_body(self, operation, generator, writer) -> None:
        writer.write("return next.HandleDeserialize(ctx, in)")


def test_registry_preserves_order() -> None:
    registry = IntegrationRegistry([Integration(name="b"), Integration(name="a")])
    registry.register(Integration(name="c"))
    assert registry.names() == ["b", "a", "c"]
    assert [i.name for i in registry] == ["b", "a", "c"]


def test_registry_rejects_duplicates() -> None:
    registry = IntegrationRegistry([Integration(name="a")])
    with pytest.raises(RegistryError, match="already registered"):
        registry.register(Integration(name="a"))


def test_registry_is_read_only_once_frozen() -> None:
    registry = IntegrationRegistry([Integration(name="a")])
    frozen = registry.freeze()
    assert frozen == (Integration(name="a"),)
    assert registry.frozen
    with pytest.raises(RegistryError):
        registry.register(Integration(name="b"))


def test_integration_predicates(weather_model: Model) -> None:
    service = weather_model.expect_shape("example.weather#Weather")
    assert Integration(name="always").applies(weather_model, service)
    assert Integration(
        name="rest", applies_to=for_protocols("aws.protocols#restJson1")
    ).applies(weather_model, service)
    assert not Integration(
        name="xml", applies_to=for_protocols("aws.protocols#restXml")
    ).applies(weather_model, service)


def test_collect_config_fields_skips_inapplicable(weather_model: Model) -> None:
    service = weather_model.expect_shape("example.weather#Weather")
    region = ConfigField("Region", value_symbol("string"))
    retries = ConfigField("Retries", value_symbol("int"))
    integrations = [
        Integration(name="region", config_fields=(region,)),
        Integration(
            name="xml",
            config_fields=(ConfigField("Region", value_symbol("string")),),
            applies_to=for_protocols("aws.protocols#restXml"),
        ),
        Integration(name="retries", config_fields=(retries,)),
    ]
    collected = collect_config_fields(integrations, weather_model, service)
    assert [(i.name, f.name) for i, f in collected] == [("region", "Region"), ("retries", "Retries")]


def test_collect_config_fields_rejects_reserved_names(weather_model: Model) -> None:
    service = weather_model.expect_shape("example.weather#Weather")
    integrations = [
        Integration(name="http", config_fields=(ConfigField("HTTPClient", value_symbol("string")),))
    ]
    with pytest.raises(NamingCollisionError) as excinfo:
        collect_config_fields(integrations, weather_model, service)
    assert excinfo.value.scope == "Options"
    assert excinfo.value.second == "integration http"


def test_protocol_generator_name() -> None:
    assert RestJsonGenerator().name == "restJson1"


def test_load_integration_from_import_string() -> None:
    assert load_integration("tests.test_integration:SAMPLE_INTEGRATION").name == "sample"
    assert load_integration("tests.test_integration:build_sample_integration").name == "built"


def test_load_integrations_keeps_order() -> None:
    registry = load_integrations(
        [
            "tests.test_integration:build_sample_integration",
            "tests.test_integration:SAMPLE_INTEGRATION",
        ]
    )
    assert registry.names() == ["built", "sample"]


@pytest.mark.parametrize(
    "import_string",
    [
        "no_colon",
        "shapegen.does_not_exist:thing",
        "shapegen.codegen.integration:missing_attribute",
        "shapegen.codegen.integration:RESERVED_CONFIG_FIELDS",
    ],
)
def test_load_integration_errors(import_string: str) -> None:
    with pytest.raises(RegistryError):
        load_integration(import_string)
