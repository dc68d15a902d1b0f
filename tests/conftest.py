from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from shapegen.codegen.core.config import GoSettings
from shapegen.codegen.core.generator import GenerationContext
from shapegen.codegen.core.model import Model
from shapegen.codegen.core.symbols import SymbolTable
from shapegen.codegen.core.templates import TemplateEngine, create_template_engine
from shapegen.codegen.core.writer import SourceWriter
from shapegen.codegen.languages.go.generator import TEMPLATE_DIR
from shapegen.codegen.languages.go.protocol import ApplicationProtocol
from shapegen.codegen.languages.go.symbols import GoSymbolProvider

WEATHER_DOCUMENT: dict[str, Any] = {
    "smithy": "1.0",
    "shapes": {
        "example.weather#Weather": {
            "type": "service",
            "version": "2006-03-01",
            "operations": [{"target": "example.weather#GetCity"}],
            "traits": {
                "smithy.api#title": "Weather Service",
                "smithy.api#documentation": "Provides weather forecasts.",
                "aws.protocols#restJson1": {},
            },
        },
        "example.weather#GetCity": {
            "type": "operation",
            "input": {"target": "example.weather#GetCityInput"},
            "output": {"target": "example.weather#GetCityOutput"},
            "errors": [{"target": "example.weather#NoSuchResource"}],
        },
        "example.weather#GetCityInput": {
            "type": "structure",
            "members": {
                "cityId": {
                    "target": "example.weather#CityId",
                    "traits": {"smithy.api#required": {}},
                },
            },
        },
        "example.weather#GetCityOutput": {
            "type": "structure",
            "members": {
                "name": {"target": "smithy.api#String"},
                "coordinates": {"target": "example.weather#CityCoordinates"},
                "tags": {"target": "example.weather#TagList"},
                "skies": {"target": "example.weather#Skies"},
                "open": {"target": "example.weather#SimpleYesNo"},
            },
        },
        "example.weather#CityId": {"type": "string"},
        "example.weather#CityCoordinates": {
            "type": "structure",
            "members": {
                "latitude": {"target": "smithy.api#Float"},
                "longitude": {"target": "smithy.api#Float"},
            },
        },
        "example.weather#TagList": {
            "type": "list",
            "member": {"target": "smithy.api#String"},
        },
        "example.weather#Skies": {
            "type": "string",
            "traits": {
                "smithy.api#enum": [
                    {"value": "sunny", "name": "SUNNY"},
                    {"value": "partly-cloudy", "documentation": "Some clouds."},
                ]
            },
        },
        "example.weather#SimpleYesNo": {
            "type": "string",
            "traits": {
                "enum": [
                    {"value": "YES", "name": "YES"},
                    {"value": "NO", "name": "NO"},
                ]
            },
        },
        "example.weather#NoSuchResource": {
            "type": "structure",
            "members": {
                "resourceType": {"target": "smithy.api#String"},
                "message": {"target": "smithy.api#String"},
            },
            "traits": {"smithy.api#error": "client"},
        },
    },
}


@pytest.fixture
def weather_document() -> dict[str, Any]:
    """A fresh copy of the weather model document."""
    return copy.deepcopy(WEATHER_DOCUMENT)


@pytest.fixture
def weather_model(weather_document: dict[str, Any]) -> Model:
    return Model.from_dict(weather_document)


@pytest.fixture
def settings() -> GoSettings:
    return GoSettings(
        module_name="github.com/example/weather",
        service="example.weather#Weather",
    )


@pytest.fixture
def engine() -> TemplateEngine:
    return create_template_engine(TEMPLATE_DIR)


@pytest.fixture
def make_context(weather_model: Model, settings: GoSettings) -> Callable[..., GenerationContext]:
    """Build a GenerationContext for generator unit tests."""

    def factory(
        model: Model | None = None,
        settings_: GoSettings | None = None,
        integrations: tuple = (),
        protocol: ApplicationProtocol | None = None,
    ) -> GenerationContext:
        model = model or weather_model
        settings_ = settings_ or settings
        return GenerationContext(
            model=model,
            settings=settings_,
            service=model.expect_shape(settings_.service),
            symbols=SymbolTable(GoSymbolProvider(model, settings_)),
            integrations=tuple(integrations),
            protocol=protocol or ApplicationProtocol.create_default_http(),
        )

    return factory


@pytest.fixture
def make_writer(engine: TemplateEngine, settings: GoSettings) -> Callable[..., SourceWriter]:
    """Build a writer for a unit of the generated module."""

    def factory(filename: str = "api_client.go") -> SourceWriter:
        if filename.startswith("types/"):
            return SourceWriter(
                engine, filename, "types", package_path=settings.types_package_path
            )
        return SourceWriter(
            engine, filename, settings.package_name, package_path=settings.module_name
        )

    return factory
