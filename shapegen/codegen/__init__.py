"""
Shapegen Code Generation Module

Generates Go client modules from service shape models.
"""

from .core.config import ConfigError, ConfigManager, GoSettings, load_settings
from .core.errors import GeneratorError, ModelError, NamingCollisionError
from .core.generator import FileManifest, GeneratedFile, GenerationResult
from .core.model import Model, Shape, ShapeId, ShapeType
from .core.templates import TemplateError
from .integration import (
    ConfigField,
    Integration,
    IntegrationRegistry,
    ProtocolGenerator,
    load_integrations,
)
from .registry import GeneratorRegistry, RegistryError, create_default_registry
from .languages.go.generator import GoCodegen

# Version info
__version__ = "0.1.0"


def generate_client(model, settings, integrations=None):
    """
    Generate a Go client for the service named in ``settings``.

    Args:
        model: Loaded shape model
        settings: GoSettings for the run
        integrations: Integrations to apply, in order. When None, the
            import strings in ``settings.integrations`` are loaded.

    Returns:
        GenerationResult; on failure it carries the error and no files
    """
    try:
        if integrations is None:
            integrations = load_integrations(settings.integrations)
        manifest = GoCodegen(model, settings, integrations).execute()
    except (GeneratorError, TemplateError, RegistryError) as e:
        return GenerationResult.error(str(e), e)

    warnings = ConfigManager().validate_settings(settings)
    return GenerationResult(
        manifest,
        warnings=warnings,
        metadata={
            "service": settings.service,
            "module": settings.module_name,
            "package": settings.package_name,
            "file_count": len(manifest),
        },
    )


__all__ = [
    "ConfigError",
    "ConfigField",
    "ConfigManager",
    "FileManifest",
    "GeneratedFile",
    "GenerationResult",
    "GeneratorError",
    "GeneratorRegistry",
    "GoCodegen",
    "GoSettings",
    "Integration",
    "IntegrationRegistry",
    "Model",
    "ModelError",
    "NamingCollisionError",
    "ProtocolGenerator",
    "RegistryError",
    "Shape",
    "ShapeId",
    "ShapeType",
    "TemplateError",
    "create_default_registry",
    "generate_client",
    "load_integrations",
    "load_settings",
]
