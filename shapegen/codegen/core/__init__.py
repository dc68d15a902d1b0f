"""
Core code generation components.

Provides the shape model, symbols, writers and base classes used by the
language generators.
"""

from .config import ConfigError, ConfigManager, GoSettings, load_settings
from .dependencies import Dependency, DependencyRegistry, DependencyType
from .errors import GeneratorConfigError, GeneratorError, ModelError, NamingCollisionError
from .generator import (
    FileManifest,
    GeneratedFile,
    GenerationContext,
    GenerationResult,
    ShapeGenerator,
)
from .model import Model, Shape, ShapeId, ShapeType
from .naming import NameSanitizer, NamingCase
from .symbols import Symbol, SymbolProvider, SymbolTable
from .templates import TemplateEngine, TemplateError, create_template_engine
from .writer import SourceWriter

__all__ = [
    # Errors
    "GeneratorError",
    "GeneratorConfigError",
    "ModelError",
    "NamingCollisionError",
    # Shape model
    "Model",
    "Shape",
    "ShapeId",
    "ShapeType",
    # Symbols and dependencies
    "Dependency",
    "DependencyRegistry",
    "DependencyType",
    "Symbol",
    "SymbolProvider",
    "SymbolTable",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    # Generator interface
    "FileManifest",
    "GeneratedFile",
    "GenerationContext",
    "GenerationResult",
    "ShapeGenerator",
    "SourceWriter",
    # Configuration system
    "GoSettings",
    "ConfigManager",
    "ConfigError",
    "load_settings",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
