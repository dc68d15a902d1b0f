"""
Generator registry for dispatching shapes to generators.

Maps shape kinds to the ShapeGenerator classes that render them. Each run
builds its own registry; there is no process-wide instance.
"""

from typing import Dict, List, Optional, Type

from .core.generator import ShapeGenerator
from .core.model import Shape


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Ordered registry of shape generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[ShapeGenerator]] = {}

    def register(
        self,
        name: str,
        generator_class: Type[ShapeGenerator],
        replace: bool = False,
    ):
        """
        Register a generator.

        Args:
            name: Registration name (e.g., 'enum', 'service')
            generator_class: Class implementing ShapeGenerator
            replace: If True, replace an existing registration in place

        Raises:
            RegistryError: If generator class is invalid or the name is taken
        """
        if not isinstance(generator_class, type) or not issubclass(
            generator_class, ShapeGenerator
        ):
            raise RegistryError(f"Generator '{name}' must inherit from ShapeGenerator")

        key = name.lower()
        if key in self._generators and not replace:
            raise RegistryError(f"Generator '{name}' is already registered")

        self._generators[key] = generator_class

    def get_generator_class(self, name: str) -> Type[ShapeGenerator]:
        """
        Get generator class by registration name.

        Raises:
            RegistryError: If nothing is registered under ``name``
        """
        try:
            return self._generators[name.lower()]
        except KeyError:
            raise RegistryError(
                f"No generator registered as: {name}. "
                f"Available: {', '.join(self.list_generators())}"
            ) from None

    def generator_for(self, shape: Shape) -> Optional[Type[ShapeGenerator]]:
        """First registered generator that handles ``shape``, if any."""
        for generator_class in self._generators.values():
            if generator_class.applies_to(shape):
                return generator_class
        return None

    def list_generators(self) -> List[str]:
        """Registration names in dispatch order."""
        return list(self._generators)

    def is_supported(self, shape: Shape) -> bool:
        return self.generator_for(shape) is not None


def create_default_registry() -> GeneratorRegistry:
    """Registry holding the built-in Go shape generators."""
    from .languages.go.enums import EnumGenerator
    from .languages.go.service import ServiceGenerator
    from .languages.go.structures import StructureGenerator

    registry = GeneratorRegistry()
    registry.register("service", ServiceGenerator)
    registry.register("enum", EnumGenerator)
    registry.register("structure", StructureGenerator)
    return registry
