"""
Integrations: extension records composed into the generated client.

An integration is a plain capability record. It may contribute fields to
the client's Options struct, a resolver called by the client constructor,
and a protocol generator supplying serializer and deserializer bodies.
Integrations are applied in registration order.
"""

import importlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .core.errors import NamingCollisionError
from .core.model import Model, Shape
from .core.symbols import Symbol
from .registry import RegistryError
from ..logging_config import get_logger

logger = get_logger(__name__)

Predicate = Callable[[Model, Shape], bool]

# Options fields the service generator always writes
RESERVED_CONFIG_FIELDS = ("APIOptions", "HTTPClient")


@dataclass(frozen=True)
class ConfigField:
    """A field contributed to the generated Options struct."""

    name: str
    type: Symbol
    documentation: Optional[str] = None


class ProtocolGenerator(ABC):
    """
    Supplies wire-protocol handler bodies for serialize/deserialize steps.

    Bodies run inside the step's handler method where ``ctx``, ``in``,
    ``next``, ``out``, ``metadata`` and ``err`` are in scope.
    """

    #: Protocol trait id implemented, e.g. ``aws.protocols#restJson1``
    protocol: str = ""

    @property
    def name(self) -> str:
        """Prefix for generated middleware identifiers."""
        return self.protocol.split("#", 1)[-1]

    @abstractmethod
    def serialize_body(self, operation: Shape, generator, writer) -> None:
        """Write the serialize step body for ``operation``."""
        pass

    @abstractmethod
    def deserialize_body(self, operation: Shape, generator, writer) -> None:
        """Write the deserialize step body for ``operation``."""
        pass


@dataclass(frozen=True)
class Integration:
    """Extension contributing configuration to generated clients."""

    name: str
    config_fields: Tuple[ConfigField, ...] = ()
    resolve_function: Optional[Symbol] = None
    applies_to: Optional[Predicate] = None
    protocol_generator: Optional[ProtocolGenerator] = None

    def applies(self, model: Model, service: Shape) -> bool:
        """Applicability predicate; integrations without one always apply."""
        if self.applies_to is None:
            return True
        return bool(self.applies_to(model, service))


def for_protocols(*protocols: str) -> Predicate:
    """Predicate matching services that carry one of ``protocols``."""
    wanted = set(protocols)
    return lambda model, service: any(p in service.traits for p in wanted)


def for_services(*service_ids: str) -> Predicate:
    """Predicate matching the given service shape ids."""
    wanted = set(service_ids)
    return lambda model, service: str(service.id) in wanted


class IntegrationRegistry:
    """Ordered, write-once collection of integrations for a run."""

    def __init__(self, integrations: Iterable[Integration] = ()):
        self._integrations: List[Integration] = []
        self._frozen = False
        for integration in integrations:
            self.register(integration)

    def __len__(self) -> int:
        return len(self._integrations)

    def __iter__(self) -> Iterator[Integration]:
        return iter(tuple(self._integrations))

    def register(self, integration: Integration) -> None:
        """
        Append an integration.

        Raises:
            RegistryError: If the registry is frozen or the name is taken
        """
        if self._frozen:
            raise RegistryError(
                f"Cannot register integration '{integration.name}' after generation started"
            )
        if any(i.name == integration.name for i in self._integrations):
            raise RegistryError(f"Integration '{integration.name}' is already registered")
        self._integrations.append(integration)
        logger.debug("Registered integration %s", integration.name)

    def freeze(self) -> Tuple[Integration, ...]:
        """Stop accepting registrations and return the ordered integrations."""
        self._frozen = True
        return tuple(self._integrations)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> List[str]:
        return [i.name for i in self._integrations]


def collect_config_fields(
    integrations: Iterable[Integration], model: Model, service: Shape
) -> List[Tuple[Integration, ConfigField]]:
    """
    Config fields of every applicable integration, in registration order.

    Raises:
        NamingCollisionError: If two integrations contribute the same field
            name or one reuses a field the client always defines
    """
    owners: Dict[str, str] = {name: "service client" for name in RESERVED_CONFIG_FIELDS}
    collected = []

    for integration in integrations:
        if not integration.applies(model, service):
            continue
        for config_field in integration.config_fields:
            owner = owners.get(config_field.name)
            if owner is not None:
                raise NamingCollisionError(
                    config_field.name, owner, f"integration {integration.name}", scope="Options"
                )
            owners[config_field.name] = f"integration {integration.name}"
            collected.append((integration, config_field))

    return collected


def load_integration(import_string: str) -> Integration:
    """
    Import an integration from ``package.module:attribute``.

    The attribute may be an Integration or a zero-argument callable
    returning one.
    """
    module_name, _, attribute = import_string.partition(":")
    if not module_name or not attribute:
        raise RegistryError(
            f"Integration must be given as 'module:attribute', got '{import_string}'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryError(f"Cannot import integration module '{module_name}': {e}") from e

    try:
        target = getattr(module, attribute)
    except AttributeError as e:
        raise RegistryError(f"'{module_name}' has no attribute '{attribute}'") from e

    integration = target() if callable(target) and not isinstance(target, Integration) else target
    if not isinstance(integration, Integration):
        raise RegistryError(f"'{import_string}' is not an Integration")
    return integration


def load_integrations(import_strings: Iterable[str]) -> IntegrationRegistry:
    """Build a registry from import strings, preserving their order."""
    return IntegrationRegistry(load_integration(s) for s in import_strings)
