"""
Symbols and the per-run symbol table.

A Symbol is the output-language identity of a shape: its identifier, the
package it lives in and whether it has reference semantics. The SymbolTable
memoizes a SymbolProvider and rejects two shapes claiming one identifier.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Optional, Tuple, Union

from .dependencies import Dependency
from .errors import NamingCollisionError
from .model import Shape, ShapeId
from ...logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Symbol:
    """Identifier plus the metadata needed to reference it from a unit."""

    name: str
    namespace: str = ""
    dependency: Optional[Dependency] = None
    pointable: bool = False
    documentation: Optional[str] = field(default=None, compare=False)
    definition_file: Optional[str] = None
    references: Tuple["Symbol", ...] = ()
    # Composite prefix such as "[]" or "map[string]" applied to references[0]
    container: str = ""

    @property
    def full_name(self) -> str:
        """Name qualified with the package alias when there is one."""
        if self.container:
            return f"{self.container}{self.references[0].pointer}"
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def pointer(self) -> str:
        """Rendering used when the symbol is held by reference."""
        return f"*{self.full_name}" if self.pointable else self.full_name

    @property
    def is_declared(self) -> bool:
        """True when some output unit declares this symbol."""
        return self.definition_file is not None

    def dependencies(self) -> Iterator[Dependency]:
        """Yield this symbol's dependency and those of nested symbols."""
        if self.dependency is not None:
            yield self.dependency
        for reference in self.references:
            yield from reference.dependencies()

    def with_pointable(self, pointable: bool) -> "Symbol":
        return replace(self, pointable=pointable)

    def relative_to(self, package_path: Optional[str]) -> "Symbol":
        """Drop the package qualifier when rendered inside its own package."""
        references = tuple(r.relative_to(package_path) for r in self.references)
        namespace = self.namespace
        if self.dependency is not None and self.dependency.path == package_path:
            namespace = ""
        if namespace == self.namespace and references == self.references:
            return self
        return replace(self, namespace=namespace, references=references)

    def __str__(self) -> str:
        return self.full_name


def value_symbol(name: str, dependency: Optional[Dependency] = None) -> Symbol:
    """Create a value-semantics symbol, namespaced by its dependency alias."""
    return Symbol(
        name=name,
        namespace=dependency.alias if dependency else "",
        dependency=dependency,
    )


def pointable_symbol(name: str, dependency: Optional[Dependency] = None) -> Symbol:
    """Create a reference-semantics symbol, namespaced by its dependency alias."""
    return value_symbol(name, dependency).with_pointable(True)


def slice_of(element: Symbol) -> Symbol:
    return Symbol(name=f"[]{element.name}", references=(element,), container="[]")


def map_of(value: Symbol, key: str = "string") -> Symbol:
    container = f"map[{key}]"
    return Symbol(name=f"{container}{value.name}", references=(value,), container=container)


class SymbolProvider(ABC):
    """Maps shapes to symbols for one target language."""

    @abstractmethod
    def to_symbol(self, shape: Shape) -> Symbol:
        """Return the symbol for ``shape``. Must not depend on call order."""
        pass

    def to_member_name(self, member) -> str:
        """Return the field identifier used for a structure member."""
        return member.name


class SymbolTable:
    """
    Run-scoped cache in front of a SymbolProvider.

    Resolving the same shape twice returns the identical Symbol object.
    Declared symbols and other package-level identifiers are indexed by
    ``(scope, name)`` so two distinct sources can never silently share an
    identifier.
    """

    def __init__(self, provider: SymbolProvider):
        self.provider = provider
        self._symbols: Dict[ShapeId, Symbol] = {}
        self._claims: Dict[Tuple[str, str], Union[ShapeId, str]] = {}

    def __len__(self) -> int:
        return len(self._symbols)

    def resolve(self, shape: Shape) -> Symbol:
        """
        Return the symbol for ``shape``.

        Raises:
            NamingCollisionError: If another source already declared the same
                identifier in the same scope
        """
        cached = self._symbols.get(shape.id)
        if cached is not None:
            return cached

        symbol = self.provider.to_symbol(shape)

        if symbol.is_declared:
            self.claim(scope_of(symbol), symbol.name, shape.id)

        self._symbols[shape.id] = symbol
        logger.debug("Resolved %s -> %s", shape.id, symbol.full_name)
        return symbol

    def claim(self, scope: str, name: str, owner: Union[ShapeId, str]) -> None:
        """
        Reserve ``name`` in ``scope`` for ``owner``.

        Claiming the same name again for the same owner is a no-op.

        Raises:
            NamingCollisionError: If a different owner holds the name
        """
        key = (scope, name)
        existing = self._claims.get(key)
        if existing is not None and str(existing) != str(owner):
            logger.error("Identifier %s in %s claimed by %s and %s", name, scope, existing, owner)
            raise NamingCollisionError(name, str(existing), str(owner), scope=scope)
        self._claims[key] = owner

    def owner_of(self, symbol: Symbol) -> Optional[Union[ShapeId, str]]:
        """Return whatever declared ``symbol``, if anything."""
        return self._claims.get((scope_of(symbol), symbol.name))


def scope_of(symbol: Symbol) -> str:
    """Declaration scope: the package directory of the defining unit."""
    if symbol.dependency is not None:
        return symbol.dependency.path
    definition_file = symbol.definition_file or ""
    if "/" not in definition_file:
        return "."
    return definition_file.rsplit("/", 1)[0]
