"""
External references used by generated code.

A DependencyRegistry belongs to exactly one output unit and records every
package the unit refers to, so the import block can be synthesized once the
body is complete.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class DependencyType(Enum):
    """Grouping categories for import blocks, in rendering order."""

    STDLIB = "stdlib"
    THIRD_PARTY = "third_party"
    LOCAL = "local"

    @property
    def rank(self) -> int:
        return list(DependencyType).index(self)


@dataclass(frozen=True)
class Dependency:
    """
    An importable package and the alias code refers to it by.

    Third-party packages also name the versioned module providing them so a
    module manifest can be assembled from usage.
    """

    path: str
    alias: str = ""
    type: DependencyType = DependencyType.STDLIB
    module: Optional[str] = None
    version: Optional[str] = None

    def __post_init__(self):
        if not self.alias:
            object.__setattr__(self, "alias", self.default_alias)

    @property
    def default_alias(self) -> str:
        """Last element of the import path."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def needs_alias(self) -> bool:
        return self.alias != self.default_alias

    @property
    def import_line(self) -> str:
        """Import line for this dependency, aliased only when necessary."""
        quoted = json.dumps(self.path)
        return f"{self.alias} {quoted}" if self.needs_alias else quoted

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self.path, self.alias)


class DependencyRegistry:
    """Per-unit set of dependencies, flushed in a deterministic order."""

    def __init__(self, own_package: Optional[str] = None):
        """
        Args:
            own_package: Import path of the unit being written; references to
                it are not imports
        """
        self.own_package = own_package
        self._dependencies: Dict[Tuple[str, str], Dependency] = {}

    def __len__(self) -> int:
        return len(self._dependencies)

    def __contains__(self, dependency: Dependency) -> bool:
        return dependency.sort_key in self._dependencies

    def track(self, dependency: Dependency) -> None:
        """Register a usage of ``dependency``."""
        if self.own_package and dependency.path == self.own_package:
            return
        # Keep the first registration when two aliases share a path
        self._dependencies.setdefault(dependency.sort_key, dependency)

    def track_all(self, dependencies: Iterable[Dependency]) -> None:
        for dependency in dependencies:
            self.track(dependency)

    def flush(self) -> List[Dependency]:
        """Return unique dependencies sorted by import path."""
        return [self._dependencies[key] for key in sorted(self._dependencies)]

    def grouped(self) -> List[List[Dependency]]:
        """Return non-empty groups in category order, each sorted by path."""
        groups: Dict[DependencyType, List[Dependency]] = {}
        for dependency in self.flush():
            groups.setdefault(dependency.type, []).append(dependency)
        return [groups[t] for t in sorted(groups, key=lambda t: t.rank)]
