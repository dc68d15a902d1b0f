"""
Base generator interface for all shape generators.

Defines the contract every per-shape generator implements, the run-scoped
context they share, and the containers for finished output units.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterator, List, Optional, Tuple

from .config import GoSettings
from .errors import GeneratorError
from .model import Model, Shape, ShapeType
from .symbols import SymbolTable
from .writer import SourceWriter
from ...logging_config import get_logger

if TYPE_CHECKING:
    from ..integration import Integration

logger = get_logger(__name__)


@dataclass
class GenerationContext:
    """
    Everything a generator may read during one run.

    The symbol table's caches live here, so two runs never share state.
    """

    model: Model
    settings: GoSettings
    service: Shape
    symbols: SymbolTable
    integrations: Tuple["Integration", ...] = ()
    protocol: Any = None

    def matching_integrations(self) -> List["Integration"]:
        """Integrations that apply to this model and service, in registration order."""
        return [i for i in self.integrations if i.applies(self.model, self.service)]


class ShapeGenerator(ABC):
    """Generates declarations for one shape into a writer."""

    shape_types: ClassVar[Tuple[ShapeType, ...]] = ()

    def __init__(self, context: GenerationContext, writer: SourceWriter, shape: Shape):
        self.context = context
        self.writer = writer
        self.shape = shape

    @classmethod
    def applies_to(cls, shape: Shape) -> bool:
        """Return True when this generator handles ``shape``."""
        return shape.type in cls.shape_types

    @property
    def symbols(self) -> SymbolTable:
        return self.context.symbols

    @property
    def add_comments(self) -> bool:
        return self.context.settings.add_comments

    def write_docs(self, text: Optional[str]) -> None:
        if self.add_comments:
            self.writer.write_docs(text)

    @abstractmethod
    def run(self) -> None:
        """Emit declarations for the shape."""
        pass


@dataclass(frozen=True)
class GeneratedFile:
    """A finished output unit."""

    path: str
    content: str


class FileManifest:
    """Ordered collection of generated files, at most one per path."""

    def __init__(self):
        self._files: Dict[str, GeneratedFile] = {}

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[GeneratedFile]:
        return iter(self.files)

    def __contains__(self, path: str) -> bool:
        return path in self._files

    def add(self, generated: GeneratedFile) -> None:
        if generated.path in self._files:
            raise GeneratorError(f"Output unit generated twice: {generated.path}")
        self._files[generated.path] = generated

    def get(self, path: str) -> Optional[GeneratedFile]:
        return self._files.get(path)

    @property
    def files(self) -> List[GeneratedFile]:
        """Files sorted by path."""
        return [self._files[p] for p in sorted(self._files)]

    def write(self, base_dir: Path) -> List[Path]:
        """
        Persist every file below ``base_dir``.

        Returns:
            Paths written
        """
        written = []
        for generated in self.files:
            target = Path(base_dir) / generated.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(generated.content, encoding="utf-8")
            logger.info("Wrote %s", target)
            written.append(target)
        return written


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        manifest: Optional[FileManifest] = None,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            manifest: Generated files
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.manifest = manifest or FileManifest()
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def files(self) -> List[GeneratedFile]:
        return self.manifest.files

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        """Create a failed generation result. Failed results never carry files."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result
