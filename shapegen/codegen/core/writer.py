"""
Source writer for one output unit.

Wraps template rendering with indentation scopes and tracks every symbol
passed as a template argument, so the finished unit can synthesize its own
import block.
"""

import textwrap
from typing import Any, Callable, Iterable, List, Optional, Union

from .dependencies import Dependency, DependencyRegistry
from .symbols import Symbol
from .templates import TemplateEngine

DOC_WRAP_WIDTH = 80


class SourceWriter:
    """Templated text accumulator owning a single output unit."""

    def __init__(
        self,
        engine: TemplateEngine,
        filename: str,
        package_name: str,
        package_path: Optional[str] = None,
        indent_text: str = "\t",
    ):
        """
        Initialize writer.

        Args:
            engine: Template engine used for every write
            filename: Relative path of the unit being written
            package_name: Go package clause for the unit
            package_path: Import path of the unit's own package
            indent_text: Text inserted once per indentation level
        """
        self.engine = engine
        self.filename = filename
        self.package_name = package_name
        self.package_path = package_path
        self.indent_text = indent_text
        self.dependencies = DependencyRegistry(own_package=package_path)
        self._lines: List[str] = []
        self._level = 0
        self._package_docs: List[str] = []

    @property
    def indent_level(self) -> int:
        return self._level

    def write(self, template: str, **args: Any) -> "SourceWriter":
        """
        Render ``template`` against ``args`` and append it at the current indent.

        Symbols in ``args`` are tracked before anything is rendered.
        """
        args = {key: self._localize(value) for key, value in args.items()}
        self._track_args(args.values())
        self._append(self.engine.render_string(template, args))
        return self

    def write_blank(self) -> "SourceWriter":
        self._lines.append("")
        return self

    def write_docs(self, text: Optional[str]) -> "SourceWriter":
        """Write ``text`` as ``//`` comment lines wrapped at the doc width."""
        if not text:
            return self

        width = max(DOC_WRAP_WIDTH - 3 - len(self.indent_text) * self._level, 20)
        for paragraph in str(text).strip().split("\n"):
            wrapped = textwrap.wrap(
                paragraph, width=width, break_long_words=False, break_on_hyphens=False
            )
            if not wrapped:
                self._append("//")
            for line in wrapped:
                self._append(f"// {line}")
        return self

    def write_package_docs(self, text: str) -> "SourceWriter":
        """Set the doc comment placed directly above the package clause."""
        self._package_docs = [
            f"// {line}" if line else "//"
            for paragraph in text.strip().split("\n")
            for line in (textwrap.wrap(paragraph, width=DOC_WRAP_WIDTH - 3) or [""])
        ]
        return self

    def open_block(
        self,
        open_template: str,
        close_template: str,
        body: Callable[[], Any],
        **args: Any,
    ) -> "SourceWriter":
        """
        Write ``open_template``, run ``body`` one level deeper, then close.

        If ``body`` raises, the exception propagates and the close delimiter
        is not written; the unit is abandoned rather than persisted.
        """
        self.write(open_template, **args)
        self.indent()
        body()
        self.dedent()
        self.write(close_template, **args)
        return self

    def indent(self, levels: int = 1) -> "SourceWriter":
        self._level += levels
        return self

    def dedent(self, levels: int = 1) -> "SourceWriter":
        if levels > self._level:
            raise ValueError(
                f"Cannot dedent {levels} levels from level {self._level} in {self.filename}"
            )
        self._level -= levels
        return self

    def add_use_imports(self, *items: Union[Symbol, Dependency]) -> "SourceWriter":
        """Track symbols or dependencies without emitting text."""
        self._track_args(items)
        return self

    def body(self) -> str:
        """Accumulated body text without package clause or imports."""
        return "\n".join(self._lines)

    def to_string(self) -> str:
        """Render the complete unit with package clause and import block."""
        return self.engine.render_template(
            "file.go.j2",
            {
                "package_name": self.package_name,
                "package_docs": "\n".join(self._package_docs),
                "import_groups": self.dependencies.grouped(),
                "body": self.body().strip("\n"),
            },
        )

    def _append(self, text: str) -> None:
        prefix = self.indent_text * self._level
        for line in text.split("\n"):
            self._lines.append(prefix + line if line.strip() else "")

    def _localize(self, value: Any) -> Any:
        if isinstance(value, Symbol):
            return value.relative_to(self.package_path)
        if isinstance(value, (list, tuple, set, frozenset)):
            return type(value)(self._localize(v) for v in value)
        if isinstance(value, dict):
            return {key: self._localize(v) for key, v in value.items()}
        return value

    def _track_args(self, values: Iterable[Any]) -> None:
        for value in values:
            if isinstance(value, Symbol):
                self.dependencies.track_all(value.dependencies())
            elif isinstance(value, Dependency):
                self.dependencies.track(value)
            elif isinstance(value, (list, tuple, set, frozenset)):
                self._track_args(value)
            elif isinstance(value, dict):
                self._track_args(value.values())
