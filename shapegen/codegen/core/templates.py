"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from jinja2.exceptions import TemplateError as JinjaTemplateError

from .naming import to_camel_case, to_pascal_case, to_snake_case
from .symbols import Symbol


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._strings: Dict[str, Template] = {}
        self._env = self._setup_environment()

    def _setup_environment(self) -> Environment:
        """Setup Jinja2 environment with code generation utilities."""
        loader = None
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))

        env = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
            lstrip_blocks=True,
            trim_blocks=True,
        )

        env.filters["snake_case"] = to_snake_case
        env.filters["camel_case"] = to_camel_case
        env.filters["pascal_case"] = to_pascal_case
        env.filters["quote"] = quote
        env.filters["ptr"] = _pointer_filter
        env.filters["name"] = _name_filter
        return env

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {e}"
            ) from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Compiled templates are cached per engine; engines are per run.
        """
        try:
            template = self._strings.get(template_string)
            if template is None:
                template = self._env.from_string(template_string)
                self._strings[template_string] = template
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(
                f"Failed to render template string {template_string!r}: {e}"
            ) from e


def quote(value: Any) -> str:
    """Render a Go interpreted string literal."""
    # JSON string escapes are valid Go escapes; keep non-ASCII as-is
    return json.dumps(str(value), ensure_ascii=False)


def _pointer_filter(value: Any) -> str:
    if isinstance(value, Symbol):
        return value.pointer
    return str(value)


def _name_filter(value: Any) -> str:
    if isinstance(value, Symbol):
        return value.name
    return str(value)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, reading files from ``template_dir`` if given."""
    return TemplateEngine(template_dir)
