"""
Enum generation for string shapes carrying enum values.
"""

from typing import Dict, List, Tuple

from ...core.errors import NamingCollisionError
from ...core.generator import ShapeGenerator
from ...core.model import EnumDefinition, ShapeType
from ...core.naming import capitalize, split_words
from ....logging_config import get_logger

logger = get_logger(__name__)


def enum_label(type_name: str, definition: EnumDefinition) -> str:
    """
    Constant identifier for one enum definition.

    Uses the symbolic name when present, otherwise the wire value, split on
    non-word characters with each lower-cased segment capitalized, prefixed
    with the enum's type name.
    """
    source = definition.name or definition.value
    return type_name + "".join(capitalize(part.lower()) for part in split_words(source))


def enum_labels(type_name: str, definitions: List[EnumDefinition]) -> List[Tuple[str, EnumDefinition]]:
    """
    Labels for every definition, in source order.

    Raises:
        NamingCollisionError: If two definitions canonicalize to the same
            label, or a label equals the type name itself
    """
    seen: Dict[str, str] = {type_name: f"type {type_name}"}
    labels = []
    for definition in definitions:
        label = enum_label(type_name, definition)
        if label in seen:
            raise NamingCollisionError(
                label, seen[label], f"enum value {definition.value!r}", scope=type_name
            )
        seen[label] = f"enum value {definition.value!r}"
        labels.append((label, definition))
    return labels


class EnumGenerator(ShapeGenerator):
    """Renders an enum type and its constants."""

    shape_types = (ShapeType.STRING,)

    @classmethod
    def applies_to(cls, shape) -> bool:
        return shape.is_enum

    def run(self) -> None:
        symbol = self.symbols.resolve(self.shape)
        labels = enum_labels(symbol.name, self.shape.enum_definitions())
        logger.debug("Writing enum %s with %d values", symbol.name, len(labels))

        writer = self.writer
        self.write_docs(symbol.documentation)
        writer.write("type {{ enum | name }} string", enum=symbol).write("")

        def write_constants():
            for label, definition in labels:
                self.write_docs(definition.documentation)
                writer.write(
                    "{{ label }} {{ enum | name }} = {{ value | quote }}",
                    label=label,
                    enum=symbol,
                    value=definition.value,
                )

        writer.write("// Enum values for {{ enum | name }}", enum=symbol)
        writer.open_block("const (", ")", write_constants).write("")

        self._write_values_method(symbol, labels)

    def _write_values_method(self, symbol, labels) -> None:
        writer = self.writer
        self.write_docs(
            f"Values returns all known values for {symbol.name}. Note that this can "
            "be expanded in the future, and so it is only as up to date as the client."
        )

        def write_slice():
            for _, definition in labels:
                writer.write("{{ value | quote }},", value=definition.value)

        def write_body():
            writer.open_block("return []{{ enum | name }}{", "}", write_slice, enum=symbol)

        writer.open_block(
            "func ({{ enum | name }}) Values() []{{ enum | name }} {", "}", write_body, enum=symbol
        ).write("")
