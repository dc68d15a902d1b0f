"""
Structure, union and error generation.

Structures become Go structs with exported members. Structures marked with
the error trait additionally implement the runtime's APIError interface.
"""

from typing import Dict, List, Tuple

from ...core.errors import NamingCollisionError
from ...core.generator import ShapeGenerator
from ...core.model import ERROR_TRAIT, MemberShape, Shape, ShapeType
from ...core.symbols import SymbolProvider
from ....logging_config import get_logger
from .dependencies import ERROR_FAULT_TYPE, FAULT_CLIENT, FAULT_SERVER, FAULT_UNKNOWN, SPRINTF

logger = get_logger(__name__)

_FAULTS = {"client": FAULT_CLIENT, "server": FAULT_SERVER}

# Methods every error struct declares alongside its fields
ERROR_METHODS = ("Error", "ErrorMessage", "ErrorCode", "ErrorFault")


def member_names(provider: SymbolProvider, shape: Shape) -> List[Tuple[str, MemberShape]]:
    """
    Field identifiers for every member of ``shape``, in source order.

    Raises:
        NamingCollisionError: If two members map to the same field, or a
            member of an error shape shadows one of its methods
    """
    seen: Dict[str, str] = {}
    if shape.is_error:
        seen.update((method, f"method {shape.name}.{method}") for method in ERROR_METHODS)

    names = []
    for member in shape.members:
        field_name = provider.to_member_name(member)
        if field_name in seen:
            raise NamingCollisionError(
                field_name, seen[field_name], str(member.id), scope=shape.name
            )
        seen[field_name] = str(member.id)
        names.append((field_name, member))
    return names


class StructureGenerator(ShapeGenerator):
    """Renders structure and union shapes."""

    shape_types = (ShapeType.STRUCTURE, ShapeType.UNION)

    def run(self) -> None:
        symbol = self.symbols.resolve(self.shape)
        logger.debug("Writing structure %s", symbol.name)

        self.write_docs(symbol.documentation)
        if self.shape.type == ShapeType.UNION:
            self.write_docs("Only one member of this union may be set.")

        self.writer.open_block(
            "type {{ struct | name }} struct {", "}", self._write_members, struct=symbol
        ).write("")

        if self.shape.is_error:
            self._write_error_methods(symbol)

    def _write_members(self) -> None:
        model = self.context.model

        for index, (field_name, member) in enumerate(
            member_names(self.symbols.provider, self.shape)
        ):
            target = self.symbols.resolve(model.expect_shape(member.target))
            if index and self.add_comments and member.documentation:
                self.writer.write("")
            self.write_docs(member.documentation)
            self.writer.write("{{ member }} {{ target | ptr }}", member=field_name, target=target)

    def _write_error_methods(self, symbol) -> None:
        writer = self.writer
        fault = _FAULTS.get(self.shape.get_trait(ERROR_TRAIT), FAULT_UNKNOWN)
        message = self._message_member()

        writer.write(
            "func (e {{ err | ptr }}) Error() string {\n"
            "\treturn {{ sprintf }}(\"%s: %s\", e.ErrorCode(), e.ErrorMessage())\n"
            "}",
            err=symbol,
            sprintf=SPRINTF,
        ).write("")

        if message is None:
            writer.write(
                "func (e {{ err | ptr }}) ErrorMessage() string { return \"\" }", err=symbol
            ).write("")
        else:
            def write_message():
                writer.open_block(
                    "if e.{{ member }} == nil {", "}",
                    lambda: writer.write("return \"\""),
                    member=message,
                )
                writer.write("return *e.{{ member }}", member=message)

            writer.open_block(
                "func (e {{ err | ptr }}) ErrorMessage() string {", "}", write_message, err=symbol
            ).write("")

        writer.write(
            "func (e {{ err | ptr }}) ErrorCode() string { return {{ code | quote }} }",
            err=symbol,
            code=self.shape.name,
        ).write("")
        writer.write(
            "func (e {{ err | ptr }}) ErrorFault() {{ fault_type }} { return {{ fault }} }",
            err=symbol,
            fault_type=ERROR_FAULT_TYPE,
            fault=fault,
        ).write("")

    def _message_member(self):
        """Member name holding the error message, if it is a string."""
        for member in self.shape.members:
            if member.name.lower() != "message":
                continue
            target = self.context.model.expect_shape(member.target)
            if target.type == ShapeType.STRING and not target.is_enum:
                return self.symbols.provider.to_member_name(member)
        return None
