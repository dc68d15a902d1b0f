"""
Go symbol provider.

Maps each shape kind to the Go type that represents it. Named shapes are
declared in the client package (service), the ``types`` package
(structures, unions, enums) or are builtins that nothing declares.
"""

from typing import Dict

from ...core.config import GoSettings
from ...core.errors import NamingCollisionError
from ...core.model import MemberShape, Model, Shape, ShapeType
from ...core.naming import NamingCase
from ...core.symbols import (
    Symbol,
    SymbolProvider,
    map_of,
    pointable_symbol,
    slice_of,
    value_symbol,
)
from .dependencies import MATH_BIG, TIME, local
from .naming import CLIENT_PACKAGE_NAMES, create_go_sanitizer

CLIENT_FILE = "api_client.go"
ENUMS_FILE = "types/enums.go"
TYPES_FILE = "types/types.go"
ERRORS_FILE = "types/errors.go"

# Simple shapes held by reference so optional members can be nil
_SCALARS: Dict[ShapeType, str] = {
    ShapeType.BOOLEAN: "bool",
    ShapeType.STRING: "string",
    ShapeType.BYTE: "int8",
    ShapeType.SHORT: "int16",
    ShapeType.INTEGER: "int32",
    ShapeType.LONG: "int64",
    ShapeType.FLOAT: "float32",
    ShapeType.DOUBLE: "float64",
}


class GoSymbolProvider(SymbolProvider):
    """Resolves shapes to Go symbols for one module."""

    def __init__(self, model: Model, settings: GoSettings):
        self.model = model
        self.settings = settings
        self.sanitizer = create_go_sanitizer()
        self.types_package = local(settings.types_package_path)

    def to_symbol(self, shape: Shape) -> Symbol:
        shape_type = shape.type

        if shape_type == ShapeType.SERVICE:
            return Symbol(
                name="Client",
                pointable=True,
                documentation=shape.documentation,
                definition_file=CLIENT_FILE,
            )

        if shape_type == ShapeType.OPERATION:
            name = self._type_name(shape)
            if name in CLIENT_PACKAGE_NAMES:
                raise NamingCollisionError(
                    name, "service client", str(shape.id), scope=self.settings.module_name
                )
            return Symbol(
                name=name,
                documentation=shape.documentation,
                definition_file=f"api_op_{name}.go",
            )

        if shape_type == ShapeType.RESOURCE:
            return Symbol(name=self._type_name(shape), documentation=shape.documentation)

        if shape.is_enum:
            return self._types_symbol(shape, ENUMS_FILE, pointable=False)

        if shape_type in (ShapeType.STRUCTURE, ShapeType.UNION):
            definition_file = ERRORS_FILE if shape.is_error else TYPES_FILE
            return self._types_symbol(shape, definition_file, pointable=True)

        if shape_type in _SCALARS:
            return pointable_symbol(_SCALARS[shape_type])

        if shape_type == ShapeType.BLOB:
            return value_symbol("[]byte")

        if shape_type == ShapeType.TIMESTAMP:
            return pointable_symbol("Time", TIME)

        if shape_type == ShapeType.BIG_INTEGER:
            return pointable_symbol("Int", MATH_BIG)

        if shape_type == ShapeType.BIG_DECIMAL:
            return pointable_symbol("Float", MATH_BIG)

        if shape_type == ShapeType.DOCUMENT:
            return value_symbol("interface{}")

        if shape_type in (ShapeType.LIST, ShapeType.SET):
            return slice_of(self._member_target(shape, "member"))

        if shape_type == ShapeType.MAP:
            return map_of(self._member_target(shape, "value"))

        raise NotImplementedError(f"No Go symbol for shape type {shape_type.value}")

    def to_member_name(self, member: MemberShape) -> str:
        return self.sanitizer.sanitize_name(member.name, NamingCase.PASCAL_CASE)

    def _type_name(self, shape: Shape) -> str:
        return self.sanitizer.sanitize_name(shape.name, NamingCase.PASCAL_CASE)

    def _types_symbol(self, shape: Shape, definition_file: str, pointable: bool) -> Symbol:
        return Symbol(
            name=self._type_name(shape),
            namespace=self.types_package.alias,
            dependency=self.types_package,
            pointable=pointable,
            documentation=shape.documentation,
            definition_file=definition_file,
        )

    def _member_target(self, shape: Shape, member_name: str) -> Symbol:
        member = shape.get_member(member_name)
        target = self.model.expect_shape(member.target)
        # Provider stays pure: nested targets are resolved, never cached here
        return self.to_symbol(target)
