"""
Shape graph representation for code generation.

Loads a Smithy JSON AST document into immutable shapes that generators
can traverse in a deterministic order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import ModelError

PRELUDE_NAMESPACE = "smithy.api"

# Trait ids used by the generators
DOCUMENTATION_TRAIT = "smithy.api#documentation"
ENUM_TRAIT = "smithy.api#enum"
ERROR_TRAIT = "smithy.api#error"
REQUIRED_TRAIT = "smithy.api#required"
TITLE_TRAIT = "smithy.api#title"
PROTOCOL_DEFINITION_TRAIT = "smithy.api#protocolDefinition"


class ShapeType(Enum):
    """Shape kinds understood by the loader."""

    BLOB = "blob"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIG_INTEGER = "bigInteger"
    BIG_DECIMAL = "bigDecimal"
    TIMESTAMP = "timestamp"
    DOCUMENT = "document"
    LIST = "list"
    SET = "set"
    MAP = "map"
    STRUCTURE = "structure"
    UNION = "union"
    SERVICE = "service"
    RESOURCE = "resource"
    OPERATION = "operation"


@dataclass(frozen=True, order=True)
class ShapeId:
    """Namespace-qualified shape identity, e.g. ``example.weather#City``."""

    namespace: str
    name: str
    member: Optional[str] = None

    @classmethod
    def parse(cls, value: str, default_namespace: Optional[str] = None) -> "ShapeId":
        """Parse ``namespace#Name`` or ``namespace#Name$member``."""
        if isinstance(value, ShapeId):
            return value

        text = str(value).strip()
        if "#" in text:
            namespace, rest = text.split("#", 1)
        elif default_namespace:
            namespace, rest = default_namespace, text
        else:
            raise ModelError(f"Shape id must be absolute: '{text}'")

        member = None
        if "$" in rest:
            rest, member = rest.split("$", 1)

        if not namespace or not rest:
            raise ModelError(f"Invalid shape id: '{text}'")

        return cls(namespace, rest, member)

    def with_member(self, member: str) -> "ShapeId":
        return ShapeId(self.namespace, self.name, member)

    def __str__(self) -> str:
        base = f"{self.namespace}#{self.name}"
        return f"{base}${self.member}" if self.member else base


@dataclass(frozen=True)
class EnumDefinition:
    """One value of a string enum: wire value plus optional symbolic name."""

    value: str
    name: Optional[str] = None
    documentation: Optional[str] = None
    tags: Tuple[str, ...] = ()
    deprecated: bool = False

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "EnumDefinition":
        if "value" not in node:
            raise ModelError(f"Enum definition is missing a value: {node!r}")
        return cls(
            value=str(node["value"]),
            name=node.get("name"),
            documentation=node.get("documentation"),
            tags=tuple(node.get("tags", ())),
            deprecated=bool(node.get("deprecated", False)),
        )


@dataclass(frozen=True)
class MemberShape:
    """A named member of an aggregate shape targeting another shape."""

    name: str
    container: ShapeId
    target: ShapeId
    traits: Dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> ShapeId:
        return self.container.with_member(self.name)

    @property
    def is_required(self) -> bool:
        return REQUIRED_TRAIT in self.traits

    @property
    def documentation(self) -> Optional[str]:
        return self.traits.get(DOCUMENTATION_TRAIT)

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class Shape:
    """
    A node of the service model.

    Aggregate shapes keep their members in source order; service, resource
    and operation shapes keep their relationships as ordered shape ids.
    """

    id: ShapeId
    type: ShapeType
    traits: Dict[str, Any] = field(default_factory=dict)
    members: Tuple[MemberShape, ...] = ()
    version: Optional[str] = None
    operations: Tuple[ShapeId, ...] = ()
    resources: Tuple[ShapeId, ...] = ()
    input: Optional[ShapeId] = None
    output: Optional[ShapeId] = None
    errors: Tuple[ShapeId, ...] = ()

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def name(self) -> str:
        return self.id.name

    def has_trait(self, trait_id: str) -> bool:
        return trait_id in self.traits

    def get_trait(self, trait_id: str, default: Any = None) -> Any:
        return self.traits.get(trait_id, default)

    def expect_trait(self, trait_id: str) -> Any:
        if trait_id not in self.traits:
            raise ModelError(f"Expected trait '{trait_id}'", str(self.id))
        return self.traits[trait_id]

    @property
    def documentation(self) -> Optional[str]:
        return self.traits.get(DOCUMENTATION_TRAIT)

    @property
    def is_enum(self) -> bool:
        return self.type == ShapeType.STRING and ENUM_TRAIT in self.traits

    @property
    def is_error(self) -> bool:
        return self.type == ShapeType.STRUCTURE and ERROR_TRAIT in self.traits

    def enum_definitions(self) -> List[EnumDefinition]:
        """Return the enum definitions in source order."""
        return [EnumDefinition.from_node(n) for n in self.expect_trait(ENUM_TRAIT)]

    def get_member(self, name: str) -> Optional[MemberShape]:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def targets(self) -> Iterator[ShapeId]:
        """Yield every shape id this shape refers to, in a stable order."""
        for member in self.members:
            yield member.target
        yield from self.operations
        yield from self.resources
        if self.input:
            yield self.input
        if self.output:
            yield self.output
        yield from self.errors


# Prelude simple shapes every model may target
_PRELUDE = {
    "String": ShapeType.STRING,
    "Blob": ShapeType.BLOB,
    "Boolean": ShapeType.BOOLEAN,
    "PrimitiveBoolean": ShapeType.BOOLEAN,
    "Byte": ShapeType.BYTE,
    "PrimitiveByte": ShapeType.BYTE,
    "Short": ShapeType.SHORT,
    "PrimitiveShort": ShapeType.SHORT,
    "Integer": ShapeType.INTEGER,
    "PrimitiveInteger": ShapeType.INTEGER,
    "Long": ShapeType.LONG,
    "PrimitiveLong": ShapeType.LONG,
    "Float": ShapeType.FLOAT,
    "PrimitiveFloat": ShapeType.FLOAT,
    "Double": ShapeType.DOUBLE,
    "PrimitiveDouble": ShapeType.DOUBLE,
    "BigInteger": ShapeType.BIG_INTEGER,
    "BigDecimal": ShapeType.BIG_DECIMAL,
    "Timestamp": ShapeType.TIMESTAMP,
    "Document": ShapeType.DOCUMENT,
}

# Resource properties that bind operations
_RESOURCE_OPERATION_KEYS = ("create", "put", "read", "update", "delete", "list")


class Model:
    """Indexed, read-only collection of shapes."""

    def __init__(
        self,
        shapes: Iterable[Shape] = (),
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.metadata = dict(metadata or {})
        self._shapes: Dict[ShapeId, Shape] = {}

        for name, shape_type in _PRELUDE.items():
            prelude_id = ShapeId(PRELUDE_NAMESPACE, name)
            self._shapes[prelude_id] = Shape(prelude_id, shape_type)

        for shape in shapes:
            self._shapes[shape.id] = shape

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id) -> bool:
        return ShapeId.parse(shape_id) in self._shapes

    def get_shape(self, shape_id) -> Optional[Shape]:
        return self._shapes.get(ShapeId.parse(shape_id))

    def expect_shape(self, shape_id) -> Shape:
        shape = self.get_shape(shape_id)
        if shape is None:
            raise ModelError("Shape not found in model", str(shape_id))
        return shape

    def shapes(self, shape_type: Optional[ShapeType] = None) -> List[Shape]:
        """Return shapes sorted by id, optionally filtered by kind."""
        selected = [
            s for s in self._shapes.values() if shape_type is None or s.type == shape_type
        ]
        return sorted(selected, key=lambda s: s.id)

    def walk(self, root_id) -> List[Shape]:
        """
        Return every shape reachable from ``root_id``, sorted by shape id.

        Raises:
            ModelError: If a relationship targets a shape that doesn't exist
        """
        root = self.expect_shape(root_id)
        seen: Dict[ShapeId, Shape] = {}
        pending = [root]

        while pending:
            shape = pending.pop()
            if shape.id in seen:
                continue
            seen[shape.id] = shape

            for target in shape.targets():
                if target in seen:
                    continue
                target_shape = self._shapes.get(target)
                if target_shape is None:
                    raise ModelError(
                        f"Shape references unknown target '{target}'", str(shape.id)
                    )
                pending.append(target_shape)

        return sorted(seen.values(), key=lambda s: s.id)

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "Model":
        """
        Build a model from a Smithy JSON AST document.

        Args:
            document: Parsed JSON object with a top-level ``shapes`` mapping

        Returns:
            Loaded model
        """
        if not isinstance(document, dict):
            raise ModelError("Model document must be a JSON object")

        shapes_node = document.get("shapes", {})
        if not isinstance(shapes_node, dict):
            raise ModelError("Model 'shapes' must be an object")

        shapes = [
            _load_shape(ShapeId.parse(shape_id), node)
            for shape_id, node in shapes_node.items()
        ]
        return cls(shapes, metadata=document.get("metadata"))


def _load_traits(node: Dict[str, Any]) -> Dict[str, Any]:
    traits = {}
    for trait_id, value in (node.get("traits") or {}).items():
        # Relative trait names resolve against the prelude
        if "#" not in trait_id:
            trait_id = f"{PRELUDE_NAMESPACE}#{trait_id}"
        traits[trait_id] = value
    return traits


def _target(node: Any, context: ShapeId) -> ShapeId:
    if isinstance(node, dict):
        node = node.get("target")
    if not node:
        raise ModelError("Missing target reference", str(context))
    return ShapeId.parse(node, default_namespace=PRELUDE_NAMESPACE)


def _targets(nodes: Any, context: ShapeId) -> Tuple[ShapeId, ...]:
    return tuple(_target(n, context) for n in (nodes or ()))


def _load_member(container: ShapeId, name: str, node: Dict[str, Any]) -> MemberShape:
    return MemberShape(
        name=name,
        container=container,
        target=_target(node, container.with_member(name)),
        traits=_load_traits(node),
    )


def _load_shape(shape_id: ShapeId, node: Dict[str, Any]) -> Shape:
    try:
        shape_type = ShapeType(node.get("type"))
    except ValueError as e:
        raise ModelError(f"Unsupported shape type '{node.get('type')}'", str(shape_id)) from e

    members: List[MemberShape] = []
    if shape_type in (ShapeType.STRUCTURE, ShapeType.UNION):
        for name, member_node in (node.get("members") or {}).items():
            members.append(_load_member(shape_id, name, member_node))
    elif shape_type in (ShapeType.LIST, ShapeType.SET):
        members.append(_load_member(shape_id, "member", node.get("member") or {}))
    elif shape_type == ShapeType.MAP:
        members.append(_load_member(shape_id, "key", node.get("key") or {}))
        members.append(_load_member(shape_id, "value", node.get("value") or {}))

    operations = list(_targets(node.get("operations"), shape_id))
    if shape_type == ShapeType.RESOURCE:
        lifecycle = [
            _target(node[key], shape_id) for key in _RESOURCE_OPERATION_KEYS if key in node
        ]
        operations = lifecycle + operations + list(
            _targets(node.get("collectionOperations"), shape_id)
        )

    return Shape(
        id=shape_id,
        type=shape_type,
        traits=_load_traits(node),
        members=tuple(members),
        version=node.get("version"),
        operations=tuple(operations),
        resources=_targets(node.get("resources"), shape_id),
        input=_target(node["input"], shape_id) if node.get("input") else None,
        output=_target(node["output"], shape_id) if node.get("output") else None,
        errors=_targets(node.get("errors"), shape_id),
    )
