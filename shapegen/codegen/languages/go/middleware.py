"""
Stack step middleware generation.

Each step of the runtime's middleware stack (initialize, serialize, build,
finalize, deserialize) defines the same handler contract with a different
method name and input/output/next-handler types. StepMiddlewareGenerator
writes a middleware type satisfying one of those contracts; the handler
body is supplied by the caller.
"""

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional

from ...core.errors import GeneratorConfigError
from ...core.symbols import Symbol, pointable_symbol, value_symbol
from ...core.writer import SourceWriter
from .dependencies import CONTEXT_TYPE, METADATA_TYPE, SMITHY_MIDDLEWARE

# Called as body(generator, writer) inside the handler method or struct
MiddlewareBody = Callable[["StepMiddlewareGenerator", SourceWriter], Any]


@dataclass(frozen=True)
class StepMiddlewareConfig:
    """
    Validated parameters for one middleware type.

    Construction raises GeneratorConfigError naming every missing field, so
    an incomplete configuration can never reach a writer.
    """

    identifier: Optional[str] = None
    handle_method_name: Optional[str] = None
    input_type: Optional[Symbol] = None
    output_type: Optional[Symbol] = None
    handler_type: Optional[Symbol] = None

    def __post_init__(self):
        missing = [f.name for f in fields(self) if not getattr(self, f.name)]
        if missing:
            raise GeneratorConfigError("StepMiddlewareGenerator", missing)


def _step(prefix: str) -> Dict[str, Any]:
    return {
        "handle_method_name": f"Handle{prefix}",
        "input_type": value_symbol(f"{prefix}Input", SMITHY_MIDDLEWARE),
        "output_type": value_symbol(f"{prefix}Output", SMITHY_MIDDLEWARE),
        "handler_type": value_symbol(f"{prefix}Handler", SMITHY_MIDDLEWARE),
    }


# Handler contracts of the middleware stack steps
STEPS: Dict[str, Dict[str, Any]] = {
    "initialize": _step("Initialize"),
    "serialize": _step("Serialize"),
    "build": _step("Build"),
    "finalize": _step("Finalize"),
    "deserialize": _step("Deserialize"),
}


class StepMiddlewareGenerator:
    """Helper for generating stack step middleware."""

    def __init__(self, config: StepMiddlewareConfig):
        self.config = config
        self.middleware_symbol = pointable_symbol(config.identifier)

    @classmethod
    def create(cls, step: str, identifier: str) -> "StepMiddlewareGenerator":
        """Generator for ``identifier`` bound to the contract of ``step``."""
        try:
            contract = STEPS[step]
        except KeyError:
            raise GeneratorConfigError(
                "StepMiddlewareGenerator", [f"known step (got {step!r})"]
            ) from None
        return cls(StepMiddlewareConfig(identifier=identifier, **contract))

    @classmethod
    def serialize_step(cls, identifier: str) -> "StepMiddlewareGenerator":
        return cls.create("serialize", identifier)

    @classmethod
    def deserialize_step(cls, identifier: str) -> "StepMiddlewareGenerator":
        return cls.create("deserialize", identifier)

    @property
    def identifier(self) -> str:
        return self.config.identifier

    @property
    def handle_method_name(self) -> str:
        return self.config.handle_method_name

    @property
    def input_type(self) -> Symbol:
        return self.config.input_type

    @property
    def output_type(self) -> Symbol:
        return self.config.output_type

    @property
    def handler_type(self) -> Symbol:
        return self.config.handler_type

    def write_middleware(
        self,
        writer: SourceWriter,
        handler_body: MiddlewareBody,
        field_body: Optional[MiddlewareBody] = None,
    ) -> None:
        """
        Write the middleware type, its ID accessor and its handler method.

        Inside ``handler_body`` the Go variables ``ctx``, ``in``, ``next``,
        ``out``, ``metadata`` and ``err`` are in scope.
        """
        writer.add_use_imports(
            CONTEXT_TYPE, METADATA_TYPE, self.input_type, self.output_type, self.handler_type
        )

        symbol = self.middleware_symbol
        writer.open_block(
            "type {{ middleware | name }} struct {",
            "}",
            lambda: field_body(self, writer) if field_body else None,
            middleware=symbol,
        ).write("")

        # The stack orders and replaces steps by this ID
        writer.open_block(
            "func ({{ middleware | ptr }}) ID() string {",
            "}",
            lambda: writer.write("return {{ identifier | quote }}", identifier=self.identifier),
            middleware=symbol,
        ).write("")

        writer.open_block(
            "func (m {{ middleware | ptr }}) {{ method }}("
            "ctx {{ context }}, in {{ input }}, next {{ handler }}) (\n"
            "\tout {{ output }}, metadata {{ metadata }}, err error,\n"
            ") {",
            "}",
            lambda: handler_body(self, writer),
            middleware=symbol,
            method=self.handle_method_name,
            context=CONTEXT_TYPE,
            input=self.input_type,
            handler=self.handler_type,
            output=self.output_type,
            metadata=METADATA_TYPE,
        ).write("")
