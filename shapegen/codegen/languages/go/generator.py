"""
Go client generation for one service.

GoCodegen walks the service closure in shape-id order, dispatches each
shape to its generator, lets protocol generators contribute middleware and
finalizes every writer into a GeneratedFile.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ...core.config import GoSettings
from ...core.dependencies import Dependency
from ...core.errors import GeneratorError, ModelError
from ...core.generator import FileManifest, GeneratedFile, GenerationContext
from ...core.model import PRELUDE_NAMESPACE, Model, Shape, ShapeType
from ...core.symbols import Symbol, SymbolTable, scope_of
from ...core.templates import TemplateEngine, create_template_engine
from ...core.writer import SourceWriter
from ....logging_config import get_logger
from ...integration import Integration, IntegrationRegistry, ProtocolGenerator
from ...registry import GeneratorRegistry, create_default_registry
from .enums import enum_labels
from .middleware import StepMiddlewareGenerator
from .protocol import resolve_protocol
from .structures import member_names
from .symbols import GoSymbolProvider

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

DOC_FILE = "doc.go"
GO_MOD_FILE = "go.mod"
SERIALIZERS_FILE = "serializers.go"
DESERIALIZERS_FILE = "deserializers.go"


class WriterDelegator:
    """Hands out exactly one writer per output unit."""

    def __init__(self, engine: TemplateEngine, settings: GoSettings):
        self.engine = engine
        self.settings = settings
        self._writers: Dict[str, SourceWriter] = {}

    def use_file_writer(self, filename: str) -> SourceWriter:
        writer = self._writers.get(filename)
        if writer is None:
            directory = filename.rsplit("/", 1)[0] if "/" in filename else ""
            if directory:
                package_name = directory.rsplit("/", 1)[-1]
                package_path = f"{self.settings.module_name}/{directory}"
            else:
                package_name = self.settings.package_name
                package_path = self.settings.module_name
            writer = SourceWriter(
                self.engine,
                filename,
                package_name,
                package_path=package_path,
                indent_text=self.settings.indent_text,
            )
            self._writers[filename] = writer
        return writer

    def use_shape_writer(self, symbol: Symbol) -> SourceWriter:
        if not symbol.definition_file:
            raise GeneratorError(f"Symbol {symbol.full_name} has no definition file")
        return self.use_file_writer(symbol.definition_file)

    def writers(self) -> List[SourceWriter]:
        """Writers sorted by file name."""
        return [self._writers[name] for name in sorted(self._writers)]


class GoCodegen:
    """Generates a Go client module for the configured service."""

    def __init__(
        self,
        model: Model,
        settings: GoSettings,
        integrations: Optional[Union[IntegrationRegistry, Iterable[Integration]]] = None,
        registry: Optional[GeneratorRegistry] = None,
        engine: Optional[TemplateEngine] = None,
    ):
        self.model = model
        self.settings = settings
        if integrations is None:
            integrations = IntegrationRegistry()
        elif not isinstance(integrations, IntegrationRegistry):
            integrations = IntegrationRegistry(integrations)
        self.integrations = integrations
        self.registry = registry or create_default_registry()
        self.engine = engine or create_template_engine(TEMPLATE_DIR)

    def execute(self) -> FileManifest:
        """
        Run generation and return the finished files.

        Raises:
            GeneratorError: If any unit fails; no partial output is returned
        """
        service = self.model.expect_shape(self.settings.service)
        if service.type != ShapeType.SERVICE:
            raise ModelError("Configured service is not a service shape", str(service.id))

        protocol_name, application_protocol = resolve_protocol(
            self.model, service, self.settings.protocol
        )
        logger.info(
            "Generating %s for %s (protocol: %s)",
            self.settings.module_name,
            service.id,
            protocol_name or "none",
        )

        context = GenerationContext(
            model=self.model,
            settings=self.settings,
            service=service,
            symbols=SymbolTable(GoSymbolProvider(self.model, self.settings)),
            integrations=self.integrations.freeze(),
            protocol=application_protocol,
        )

        shapes = [s for s in self.model.walk(service.id) if s.id.namespace != PRELUDE_NAMESPACE]

        self._reserve_names(context, shapes)

        delegator = WriterDelegator(self.engine, self.settings)
        try:
            self._generate_shapes(context, delegator, shapes)
            self._generate_protocol_middleware(context, delegator, shapes, protocol_name)
            self._generate_package_docs(context, delegator)
            manifest = self._finalize(delegator)
        except GeneratorError as e:
            logger.error("Generation of %s failed: %s", service.id, e)
            raise

        logger.info("Generated %d files for %s", len(manifest), service.id)
        return manifest

    def _reserve_names(self, context: GenerationContext, shapes: List[Shape]) -> None:
        """
        Decide every identifier before any text exists.

        Shape symbols, enum constants and struct fields are all checked here
        so a collision aborts the run with no writer created.
        """
        symbols = context.symbols
        for shape in shapes:
            symbol = symbols.resolve(shape)
            if shape.is_enum:
                for label, definition in enum_labels(symbol.name, shape.enum_definitions()):
                    symbols.claim(
                        scope_of(symbol), label, f"{shape.id} enum value {definition.value!r}"
                    )
            elif shape.type in (ShapeType.STRUCTURE, ShapeType.UNION):
                member_names(symbols.provider, shape)

    def _generate_shapes(
        self, context: GenerationContext, delegator: WriterDelegator, shapes: List[Shape]
    ) -> None:
        for shape in shapes:
            generator_class = self.registry.generator_for(shape)
            if generator_class is None:
                continue
            symbol = context.symbols.resolve(shape)
            writer = delegator.use_shape_writer(symbol)
            logger.debug("%s -> %s (%s)", shape.id, writer.filename, generator_class.__name__)
            generator_class(context, writer, shape).run()

    def _generate_protocol_middleware(
        self,
        context: GenerationContext,
        delegator: WriterDelegator,
        shapes: List[Shape],
        protocol_name: Optional[str],
    ) -> None:
        protocol_generator = self._protocol_generator(context, protocol_name)
        if protocol_generator is None:
            return

        operations = [s for s in shapes if s.type == ShapeType.OPERATION]
        for operation in operations:
            name = context.symbols.resolve(operation).name

            serializer = StepMiddlewareGenerator.serialize_step(
                f"{protocol_generator.name}_serializeOp{name}"
            )
            serializer.write_middleware(
                delegator.use_file_writer(SERIALIZERS_FILE),
                lambda g, w, op=operation: protocol_generator.serialize_body(op, g, w),
            )

            deserializer = StepMiddlewareGenerator.deserialize_step(
                f"{protocol_generator.name}_deserializeOp{name}"
            )
            deserializer.write_middleware(
                delegator.use_file_writer(DESERIALIZERS_FILE),
                lambda g, w, op=operation: protocol_generator.deserialize_body(op, g, w),
            )

    def _protocol_generator(
        self, context: GenerationContext, protocol_name: Optional[str]
    ) -> Optional[ProtocolGenerator]:
        """First matching integration's generator for the selected protocol."""
        if protocol_name is None:
            return None
        for integration in context.matching_integrations():
            generator = integration.protocol_generator
            if generator is not None and generator.protocol == protocol_name:
                logger.debug("Using protocol generator from %s", integration.name)
                return generator
        logger.warning("No protocol generator registered for %s", protocol_name)
        return None

    def _generate_package_docs(
        self, context: GenerationContext, delegator: WriterDelegator
    ) -> None:
        service = context.service
        title = service.get_trait("smithy.api#title") or self.settings.package_name
        text = (
            f"Package {self.settings.package_name} provides the API client, operations, "
            f"and parameter types for {title}."
        )
        if service.documentation:
            text = f"{text}\n\n{service.documentation}"
        delegator.use_file_writer(DOC_FILE).write_package_docs(text)

    def _finalize(self, delegator: WriterDelegator) -> FileManifest:
        manifest = FileManifest()
        requires: Dict[str, Dependency] = {}

        for writer in delegator.writers():
            manifest.add(GeneratedFile(writer.filename, writer.to_string()))
            for dependency in writer.dependencies.flush():
                if dependency.module and dependency.version:
                    requires.setdefault(dependency.module, dependency)

        go_mod = self.engine.render_template(
            "go.mod.j2",
            {
                "module_name": self.settings.module_name,
                "go_version": self.settings.go_version,
                "requires": [requires[m] for m in sorted(requires)],
            },
        )
        manifest.add(GeneratedFile(GO_MOD_FILE, go_mod))
        return manifest


def generate_go_client(
    model: Model,
    settings: GoSettings,
    integrations: Optional[Iterable[Integration]] = None,
) -> FileManifest:
    """Convenience wrapper around GoCodegen.execute()."""
    return GoCodegen(model, settings, integrations).execute()
