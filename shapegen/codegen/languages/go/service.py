"""
Service client generation.

Writes the Client type, its constructor, the ServiceID/ServiceName
accessors and the Options struct assembled from integrations and the
application protocol.
"""

from ...core.errors import ModelError
from ...core.generator import ShapeGenerator
from ...core.model import TITLE_TRAIT, ShapeType
from ...core.symbols import Symbol
from ....logging_config import get_logger
from ...integration import collect_config_fields
from .dependencies import STACK_TYPE

logger = get_logger(__name__)

CONFIG_NAME = "Options"
API_OPTIONS_FUNC_NAME = "APIOptionFunc"

CONFIG_SYMBOL = Symbol(name=CONFIG_NAME)
API_OPTIONS_FUNC_SYMBOL = Symbol(name=API_OPTIONS_FUNC_NAME)


class ServiceGenerator(ShapeGenerator):
    """Generates a service client and configuration."""

    shape_types = (ShapeType.SERVICE,)

    @property
    def application_protocol(self):
        return self.context.protocol

    def client_id(self) -> str:
        """Identifier returned by ServiceID()."""
        settings = self.context.settings
        return settings.service_id or settings.package_name

    def client_title(self) -> str:
        """Title returned by ServiceName(), falling back to the identifier."""
        return self.shape.get_trait(TITLE_TRAIT) or self.client_id()

    def run(self) -> None:
        self.ensure_supported_protocol()

        writer = self.writer
        client = self.symbols.resolve(self.shape)
        logger.debug("Writing client for %s", self.shape.id)

        self.write_docs(client.documentation)
        writer.open_block(
            "type {{ client | name }} struct {",
            "}",
            lambda: writer.write("options {{ config }}", config=CONFIG_SYMBOL),
            client=client,
        ).write("")

        self._write_constructor(client)

        self.write_docs("ServiceID returns the name of the identifier for the service API.")
        writer.write(
            "func (c {{ client | ptr }}) ServiceID() string { return {{ id | quote }} }",
            client=client,
            id=self.client_id(),
        ).write("")

        self.write_docs("ServiceName returns the full service title.")
        writer.write(
            "func (c {{ client | ptr }}) ServiceName() string { return {{ title | quote }} }",
            client=client,
            title=self.client_title(),
        ).write("")

        self._write_config()

        writer.write(
            "type {{ func_name }} func({{ stack | ptr }}) error",
            func_name=API_OPTIONS_FUNC_SYMBOL,
            stack=STACK_TYPE,
        ).write("")

    def _write_constructor(self, client: Symbol) -> None:
        writer = self.writer
        self.write_docs(
            f"New returns an initialized {client.name} based on the functional options. "
            "Provide additional functional options to further configure the behavior of "
            "the client, such as changing the client's endpoint or adding custom "
            "middleware behavior."
        )

        def write_body():
            writer.write("options = options.Copy()").write("")

            # Resolvers run in registration order; the first error is returned as-is
            for integration in self.context.matching_integrations():
                if integration.resolve_function is None:
                    continue
                writer.open_block(
                    "if err := {{ resolve }}(&options); err != nil {",
                    "}",
                    lambda: writer.write("return nil, err"),
                    resolve=integration.resolve_function,
                ).write("")

            writer.open_block(
                "client := &{{ client | name }}{",
                "}",
                lambda: writer.write("options: options,"),
                client=client,
            ).write("")
            writer.write("return client, nil")

        writer.open_block(
            "func New(options {{ config }}) ({{ client | ptr }}, error) {",
            "}",
            write_body,
            config=CONFIG_SYMBOL,
            client=client,
        ).write("")

    def _write_config(self) -> None:
        writer = self.writer
        fields = collect_config_fields(
            self.context.integrations, self.context.model, self.shape
        )

        def write_fields():
            self.write_docs(
                "Set of options to modify how an operation is invoked. These apply to all "
                "operations invoked for this client. Use functional options on operation "
                "call to modify this list for per operation behavior."
            )
            writer.write("APIOptions []{{ func_name }}", func_name=API_OPTIONS_FUNC_SYMBOL)
            writer.write("")

            for integration, config_field in fields:
                logger.debug(
                    "Adding Options.%s from integration %s", config_field.name, integration.name
                )
                self.write_docs(config_field.documentation)
                writer.write(
                    "{{ name }} {{ type | ptr }}", name=config_field.name, type=config_field.type
                )
                writer.write("")

            self._write_protocol_config()

        writer.open_block(
            "type {{ config }} struct {", "}", write_fields, config=CONFIG_SYMBOL
        ).write("")

        self._write_protocol_types()

        self.write_docs("Copy creates a clone where the APIOptions list is deep copied.")

        def write_copy():
            writer.write("to := o")
            writer.write(
                "to.APIOptions = make([]{{ func_name }}, len(o.APIOptions))",
                func_name=API_OPTIONS_FUNC_SYMBOL,
            )
            writer.write("copy(to.APIOptions, o.APIOptions)")
            writer.write("return to")

        writer.open_block(
            "func (o {{ config }}) Copy() {{ config }} {", "}", write_copy, config=CONFIG_SYMBOL
        ).write("")

    def _write_protocol_config(self) -> None:
        self.ensure_supported_protocol()
        self.write_docs(
            "The HTTP client to invoke API calls with. Defaults to client's default "
            "HTTP implementation if nil."
        )
        self.writer.write("HTTPClient HTTPClient")

    def _write_protocol_types(self) -> None:
        self.ensure_supported_protocol()
        protocol = self.application_protocol
        self.writer.open_block(
            "type HTTPClient interface {",
            "}",
            lambda: self.writer.write(
                "Do({{ request | ptr }}) ({{ response | ptr }}, error)",
                request=protocol.request_type,
                response=protocol.response_type,
            ),
        ).write("")

    def ensure_supported_protocol(self) -> None:
        protocol = self.application_protocol
        if protocol is None or not protocol.is_http_protocol:
            name = getattr(protocol, "name", None)
            raise ModelError(
                f"Protocols other than HTTP are not yet implemented: {name}",
                str(self.shape.id),
            )
