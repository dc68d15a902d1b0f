"""
Application protocol selection.

Every protocol a run supports is carried over HTTP; the application
protocol decides the request and response types exposed through the
generated client's HTTPClient interface.
"""

from dataclasses import dataclass
from typing import Optional

from ...core.errors import ModelError
from ...core.model import PROTOCOL_DEFINITION_TRAIT, Model, Shape
from ...core.symbols import Symbol, pointable_symbol
from .dependencies import NET_HTTP

# Protocol traits known to be HTTP based
HTTP_PROTOCOLS = {
    "aws.protocols#restJson1",
    "aws.protocols#restXml",
    "aws.protocols#awsJson1_0",
    "aws.protocols#awsJson1_1",
    "aws.protocols#awsQuery",
    "aws.protocols#ec2Query",
    "smithy.protocols#rpcv2Cbor",
}


@dataclass(frozen=True)
class ApplicationProtocol:
    """The transport family a client is generated for."""

    name: str
    request_type: Symbol
    response_type: Symbol

    @property
    def is_http_protocol(self) -> bool:
        return self.name == "http"

    @classmethod
    def create_default_http(cls) -> "ApplicationProtocol":
        return cls(
            name="http",
            request_type=pointable_symbol("Request", NET_HTTP),
            response_type=pointable_symbol("Response", NET_HTTP),
        )


def service_protocols(model: Model, service: Shape) -> list[str]:
    """Protocol trait ids applied to ``service``, sorted."""
    protocols = []
    for trait_id in service.traits:
        if trait_id in HTTP_PROTOCOLS:
            protocols.append(trait_id)
            continue
        # Custom protocols are traits whose definition is marked as a protocol
        trait_shape = model.get_shape(trait_id)
        if trait_shape is not None and trait_shape.has_trait(PROTOCOL_DEFINITION_TRAIT):
            protocols.append(trait_id)
    return sorted(protocols)


def resolve_protocol(
    model: Model, service: Shape, requested: Optional[str] = None
) -> tuple[Optional[str], ApplicationProtocol]:
    """
    Pick the protocol for a run and its application protocol.

    A service without protocol traits still gets an HTTP client; protocol
    serializers are then left to integrations.

    Raises:
        ModelError: If the requested protocol isn't HTTP based or the
            service doesn't support it
    """
    available = service_protocols(model, service)

    if requested:
        if available and requested not in available:
            raise ModelError(
                f"Protocol '{requested}' is not supported by the service; "
                f"available: {', '.join(available)}",
                str(service.id),
            )
        protocol = requested
    else:
        protocol = available[0] if available else None

    if protocol is not None and protocol not in HTTP_PROTOCOLS:
        raise ModelError(
            f"Protocols other than HTTP are not yet implemented: {protocol}",
            str(service.id),
        )

    return protocol, ApplicationProtocol.create_default_http()
