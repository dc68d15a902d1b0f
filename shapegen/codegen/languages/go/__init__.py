"""
Go code generator module.

Generates a Go client module (client, enums, structures, errors and
protocol middleware) for one service in a shape model.
"""

from .enums import EnumGenerator
from .generator import TEMPLATE_DIR, GoCodegen, generate_go_client
from .middleware import StepMiddlewareConfig, StepMiddlewareGenerator
from .naming import create_go_sanitizer
from .protocol import ApplicationProtocol, resolve_protocol
from .service import ServiceGenerator
from .structures import StructureGenerator
from .symbols import GoSymbolProvider

__all__ = [
    "ApplicationProtocol",
    "EnumGenerator",
    "GoCodegen",
    "GoSymbolProvider",
    "ServiceGenerator",
    "StepMiddlewareConfig",
    "StepMiddlewareGenerator",
    "StructureGenerator",
    "TEMPLATE_DIR",
    "create_go_sanitizer",
    "generate_go_client",
    "resolve_protocol",
]
