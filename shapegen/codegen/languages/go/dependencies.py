"""
Packages and runtime symbols referenced by generated Go code.

Generated clients depend on a small set of standard library packages and on
the smithy-go runtime, which provides the error abstraction and the
middleware stack.
"""

from ...core.dependencies import Dependency, DependencyType
from ...core.symbols import pointable_symbol, value_symbol

SMITHY_GO_MODULE = "github.com/awslabs/smithy-go"
SMITHY_GO_VERSION = "v0.1.1"


def stdlib(path: str) -> Dependency:
    return Dependency(path, type=DependencyType.STDLIB)


def smithy(package: str = "", alias: str = "") -> Dependency:
    path = f"{SMITHY_GO_MODULE}/{package}" if package else SMITHY_GO_MODULE
    return Dependency(
        path,
        alias=alias or ("smithy" if not package else ""),
        type=DependencyType.THIRD_PARTY,
        module=SMITHY_GO_MODULE,
        version=SMITHY_GO_VERSION,
    )


def local(path: str) -> Dependency:
    """A package of the module being generated."""
    return Dependency(path, type=DependencyType.LOCAL)


CONTEXT = stdlib("context")
FMT = stdlib("fmt")
MATH_BIG = stdlib("math/big")
NET_HTTP = stdlib("net/http")
TIME = stdlib("time")

SMITHY = smithy()
SMITHY_MIDDLEWARE = smithy("middleware")

# Runtime surface consumed by generated code
CONTEXT_TYPE = value_symbol("Context", CONTEXT)
METADATA_TYPE = value_symbol("Metadata", SMITHY_MIDDLEWARE)
STACK_TYPE = pointable_symbol("Stack", SMITHY_MIDDLEWARE)
ERROR_FAULT_TYPE = value_symbol("ErrorFault", SMITHY)
FAULT_CLIENT = value_symbol("FaultClient", SMITHY)
FAULT_SERVER = value_symbol("FaultServer", SMITHY)
FAULT_UNKNOWN = value_symbol("FaultUnknown", SMITHY)
SPRINTF = value_symbol("Sprintf", FMT)
