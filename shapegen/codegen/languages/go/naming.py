"""
Go identifier rules: keywords, predeclared names and package names.
"""

from ...core.naming import NameSanitizer

GO_KEYWORDS = frozenset(
    """
    break case chan const continue default defer else fallthrough for func go
    goto if import interface map package range return select struct switch
    type var
    """.split()
)

# Predeclared in the universe block; shadowing them compiles but confuses
GO_PREDECLARED = frozenset(
    """
    any bool byte comparable complex64 complex128 error float32 float64 int
    int8 int16 int32 int64 rune string uint uint8 uint16 uint32 uint64 uintptr
    true false iota nil
    append cap clear close complex copy delete imag len make max min new panic
    print println real recover
    """.split()
)

# Declared by the service generator in the client package
CLIENT_PACKAGE_NAMES = frozenset({"Client", "Options", "HTTPClient", "APIOptionFunc", "New"})


def create_go_sanitizer() -> NameSanitizer:
    return NameSanitizer(set(GO_KEYWORDS), set(GO_PREDECLARED))


def validate_go_package_name(name: str) -> list[str]:
    """Problems with ``name`` as a Go package clause; empty when it is fine."""
    if not name:
        return ["Package name cannot be empty"]

    problems = []
    if not name.isidentifier():
        problems.append(f"'{name}' is not a valid Go identifier")
    if name[0].isupper():
        problems.append("Package names should be lowercase")
    if "_" in name:
        problems.append("Package names should not contain underscores")
    if name in GO_KEYWORDS:
        problems.append(f"'{name}' is a Go reserved word")
    elif name in GO_PREDECLARED:
        problems.append(f"'{name}' shadows a predeclared Go identifier")
    return problems
