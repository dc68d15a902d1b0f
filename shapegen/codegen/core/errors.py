"""
Exception hierarchy for code generation.

Every failure raised while turning a model into source derives from
GeneratorError so a whole run can be aborted with a single handler.
"""

from typing import Optional


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class ModelError(GeneratorError):
    """The model can't be generated: unsupported protocol, missing trait, etc."""

    def __init__(self, message: str, shape_id: Optional[str] = None):
        self.shape_id = shape_id
        if shape_id:
            message = f"{message} (shape: {shape_id})"
        super().__init__(message)


class NamingCollisionError(GeneratorError):
    """Two distinct sources resolved to the same identifier in one scope."""

    def __init__(self, identifier: str, first: str, second: str, scope: str = ""):
        self.identifier = identifier
        self.first = first
        self.second = second
        self.scope = scope
        where = f" in scope '{scope}'" if scope else ""
        super().__init__(
            f"Identifier '{identifier}'{where} is claimed by both "
            f"'{first}' and '{second}'"
        )


class GeneratorConfigError(GeneratorError):
    """A generator was constructed with incomplete configuration."""

    def __init__(self, generator: str, missing: list[str]):
        self.generator = generator
        self.missing = list(missing)
        super().__init__(
            f"{generator} is missing required configuration: {', '.join(self.missing)}"
        )
