"""
Naming utilities for safe code generation.

Handles case conversion and reserved-word escaping. Conversions are pure:
the same input always yields the same identifier, so callers can rely on
them when resolving symbols more than once in a run.
"""

import re
from enum import Enum
from typing import List, Optional, Set

_NON_WORD = re.compile(r"\W+", re.UNICODE)


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


def split_words(value: str) -> List[str]:
    """Split on Unicode non-word characters, dropping empty segments."""
    return [part for part in _NON_WORD.split(value) if part]


def capitalize(value: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return value[:1].upper() + value[1:]


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.PASCAL_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix appended to reserved words

        Returns:
            Sanitized name safe for use
        """
        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case)
        return self.escape_reserved(converted, suffix_on_conflict)

    def escape_reserved(self, name: str, suffix: str = "_") -> str:
        """Append ``suffix`` when ``name`` is a reserved word or builtin."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r"[^a-zA-Z0-9_-]", "_", name)
        cleaned = cleaned.strip("_-")

        # Ensure doesn't start with number
        if cleaned and cleaned[0].isdigit():
            cleaned = f"_{cleaned}"

        if not cleaned:
            cleaned = "field"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return to_pascal_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return to_snake_case(name).upper()
        return name


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    name = name.replace("-", "_")
    # Split acronym runs from the following word: HTTPClient -> HTTP_Client
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = name.lower()
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def to_pascal_case(name: str) -> str:
    """
    Convert to PascalCase.

    Names that are already PascalCase are kept as-is so model names like
    ``GetHTTPStatus`` survive unchanged.
    """
    if re.fullmatch(r"[A-Z][A-Za-z0-9]*", name):
        return name
    parts = re.split(r"[_\-\s]+", name)
    return "".join(capitalize(part) for part in parts if part)
