"""
Language-specific code generators.

Go is currently the only target language.
"""

from .go import GoCodegen, generate_go_client

__all__ = ["GoCodegen", "generate_go_client"]
