"""Utility functions for loading shape models.

This module loads JSON AST model documents from files and URLs and turns
them into a :class:`~shapegen.codegen.core.model.Model`.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.errors import ModelError
from .codegen.core.model import Model
from .logging_config import get_logger

logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Raised when a model document cannot be read or parsed."""

    pass


def load_document_from_file(file_path: str | Path) -> dict[str, Any]:
    """Load a JSON model document from a local file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ModelLoadError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Loading model from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"Model file does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in model file {file_path}: {e}")
        raise ModelLoadError(f"Invalid JSON in model file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading model file {file_path}: {e}")
        raise ModelLoadError(f"Error reading model file {file_path}: {e}") from e

    return _expect_object(document, str(file_path))


def load_document_from_url(url: str, timeout: int = 30) -> dict[str, Any]:
    """Fetch a JSON model document over HTTP.

    Raises:
        ModelLoadError: If URL is invalid, request fails, or response isn't JSON.
    """
    logger.debug(f"Loading model from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        raise ModelLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        document = response.json()
    except requests.exceptions.Timeout:
        logger.error(f"Request timeout for URL: {url}")
        raise ModelLoadError(f"Request timeout for URL: {url}")
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise ModelLoadError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise ModelLoadError(f"HTTP error {e.response.status_code} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise ModelLoadError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        # requests raises a ValueError subclass for undecodable bodies
        logger.error(f"Invalid JSON response from URL {url}: {e}")
        raise ModelLoadError(f"Invalid JSON response from URL {url}: {e}") from e

    return _expect_object(document, url)


def load_model(source: str | Path, timeout: int = 30) -> Model:
    """Load a model from a file path or an http(s) URL.

    Raises:
        ModelLoadError: If the document cannot be loaded or is not a valid model.
        FileNotFoundError: If a local file doesn't exist.
    """
    source_text = str(source)
    if source_text.startswith(("http://", "https://")):
        document = load_document_from_url(source_text, timeout)
    else:
        document = load_document_from_file(source)

    try:
        model = Model.from_dict(document)
    except ModelError as e:
        raise ModelLoadError(f"Invalid model in {source_text}: {e}") from e

    logger.info(f"Loaded {len(model)} shapes from {source_text}")
    return model


def _expect_object(document: Any, source: str) -> dict[str, Any]:
    if not isinstance(document, dict):
        raise ModelLoadError(f"Model document must be a JSON object: {source}")
    return document
