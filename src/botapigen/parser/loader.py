"""Load raw model documents from a URL, local file, or stdin.

This module handles all I/O for fetching the front-end's hand-off
document (the ordered list of type and method elements) and converting it
into a Python dictionary. JSON and YAML are both accepted, with format
detection from the file extension, the ``Content-Type`` header, or the
content itself.

The returned dict should be passed to
:func:`~botapigen.parser.extractor.extract_model`, which validates it into
an :class:`~botapigen.models.ApiModel`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from botapigen.exceptions import ModelParseError


def load_model(source: str) -> dict[str, Any]:
    """Load a raw model document from URL, file path, or stdin (``'-'``).

    Raises:
        ModelParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ModelParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ModelParseError("No input received from stdin")

    return _parse_content(content)


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch the document over HTTP(S), using ``Content-Type`` as a format hint."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ModelParseError(
            f"HTTP {exc.response.status_code} fetching model from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ModelParseError(f"Failed to fetch model from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise ModelParseError(f"Model file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelParseError(f"Failed to read model file {path}: {exc}") from exc

    if not content.strip():
        raise ModelParseError(f"Model file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        ModelParseError: If the content cannot be parsed as either format,
            or is not a mapping at the top level.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ModelParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse model as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ModelParseError(msg) from exc

    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ModelParseError(f"Model must be a JSON/YAML object (got {kind})")
    return result
