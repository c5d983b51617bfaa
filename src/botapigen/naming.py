"""Identifier case conversion for generated code.

The raw model names things the way the Bot API documentation does:
methods in ``camelCase`` (``sendMessage``), types in ``PascalCase``
(``ChatMember``) and fields in ``snake_case`` wire names (``chat_id``).
Generated Python code needs ``snake_case`` functions and attributes,
``PascalCase`` classes and ``LOUD_SNAKE_CASE`` enum members; the helpers in
this module convert between them.

:func:`sanitize_identifier` is the only converter that guarantees a valid,
non-keyword Python identifier; the others assume well-formed input.
"""

from __future__ import annotations

import keyword
import re

# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def snake_case(name: str) -> str:
    """Convert ``camelCase``/``PascalCase`` to ``snake_case``.

    Example::

        >>> snake_case("sendMarkdownV2")
        'send_markdown_v2'
        >>> snake_case("ChatId")
        'chat_id'
    """
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    return result.lower()


def sanitize_identifier(name: str) -> str:
    """Convert a wire or API name to a valid Python identifier.

    Applies the following transformations in order:

    1. CamelCase boundaries are split with underscores.
    2. The string is lowercased.
    3. Hyphens and dots are replaced with underscores.
    4. Any remaining non-alphanumeric/non-underscore characters are replaced.
    5. Consecutive and leading/trailing underscores are collapsed.
    6. An empty result defaults to ``"field"``.
    7. A leading digit gets an underscore prefix.
    8. Python keywords get a trailing underscore per PEP 8 convention
       (``"from"`` becomes ``"from_"``).

    Example::

        >>> sanitize_identifier("from")
        'from_'
        >>> sanitize_identifier("inline_message_id")
        'inline_message_id'
    """
    result = snake_case(name)
    result = result.replace("-", "_").replace(".", "_")
    result = _INVALID_IDENT_RE.sub("_", result)
    result = re.sub(r"_+", "_", result).strip("_")
    if not result:
        result = "field"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result):
        result = f"{result}_"
    return result


def pascal_case(name: str) -> str:
    """Convert ``snake_case`` or ``camelCase`` to ``PascalCase``.

    Example::

        >>> pascal_case("edited_message")
        'EditedMessage'
        >>> pascal_case("sendMessage")
        'SendMessage'
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def loud_snake_case(name: str) -> str:
    """Convert any supported casing to ``LOUD_SNAKE_CASE`` (enum members)."""
    return snake_case(name).upper()
