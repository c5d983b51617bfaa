"""Validate a raw model document into an immutable :class:`~botapigen.models.ApiModel`.

The single public entry point is :func:`extract_model`. It walks the
``types`` and ``methods`` arrays of the document produced by
:func:`~botapigen.parser.loader.load_model` and builds the frozen raw
model the resolver consumes, enforcing the structural invariants of the
front-end hand-off:

* element names are unique among types and among methods;
* every type is either a record (``fields``) or a union (``union``),
  never both and never neither;
* a field's wire name is unique within its owning element;
* only optional fields carry a default value.

Every violation raises :class:`~botapigen.exceptions.ModelParseError`
naming the offending element and field. Declaration order is preserved
exactly; nothing downstream re-sorts elements.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from botapigen.exceptions import ModelParseError
from botapigen.models import ApiField, ApiModel, MethodElement, TypeElement
from botapigen.naming import sanitize_identifier


def extract_model(raw: dict[str, Any]) -> ApiModel:
    """Extract an :class:`~botapigen.models.ApiModel` from a raw document.

    Args:
        raw: The mapping returned by :func:`~botapigen.parser.loader.load_model`.

    Returns:
        The raw element model, in declaration order.

    Raises:
        ModelParseError: If the document violates any structural invariant.

    Example::

        raw = load_model("botapi.yaml")
        api = extract_model(raw)
        for method in api.methods:
            print(method.name, "->", method.return_type)
    """
    types = [_extract_type(entry, i) for i, entry in enumerate(_as_list(raw, "types"))]
    methods = [_extract_method(entry, i) for i, entry in enumerate(_as_list(raw, "methods"))]

    _ensure_unique([t.name for t in types], "type")
    _ensure_unique([m.name for m in methods], "method")

    if not types and not methods:
        raise ModelParseError("Model declares no types and no methods")

    return ApiModel(types=tuple(types), methods=tuple(methods))


def _as_list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ModelParseError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _require_name(entry: Any, kind: str, index: int) -> str:
    if not isinstance(entry, dict):
        raise ModelParseError(f"{kind} #{index} must be a mapping")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ModelParseError(f"{kind} #{index} has no name")
    return name


def _extract_type(entry: Any, index: int) -> TypeElement:
    """Build a record or union :class:`~botapigen.models.TypeElement`."""
    name = _require_name(entry, "Type", index)
    fields = entry.get("fields")
    members = entry.get("union")

    if fields is not None and members is not None:
        raise ModelParseError(f"Type '{name}' declares both fields and union members")
    if fields is None and members is None:
        raise ModelParseError(f"Type '{name}' declares neither fields nor union members")

    description = entry.get("description") or ""

    if members is not None:
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise ModelParseError(f"Union '{name}' members must be a list of type names")
        if not members:
            raise ModelParseError(f"Union '{name}' has no members")
        _ensure_unique(members, f"member of union '{name}'")
        return TypeElement(name=name, description=description, union_members=tuple(members))

    return TypeElement(
        name=name,
        description=description,
        fields=tuple(_extract_fields(name, fields)),
    )


def _extract_method(entry: Any, index: int) -> MethodElement:
    name = _require_name(entry, "Method", index)
    return_type = entry.get("returns")
    if not isinstance(return_type, str) or not return_type:
        raise ModelParseError(f"Method '{name}' has no return type")

    return MethodElement(
        name=name,
        api_name=name,
        description=entry.get("description") or "",
        parameters=tuple(_extract_fields(name, entry.get("parameters") or [])),
        return_type=return_type,
    )


def _extract_fields(owner: str, entries: Any) -> list[ApiField]:
    """Extract the fields of *owner*, enforcing per-owner wire-name uniqueness."""
    if not isinstance(entries, list):
        raise ModelParseError(f"Fields of '{owner}' must be a list")

    fields: list[ApiField] = []
    seen: set[str] = set()
    for i, entry in enumerate(entries):
        field = _extract_field(owner, entry, i)
        if field.wire_name in seen:
            raise ModelParseError(f"Duplicate wire name '{field.wire_name}' in '{owner}'")
        seen.add(field.wire_name)
        fields.append(field)
    return fields


def _extract_field(owner: str, entry: Any, index: int) -> ApiField:
    if not isinstance(entry, dict):
        raise ModelParseError(f"Field #{index} of '{owner}' must be a mapping")

    wire_name = entry.get("wire_name")
    if not isinstance(wire_name, str) or not wire_name:
        raise ModelParseError(f"Field #{index} of '{owner}' has no wire_name")

    declared_type = entry.get("type")
    if not isinstance(declared_type, str) or not declared_type:
        raise ModelParseError(f"Field '{owner}.{wire_name}' has no type")

    is_optional = bool(entry.get("optional", False))
    default: Optional[Any] = entry.get("default")
    if default is not None and not is_optional:
        raise ModelParseError(
            f"Field '{owner}.{wire_name}' is required but declares a default value"
        )

    name = entry.get("name") or sanitize_identifier(wire_name)
    if not name.isidentifier():
        raise ModelParseError(f"Field '{owner}.{wire_name}' has invalid name '{name}'")

    try:
        return ApiField(
            name=name,
            wire_name=wire_name,
            declared_type=declared_type,
            description=entry.get("description") or "",
            is_optional=is_optional,
            default_value=default,
        )
    except ValidationError as exc:
        raise ModelParseError(f"Invalid field '{owner}.{wire_name}': {exc}") from exc


def _ensure_unique(names: list[str], kind: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ModelParseError(f"Duplicate {kind} '{name}'")
        seen.add(name)
