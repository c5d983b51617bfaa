"""Assign semantic wrapper types to primitive fields and parameters."""

from __future__ import annotations

from typing import Optional

from botapigen.exceptions import WrapperNameCollisionError
from botapigen.models import ApiField, ApiModel, RuleSet
from botapigen.output import debug


def resolve_field_type(rules: RuleSet, owner: str, field: ApiField) -> Optional[str]:
    """Return the wrapper type for *field* of *owner*, or ``None`` to keep the raw type.

    The first rule (in table order) whose backing primitive equals the
    field's declared type and whose predicate accepts the field wins.
    """
    for rule in rules.value_types:
        if rule.matches(owner, field):
            return rule.name
    return None


def assign_value_types(api: ApiModel, rules: RuleSet) -> dict[str, dict[str, str]]:
    """Resolve every record field and method parameter of *api*.

    Returns:
        ``owner -> wire name -> wrapper type`` for the fields that matched a
        rule, in declaration order. Method parameters are keyed by the
        method's API name.

    Raises:
        WrapperNameCollisionError: If a declared type is named like a wrapper.
    """
    wrappers = {rule.name for rule in rules.value_types}
    for type_ in api.types:
        if type_.name in wrappers:
            raise WrapperNameCollisionError(type_.name)

    assigned: dict[str, dict[str, str]] = {}

    owners: list[tuple[str, tuple[ApiField, ...]]] = [
        (t.name, t.fields) for t in api.types if t.fields is not None
    ]
    owners.extend((m.api_name, m.parameters) for m in api.methods)

    for owner, fields in owners:
        matches: dict[str, str] = {}
        for field in fields:
            wrapper = resolve_field_type(rules, owner, field)
            if wrapper is not None:
                matches[field.wire_name] = wrapper
        if matches:
            assigned[owner] = matches

    debug(f"Assigned value types to {sum(len(m) for m in assigned.values())} fields")
    return assigned
