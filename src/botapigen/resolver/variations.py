"""Expand methods with exclusive parameter groups into concrete operations."""

from __future__ import annotations

from botapigen.exceptions import InvalidVariationError
from botapigen.models import ApiModel, MethodElement, MethodVariationRule, RuleSet
from botapigen.output import debug


def validate_variation(method: MethodElement, rule: MethodVariationRule) -> None:
    """Check that *rule* partitions parameters that *method* actually has.

    Raises:
        InvalidVariationError: If the required and skipped groups overlap or
            name parameters the method does not declare.
    """
    overlap = sorted(set(rule.required_params) & set(rule.skip_params))
    if overlap:
        raise InvalidVariationError(
            method.name,
            rule.new_method_name,
            f"parameters both required and skipped: {', '.join(overlap)}",
        )

    known = set(method.parameter_wire_names)
    unknown = [p for p in (*rule.required_params, *rule.skip_params) if p not in known]
    if unknown:
        raise InvalidVariationError(
            method.name,
            rule.new_method_name,
            f"unknown parameters: {', '.join(unknown)}",
        )


def apply_variation(method: MethodElement, rule: MethodVariationRule) -> MethodElement:
    """Build the operation described by *rule* from *method*."""
    parameters = tuple(
        p.model_copy(update={"is_optional": False, "default_value": None})
        if p.wire_name in rule.required_params
        else p
        for p in method.parameters
        if p.wire_name not in rule.skip_params
    )

    description = method.description
    for rewrite in rule.description_rewrites:
        description = rewrite.apply(description)

    return method.model_copy(
        update={
            "name": rule.new_method_name,
            "parameters": parameters,
            "return_type": rule.new_return_type,
            "description": description,
        }
    )


def expand_method(method: MethodElement, rules: RuleSet) -> list[MethodElement]:
    """Return the operations derived from *method*: itself, or one per matching rule."""
    matching = [r for r in rules.variations if r.method_name == method.name]
    if not matching:
        return [method]

    expanded = []
    for rule in matching:
        validate_variation(method, rule)
        expanded.append(apply_variation(method, rule))
    debug(f"Expanded {method.name} into {', '.join(m.name for m in expanded)}")
    return expanded


def expand_methods(api: ApiModel, rules: RuleSet) -> tuple[MethodElement, ...]:
    """Expand every method of *api*, preserving declaration order.

    Raises:
        InvalidVariationError: If a rule is invalid for its method, or two
            operations end up with the same name.
    """
    methods: list[MethodElement] = []
    seen: dict[str, str] = {}
    for method in api.methods:
        for expanded in expand_method(method, rules):
            if expanded.name in seen:
                raise InvalidVariationError(
                    method.name,
                    expanded.name,
                    f"name collides with an operation derived from '{seen[expanded.name]}'",
                )
            seen[expanded.name] = method.name
            methods.append(expanded)

    known = {m.name for m in api.methods}
    for rule in rules.variations:
        if rule.method_name not in known:
            debug(f"Variation {rule.new_method_name} skipped: no method '{rule.method_name}'")

    return tuple(methods)
