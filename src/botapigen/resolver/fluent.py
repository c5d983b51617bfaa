"""Synthesize receiver-bound convenience operations over the expanded methods."""

from __future__ import annotations

from botapigen.exceptions import InvalidFluentBindingError
from botapigen.models import (
    ApiModel,
    FieldPathBinding,
    FluentMethod,
    FluentRule,
    MethodElement,
    RuleSet,
)
from botapigen.output import debug


def _check_receiver(rule: FluentRule, api: ApiModel, rules: RuleSet) -> None:
    element = api.get_type(rule.receiver)
    if element is not None and element.fields is not None:
        return
    if rules.value_type(rule.receiver) is not None:
        return
    raise InvalidFluentBindingError(
        rule.receiver,
        rule.name,
        rule.delegate,
        f"receiver '{rule.receiver}' is neither a record nor a wrapper type",
    )


def _check_path(rule: FluentRule, key: str, binding: FieldPathBinding, api: ApiModel) -> None:
    """Walk *binding* through record fields starting at the receiver."""
    owner = api.get_type(rule.receiver)
    for depth, segment in enumerate(binding.path):
        field = owner.field_by_name(segment) if owner is not None else None
        if field is None:
            where = rule.receiver if depth == 0 else ".".join(binding.path[:depth])
            raise InvalidFluentBindingError(
                rule.receiver,
                rule.name,
                rule.delegate,
                f"binding '{key}': '{where}' has no field '{segment}'",
                keys=[key],
            )
        owner = api.get_type(field.declared_type)


def synthesize_fluent_method(
    rule: FluentRule, delegate: MethodElement, api: ApiModel, rules: RuleSet
) -> FluentMethod:
    """Bind *rule* to its *delegate*.

    Raises:
        InvalidFluentBindingError: If a binding key is not a delegate
            parameter, the receiver is not a record or wrapper type, or a
            field path does not exist on the receiver.
    """
    unexpected = [key for key in rule.bindings if key not in delegate.parameter_names]
    if unexpected:
        raise InvalidFluentBindingError(
            rule.receiver,
            rule.name,
            rule.delegate,
            f"unexpected arguments {unexpected}",
            keys=unexpected,
        )

    _check_receiver(rule, api, rules)
    for key, binding in rule.bindings.items():
        if not isinstance(binding, FieldPathBinding):
            continue
        if rules.value_type(rule.receiver) is not None:
            raise InvalidFluentBindingError(
                rule.receiver,
                rule.name,
                rule.delegate,
                f"binding '{key}': wrapper receivers have no fields",
                keys=[key],
            )
        _check_path(rule, key, binding, api)

    return FluentMethod(
        receiver=rule.receiver,
        name=rule.name,
        delegate=delegate,
        bindings=dict(rule.bindings),
        parameters=tuple(p for p in delegate.parameters if p.name not in rule.bindings),
    )


def synthesize_fluent_methods(
    api: ApiModel, methods: tuple[MethodElement, ...], rules: RuleSet
) -> tuple[tuple[FluentMethod, ...], tuple[FluentRule, ...]]:
    """Synthesize every fluent rule, in rule-table order.

    Returns:
        ``(fluent_methods, skipped_rules)`` where *skipped_rules* are the
        rules whose delegate is not among the expanded *methods*.
    """
    by_name = {m.name: m for m in methods}
    synthesized: list[FluentMethod] = []
    skipped: list[FluentRule] = []

    for rule in rules.fluent_methods:
        delegate = by_name.get(rule.delegate)
        if delegate is None:
            debug(f"Fluent {rule.receiver}.{rule.name} skipped: no method '{rule.delegate}'")
            skipped.append(rule)
            continue
        synthesized.append(synthesize_fluent_method(rule, delegate, api, rules))

    return tuple(synthesized), tuple(skipped)
