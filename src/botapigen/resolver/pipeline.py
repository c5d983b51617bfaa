"""Run every resolution stage over a raw model."""

from __future__ import annotations

from botapigen.models import ApiModel, ResolvedModel, RuleSet
from botapigen.output import debug
from botapigen.resolver.fluent import synthesize_fluent_methods
from botapigen.resolver.unions import (
    collect_union_types,
    resolve_event_envelope,
    resolve_unions,
    union_parents,
)
from botapigen.resolver.value_types import assign_value_types
from botapigen.resolver.variations import expand_methods


def resolve_model(api: ApiModel, rules: RuleSet) -> ResolvedModel:
    """Resolve *api* against *rules* into the structures the emitter renders.

    Stages run in a fixed order and each consumes only the immutable output
    of the previous ones: value types and unions from the raw model, then
    variations, then fluent methods over the expanded operations. The first
    invariant violation aborts the run.

    Raises:
        ResolutionError: Any subclass, naming the offending elements.
    """
    debug(f"Resolving {len(api.types)} types and {len(api.methods)} methods")

    value_types = assign_value_types(api, rules)
    unions = resolve_unions(api, rules)
    parents = union_parents(collect_union_types(api))
    envelope = resolve_event_envelope(api, rules)

    methods = expand_methods(api, rules)
    fluent_methods, skipped = synthesize_fluent_methods(api, methods, rules)

    debug(
        f"Resolved {len(unions)} unions, {len(methods)} operations, "
        f"{len(fluent_methods)} fluent methods ({len(skipped)} rules skipped)"
    )
    return ResolvedModel(
        api=api,
        rules=rules,
        value_types=value_types,
        unions=unions,
        union_parents=parents,
        envelope=envelope,
        methods=methods,
        fluent_methods=fluent_methods,
        skipped_fluent_rules=skipped,
    )
