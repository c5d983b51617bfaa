"""Static rule tables for the Bot API.

The tables are plain data consumed by :mod:`botapigen.resolver`; tests
build their own :class:`~botapigen.models.RuleSet` instances instead of
patching these.

* :mod:`~botapigen.rules.value_types` -- identifier and unit wrapper types.
* :mod:`~botapigen.rules.variations` -- chat-message / inline-message splits.
* :mod:`~botapigen.rules.fluent` -- receiver-bound convenience operations.
"""

from __future__ import annotations

from botapigen.models import RuleSet
from botapigen.rules.fluent import default_fluent_methods
from botapigen.rules.value_types import default_value_types
from botapigen.rules.variations import default_variations

# Unions whose members keep their discriminator field as a regular field.
EXPLICIT_MARKER_UNIONS = ("PassportElementError",)

EVENT_ENVELOPE_TYPE = "Update"


def default_rules() -> RuleSet:
    """Return the complete rule set used to generate the Bot API client."""
    return RuleSet(
        value_types=default_value_types(),
        variations=default_variations(),
        fluent_methods=default_fluent_methods(),
        discriminator_field_names=("type", "status"),
        structural_blocklist=("description",),
        explicit_marker_unions=EXPLICIT_MARKER_UNIONS,
        event_envelope_type=EVENT_ENVELOPE_TYPE,
    )


__all__ = ["default_rules", "EXPLICIT_MARKER_UNIONS", "EVENT_ENVELOPE_TYPE"]
