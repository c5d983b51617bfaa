"""Model resolution -- the inference half of the generator.

Takes the raw :class:`~botapigen.models.ApiModel` and a
:class:`~botapigen.models.RuleSet` and produces a
:class:`~botapigen.models.ResolvedModel`:

* :mod:`~botapigen.resolver.value_types` -- wrapper types per field.
* :mod:`~botapigen.resolver.unions` -- union discriminator strategies and
  the event envelope.
* :mod:`~botapigen.resolver.variations` -- method variation expansion.
* :mod:`~botapigen.resolver.fluent` -- receiver-bound fluent methods.
* :mod:`~botapigen.resolver.pipeline` -- runs the stages in order.
"""

from botapigen.resolver.pipeline import resolve_model

__all__ = ["resolve_model"]
