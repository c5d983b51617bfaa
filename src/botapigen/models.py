"""Canonical Pydantic models shared across all botapigen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory
or in the project-local ``botapigen.json``:
    :class:`GeneratorConfig` and :class:`GlobalConfig`.

**Raw model** -- produced once per run by the parser and read-only thereafter:
    :class:`ApiField`, :class:`TypeElement`, :class:`MethodElement`, and
    :class:`ApiModel`.

**Rule tables** -- static configuration supplied at startup:
    :class:`ValueTypeRule`, :class:`MethodVariationRule`,
    :class:`FluentRule` (with its :data:`Binding` expressions), and the
    :class:`RuleSet` that bundles them.

**Resolution output** -- derived by :mod:`botapigen.resolver` and consumed
by the emitter:
    :class:`UnionResolution`, :class:`EventEnvelope`,
    :class:`FluentMethod`, and :class:`ResolvedModel`.

Raw-model, rule and resolution models are frozen: no stage mutates the
output of another stage.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Settings that shape the generated client package.

    Resolved by :func:`~botapigen.config.resolve_config` from CLI flags,
    ``BOTAPIGEN_*`` environment variables, the project-local
    ``botapigen.json`` and the global config file, in that order.
    """

    package_name: str = Field(
        default="tbot_api", description="Import name of the generated package"
    )
    output_dir: str = Field(
        default="generated",
        description="Directory that receives the generated package directory",
    )
    api_url: str = Field(
        default="https://api.telegram.org",
        description="Default Bot API server baked into the generated client",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/botapigen/config.json``.

    Loaded and saved by :func:`~botapigen.config.load_global_config` and
    :func:`~botapigen.config.save_global_config`. Fields here have the
    lowest precedence.
    """

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    no_color: bool = False


# --- Raw model ---


class ApiField(BaseModel):
    """A named, typed member of a type (record field) or method (parameter).

    ``wire_name`` is the serialized key and is unique within the owning
    element; ``name`` is the Python identifier used in generated code.
    ``default_value`` is only ever set on optional fields.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    wire_name: str
    declared_type: str = Field(description="Python type expression or element name")
    description: str = ""
    is_optional: bool = False
    default_value: Any = None


class TypeElement(BaseModel):
    """A declared type: either a record (``fields``) or a union (``union_members``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    fields: Optional[tuple[ApiField, ...]] = None
    union_members: Optional[tuple[str, ...]] = None

    @property
    def is_union(self) -> bool:
        return self.union_members is not None

    def field(self, wire_name: str) -> Optional[ApiField]:
        """Return the field serialized as *wire_name*, or ``None``."""
        for f in self.fields or ():
            if f.wire_name == wire_name:
                return f
        return None

    def field_by_name(self, name: str) -> Optional[ApiField]:
        for f in self.fields or ():
            if f.name == name:
                return f
        return None


class MethodElement(BaseModel):
    """A remote operation.

    ``api_name`` is the name used on the wire (the URL path segment and the
    request record name). ``name`` is the logical name of the operation;
    the two only differ for operations produced by a variation rule.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    api_name: str
    description: str = ""
    parameters: tuple[ApiField, ...] = ()
    return_type: str

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    @property
    def parameter_wire_names(self) -> list[str]:
        return [p.wire_name for p in self.parameters]


class ApiModel(BaseModel):
    """The raw element model handed over by the front-end, in declaration order."""

    model_config = ConfigDict(frozen=True)

    types: tuple[TypeElement, ...] = ()
    methods: tuple[MethodElement, ...] = ()

    def get_type(self, name: str) -> Optional[TypeElement]:
        """Return the type element called *name*, or ``None``."""
        for el in self.types:
            if el.name == name:
                return el
        return None

    def get_method(self, name: str) -> Optional[MethodElement]:
        for el in self.methods:
            if el.name == name:
                return el
        return None


# --- Rule tables ---

FieldPredicate = Callable[[str, ApiField], bool]
"""``predicate(owner_element_name, field) -> bool`` used by :class:`ValueTypeRule`."""


class ValueTypeRule(BaseModel):
    """Maps matching primitive fields to a single-field wrapper type.

    Rules are evaluated top-to-bottom and the first match wins, but each
    predicate is expected to exclude competing suffixes explicitly
    instead of leaning on table order.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    backing_primitive: str
    doc_string: Optional[str] = None
    predicate: FieldPredicate

    def matches(self, owner: str, field: ApiField) -> bool:
        return field.declared_type == self.backing_primitive and self.predicate(owner, field)


class DescriptionRewrite(BaseModel):
    """A regular-expression substitution applied to a method description."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    replacement: str

    def apply(self, text: str) -> str:
        return re.sub(self.pattern, self.replacement, text)


class MethodVariationRule(BaseModel):
    """Derives one concrete operation from a method with exclusive parameter groups.

    ``required_params`` and ``skip_params`` hold parameter wire names.
    """

    model_config = ConfigDict(frozen=True)

    method_name: str
    required_params: tuple[str, ...] = ()
    skip_params: tuple[str, ...] = ()
    new_method_name: str
    new_return_type: str
    description_rewrites: tuple[DescriptionRewrite, ...] = ()


class ReceiverBinding(BaseModel):
    """Bind a delegate argument to the receiver itself."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["receiver"] = "receiver"


class FieldPathBinding(BaseModel):
    """Bind a delegate argument to an attribute path on the receiver (``chat.id``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    path: tuple[str, ...]


class LiteralBinding(BaseModel):
    """Bind a delegate argument to a constant value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: Any


Binding = Annotated[
    Union[ReceiverBinding, FieldPathBinding, LiteralBinding],
    Field(discriminator="kind"),
]


class FluentRule(BaseModel):
    """A convenience operation on ``receiver`` that forwards to ``delegate``.

    ``bindings`` maps delegate parameter names to the expression that
    supplies them; every other delegate parameter is left to the caller.
    """

    model_config = ConfigDict(frozen=True)

    receiver: str
    name: str
    delegate: str
    bindings: dict[str, Binding] = Field(default_factory=dict)


class RuleSet(BaseModel):
    """The complete static configuration of one generation run.

    See :func:`botapigen.rules.default_rules` for the Bot API tables.
    """

    model_config = ConfigDict(frozen=True)

    value_types: tuple[ValueTypeRule, ...] = ()
    variations: tuple[MethodVariationRule, ...] = ()
    fluent_methods: tuple[FluentRule, ...] = ()
    discriminator_field_names: tuple[str, ...] = ("type", "status")
    structural_blocklist: tuple[str, ...] = ("description",)
    explicit_marker_unions: tuple[str, ...] = ()
    event_envelope_type: Optional[str] = None

    def value_type(self, name: str) -> Optional[ValueTypeRule]:
        for rule in self.value_types:
            if rule.name == name:
                return rule
        return None


# --- Resolution output ---


class DiscriminatorStrategy(str, enum.Enum):
    """How the members of a union are told apart when decoding a payload."""

    EXPLICIT_FIELD = "explicit_field"
    STRUCTURAL = "structural"


class UnionMember(BaseModel):
    """One member of a resolved union.

    For the explicit-field strategy ``tag`` is the literal value of the
    shared discriminator field (``None`` for allow-listed unions). For the
    structural strategy ``discriminator_field`` is the wire name unique to
    this member among its siblings.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    discriminator_field: Optional[str] = None
    tag: Optional[str] = None


class UnionResolution(BaseModel):
    """A union type with its members and the chosen discriminator strategy."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    strategy: DiscriminatorStrategy
    discriminator_field: Optional[str] = Field(
        default=None, description="Shared wire name under the explicit-field strategy"
    )
    keeps_discriminator: bool = Field(
        default=False,
        description="Members keep the discriminator as an ordinary field",
    )
    members: tuple[UnionMember, ...] = ()

    def tag_groups(self) -> list[tuple[str, list[str]]]:
        """``(tag, member names)`` in first-appearance order.

        Several members may state the same tag (``InlineQueryResultPhoto``
        and ``InlineQueryResultCachedPhoto`` are both ``"photo"``); they
        share one group and are told apart by their fields.
        """
        groups: dict[str, list[str]] = {}
        for member in self.members:
            if member.tag is not None:
                groups.setdefault(member.tag, []).append(member.name)
        return list(groups.items())

    @property
    def has_shared_tags(self) -> bool:
        return any(len(names) > 1 for _, names in self.tag_groups())

    def select(self, payload: Mapping[str, Any]) -> UnionMember:
        """Pick the member a raw payload decodes to.

        Structural unions test for each member's discriminator key in
        declaration order and take the first hit; explicit-field unions
        compare the tag value, taking the first declared member when
        several share it.

        Raises:
            ValueError: If no member matches.
        """
        for member in self.members:
            if self.strategy == DiscriminatorStrategy.STRUCTURAL:
                if member.discriminator_field in payload:
                    return member
            elif (
                self.discriminator_field is not None
                and member.tag is not None
                and payload.get(self.discriminator_field) == member.tag
            ):
                return member
        raise ValueError(f"Failed to deserialize {self.name}: {dict(payload)!r}")


class EventKind(BaseModel):
    """One sibling of the event envelope: a single optional payload field."""

    model_config = ConfigDict(frozen=True)

    tag: str = Field(description="Wire name of the payload field")
    enum_name: str
    record_name: str
    field: ApiField


class EventEnvelope(BaseModel):
    """The flat incoming-event record resolved into one record per event kind."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    enum_name: str
    common_fields: tuple[ApiField, ...] = ()
    kinds: tuple[EventKind, ...] = ()

    def select(self, payload: Mapping[str, Any]) -> EventKind:
        """Return the event kind whose payload key is present in *payload*.

        Exactly one known key must be present; an absent or ambiguous payload
        is rejected instead of guessing a priority.

        Raises:
            ValueError: If zero or several event keys are present.
        """
        present = [kind for kind in self.kinds if kind.tag in payload]
        if len(present) != 1:
            raise ValueError(f"Failed to deserialize {self.name} type: {dict(payload)!r}")
        return present[0]


class FluentMethod(BaseModel):
    """A synthesized convenience operation bound to a receiver type."""

    model_config = ConfigDict(frozen=True)

    receiver: str
    name: str
    delegate: MethodElement
    bindings: dict[str, Binding] = Field(default_factory=dict)
    parameters: tuple[ApiField, ...] = ()

    def call_arguments(self) -> list[tuple[ApiField, Optional[Binding]]]:
        """Delegate parameters in declaration order, each with its binding (if bound)."""
        return [(p, self.bindings.get(p.name)) for p in self.delegate.parameters]


class ResolvedModel(BaseModel):
    """Everything the emitter needs, computed once by :func:`~botapigen.resolver.resolve_model`."""

    model_config = ConfigDict(frozen=True)

    api: ApiModel
    rules: RuleSet
    value_types: dict[str, dict[str, str]] = Field(
        default_factory=dict, description="owner -> wire name -> wrapper type"
    )
    unions: tuple[UnionResolution, ...] = ()
    union_parents: dict[str, str] = Field(default_factory=dict)
    envelope: Optional[EventEnvelope] = None
    methods: tuple[MethodElement, ...] = ()
    fluent_methods: tuple[FluentMethod, ...] = ()
    skipped_fluent_rules: tuple[FluentRule, ...] = ()

    def effective_type(self, owner: str, field: ApiField) -> str:
        """The wrapper type assigned to *field*, or its raw declared type."""
        return self.value_types.get(owner, {}).get(field.wire_name, field.declared_type)

    def union(self, name: str) -> Optional[UnionResolution]:
        for resolution in self.unions:
            if resolution.name == name:
                return resolution
        return None

    def parent_union(self, member: str) -> Optional[UnionResolution]:
        parent = self.union_parents.get(member)
        return self.union(parent) if parent is not None else None

    def is_elided(self, owner: str, field: ApiField) -> bool:
        """Whether *field* is a discriminator re-derived from the union tag."""
        parent = self.parent_union(owner)
        return (
            parent is not None
            and parent.strategy == DiscriminatorStrategy.EXPLICIT_FIELD
            and not parent.keeps_discriminator
            and parent.discriminator_field == field.wire_name
        )

    def visible_fields(self, element: TypeElement) -> list[ApiField]:
        return [f for f in element.fields or () if not self.is_elided(element.name, f)]

    def tag_of(self, member: str) -> Optional[str]:
        parent = self.parent_union(member)
        if parent is None:
            return None
        for m in parent.members:
            if m.name == member:
                return m.tag
        return None

    def method(self, name: str) -> Optional[MethodElement]:
        """Return the expanded method called *name*, or ``None``."""
        for m in self.methods:
            if m.name == name:
                return m
        return None

    def signature(self, name: str) -> tuple[list[tuple[str, str, bool]], str]:
        """Final ``([(param, type, optional), ...], return_type)`` of a method.

        Raises:
            KeyError: If no expanded method is called *name*.
        """
        method = self.method(name)
        if method is None:
            raise KeyError(name)
        params = [
            (p.name, self.effective_type(method.api_name, p), p.is_optional)
            for p in method.parameters
        ]
        return params, method.return_type
