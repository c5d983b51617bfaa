"""Union hierarchy discovery and discriminator strategy selection.

Two strategies exist for telling union members apart:

* **Explicit field** -- every member carries a field with one of the
  recognised discriminator names (``type``, ``status``) whose description
  states the literal value, e.g. *The member's status in the chat, always
  "creator"*.
* **Structural** -- no member carries such a field; each member is
  recognised by the presence of a key that none of its siblings use.

The event envelope (``Update``) is a third, specialised form: a single
flat record whose optional fields are mutually exclusive payloads.
"""

from __future__ import annotations

import re
from typing import Optional

from botapigen.exceptions import (
    AmbiguousDiscriminatorError,
    MissingDiscriminatorError,
    MissingSpecialTypeError,
    MissingTagLiteralError,
    UnknownUnionMemberError,
)
from botapigen.models import (
    ApiField,
    ApiModel,
    DiscriminatorStrategy,
    EventEnvelope,
    EventKind,
    RuleSet,
    TypeElement,
    UnionMember,
    UnionResolution,
)
from botapigen.naming import loud_snake_case, pascal_case
from botapigen.output import debug

_TAG_LITERAL_RE = re.compile(r"(?:must be|always) [\"“”]?([\w_]+)[\"“”]?")

# Envelope description lines that only restate the one-of constraint.
_ENVELOPE_NOTE_PREFIX = "At most one of the optional parameters"


def collect_union_types(api: ApiModel) -> dict[str, tuple[TypeElement, ...]]:
    """Map every union name to its member elements, in declaration order.

    Raises:
        UnknownUnionMemberError: If a union lists a type absent from *api*.
    """
    unions: dict[str, tuple[TypeElement, ...]] = {}
    for element in api.types:
        if element.union_members is None:
            continue
        members = []
        for name in element.union_members:
            member = api.get_type(name)
            if member is None:
                raise UnknownUnionMemberError(element.name, name)
            members.append(member)
        unions[element.name] = tuple(members)
    return unions


def union_parents(unions: dict[str, tuple[TypeElement, ...]]) -> dict[str, str]:
    """Map each union member to its parent union; the first declaring union wins."""
    parents: dict[str, str] = {}
    for union_name, members in unions.items():
        for member in members:
            parents.setdefault(member.name, union_name)
    return parents


def extract_tag_literal(member: str, field: ApiField) -> str:
    """Extract the tag value stated in a discriminator field's description.

    Raises:
        MissingTagLiteralError: If the description states no value.
    """
    match = _TAG_LITERAL_RE.search(field.description)
    if match is None:
        raise MissingTagLiteralError(member, field.wire_name, field.description)
    return match.group(1)


def _discriminator_field(member: TypeElement, rules: RuleSet) -> Optional[ApiField]:
    for field in member.fields or ():
        if field.wire_name in rules.discriminator_field_names:
            return field
    return None


def _wire_names(member: TypeElement) -> list[str]:
    return [f.wire_name for f in member.fields or ()]


def _resolve_explicit(
    union: TypeElement, members: tuple[TypeElement, ...], field_name: str, rules: RuleSet
) -> UnionResolution:
    keeps = union.name in rules.explicit_marker_unions
    resolved: list[UnionMember] = []
    tags: dict[str, str] = {}

    for member in members:
        field = member.field(field_name)
        if field is None:
            if keeps:
                resolved.append(UnionMember(name=member.name))
                continue
            raise MissingDiscriminatorError(
                union.name, member.name, _wire_names(member), f"no '{field_name}' field"
            )
        if keeps:
            resolved.append(UnionMember(name=member.name, discriminator_field=field_name))
            continue

        tag = extract_tag_literal(member.name, field)
        if tag in tags:
            debug(f"Union {union.name}: {member.name} shares tag '{tag}' with {tags[tag]}")
        tags.setdefault(tag, member.name)
        resolved.append(UnionMember(name=member.name, discriminator_field=field_name, tag=tag))

    return UnionResolution(
        name=union.name,
        description=union.description,
        strategy=DiscriminatorStrategy.EXPLICIT_FIELD,
        discriminator_field=field_name,
        keeps_discriminator=keeps,
        members=tuple(resolved),
    )


def _resolve_structural(
    union: TypeElement, members: tuple[TypeElement, ...], rules: RuleSet
) -> UnionResolution:
    resolved: list[UnionMember] = []
    for member in members:
        sibling_names = {
            name
            for sibling in members
            if sibling.name != member.name
            for name in _wire_names(sibling)
        }
        unique = next(
            (
                f.wire_name
                for f in member.fields or ()
                if f.wire_name not in sibling_names
                and f.wire_name not in rules.structural_blocklist
            ),
            None,
        )
        if unique is None:
            raise MissingDiscriminatorError(
                union.name, member.name, _wire_names(member), "no field unique among siblings"
            )
        resolved.append(UnionMember(name=member.name, discriminator_field=unique))

    return UnionResolution(
        name=union.name,
        description=union.description,
        strategy=DiscriminatorStrategy.STRUCTURAL,
        members=tuple(resolved),
    )


def resolve_union(
    union: TypeElement, members: tuple[TypeElement, ...], rules: RuleSet
) -> UnionResolution:
    """Pick and apply the discriminator strategy of one union.

    Raises:
        AmbiguousDiscriminatorError: If members use several discriminator names.
        MissingDiscriminatorError: If a member cannot be told apart.
        MissingTagLiteralError: If a tag value cannot be extracted.
    """
    names: list[str] = []
    for member in members:
        field = _discriminator_field(member, rules)
        if field is not None and field.wire_name not in names:
            names.append(field.wire_name)

    if len(names) > 1:
        raise AmbiguousDiscriminatorError(union.name, names)
    if names:
        resolution = _resolve_explicit(union, members, names[0], rules)
    else:
        resolution = _resolve_structural(union, members, rules)

    debug(f"Union {union.name}: {resolution.strategy.value}, {len(members)} members")
    return resolution


def resolve_unions(api: ApiModel, rules: RuleSet) -> tuple[UnionResolution, ...]:
    """Resolve every union of *api*, in declaration order."""
    unions = collect_union_types(api)
    return tuple(
        resolve_union(element, unions[element.name], rules)
        for element in api.types
        if element.is_union
    )


def resolve_event_envelope(api: ApiModel, rules: RuleSet) -> Optional[EventEnvelope]:
    """Split the configured envelope record into one sibling per optional field.

    Returns:
        ``None`` when the rule set configures no envelope type.

    Raises:
        MissingSpecialTypeError: If the envelope type is absent, is a union,
            or has no optional fields.
    """
    name = rules.event_envelope_type
    if name is None:
        return None

    element = api.get_type(name)
    if element is None:
        raise MissingSpecialTypeError(name)
    if element.fields is None:
        raise MissingSpecialTypeError(name, "must be a record, not a union")

    common = tuple(f for f in element.fields if not f.is_optional)
    kinds = tuple(
        EventKind(
            tag=f.wire_name,
            enum_name=loud_snake_case(f.wire_name),
            record_name=pascal_case(f.wire_name) + name,
            field=f.model_copy(
                update={
                    "is_optional": False,
                    "default_value": None,
                    "description": f.description.removeprefix("Optional.").strip(),
                }
            ),
        )
        for f in element.fields
        if f.is_optional
    )
    if not kinds:
        raise MissingSpecialTypeError(name, "declares no optional event fields")

    description = "\n".join(
        line for line in element.description.split("\n")
        if not line.startswith(_ENVELOPE_NOTE_PREFIX)
    ).strip()

    debug(f"Event envelope {name}: {len(kinds)} kinds")
    return EventEnvelope(
        name=name,
        description=description,
        enum_name=f"{name}Type",
        common_fields=common,
        kinds=kinds,
    )
