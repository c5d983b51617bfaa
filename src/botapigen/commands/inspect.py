"""Inspect commands -- examine how a raw model resolves.

Provides the ``botapigen inspect`` sub-command group with read-only views
of the resolution pipeline: the declared types, the expanded methods with
their final signatures, union discriminator strategies, value-type
assignments and synthesized fluent methods. Every sub-command takes the
raw model source and prints a table (or JSON with ``--json``) to stdout.
"""

from __future__ import annotations

import typer

from botapigen.commands.generate import fail, resolve_source
from botapigen.exceptions import BotApiGenError
from botapigen.models import (
    DiscriminatorStrategy,
    FieldPathBinding,
    LiteralBinding,
    ReceiverBinding,
    ResolvedModel,
)
from botapigen.output import get_output, warning

inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_HELP = "Raw model document: file path, http(s) URL, or '-' for stdin."


def _load(source: str) -> ResolvedModel:
    try:
        return resolve_source(source)
    except BotApiGenError as exc:
        raise fail(exc) from None


@inspect_app.command("types")
def inspect_types(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List declared types with their kind and parent union.

    Example::

        botapigen inspect types botapi.yaml
    """
    resolved = _load(source)
    envelope = resolved.envelope

    rows: list[list[str]] = []
    for element in resolved.api.types:
        if envelope is not None and element.name == envelope.name:
            kind, size = "envelope", f"{len(envelope.kinds)} kinds"
        elif element.is_union:
            kind, size = "union", f"{len(element.union_members or ())} members"
        else:
            kind, size = "record", f"{len(resolved.visible_fields(element))} fields"
        rows.append([element.name, kind, size, resolved.union_parents.get(element.name, "")])

    get_output().print_table(
        ["Type", "Kind", "Size", "Parent"], rows, title=f"Types ({len(rows)})"
    )


@inspect_app.command("methods")
def inspect_methods(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List operations after variation expansion, with final signatures.

    Example::

        botapigen inspect methods botapi.yaml --json
    """
    resolved = _load(source)

    rows: list[list[str]] = []
    for method in resolved.methods:
        params, returns = resolved.signature(method.name)
        signature = ", ".join(
            f"{name}: {type_}{' = None' if optional else ''}" for name, type_, optional in params
        )
        rows.append([method.name, method.api_name, signature or "-", returns])

    get_output().print_table(
        ["Method", "API name", "Parameters", "Returns"],
        rows,
        title=f"Methods ({len(rows)})",
    )


@inspect_app.command("unions")
def inspect_unions(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """Show each union's discriminator strategy and member tags.

    Explicit-field unions list ``member=tag``; structural unions list
    ``member[key]`` where *key* is the member's unique wire name.

    Example::

        botapigen inspect unions botapi.yaml
    """
    resolved = _load(source)

    rows: list[list[str]] = []
    for union in resolved.unions:
        if union.strategy == DiscriminatorStrategy.EXPLICIT_FIELD:
            members = [f"{m.name}={m.tag}" if m.tag else m.name for m in union.members]
            discriminator = union.discriminator_field or ""
            if union.keeps_discriminator:
                discriminator += " (kept)"
        else:
            members = [f"{m.name}[{m.discriminator_field}]" for m in union.members]
            discriminator = "-"
        rows.append([union.name, union.strategy.value, discriminator, ", ".join(members)])

    if resolved.envelope is not None:
        envelope = resolved.envelope
        rows.append(
            [
                envelope.name,
                "envelope",
                envelope.enum_name,
                ", ".join(f"{k.record_name}[{k.tag}]" for k in envelope.kinds),
            ]
        )

    get_output().print_table(
        ["Union", "Strategy", "Discriminator", "Members"], rows, title=f"Unions ({len(rows)})"
    )


@inspect_app.command("value-types")
def inspect_value_types(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List every field and parameter that was given a wrapper type.

    Example::

        botapigen inspect value-types botapi.yaml
    """
    resolved = _load(source)

    rows = [
        [owner, wire_name, wrapper]
        for owner, fields in resolved.value_types.items()
        for wire_name, wrapper in fields.items()
    ]
    get_output().print_table(
        ["Owner", "Field", "Wrapper"], rows, title=f"Value types ({len(rows)})"
    )


@inspect_app.command("fluent")
def inspect_fluent(source: str = typer.Argument(help=_SOURCE_HELP)) -> None:
    """List synthesized fluent methods and the arguments they bind.

    Rules whose delegate method is missing from the model are reported as
    warnings on stderr.

    Example::

        botapigen inspect fluent botapi.yaml
    """
    resolved = _load(source)

    rows: list[list[str]] = []
    for fluent in resolved.fluent_methods:
        bound = []
        for key, binding in fluent.bindings.items():
            if isinstance(binding, ReceiverBinding):
                bound.append(f"{key}=<receiver>")
            elif isinstance(binding, FieldPathBinding):
                bound.append(f"{key}=.{'.'.join(binding.path)}")
            elif isinstance(binding, LiteralBinding):
                bound.append(f"{key}={binding.value!r}")
        rows.append([fluent.receiver, fluent.name, fluent.delegate.name, ", ".join(bound)])

    for rule in resolved.skipped_fluent_rules:
        warning(f"Skipped {rule.receiver}.{rule.name}: no method '{rule.delegate}'")

    get_output().print_table(
        ["Receiver", "Name", "Delegate", "Bindings"], rows, title=f"Fluent methods ({len(rows)})"
    )
