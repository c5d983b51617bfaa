"""Render a :class:`~botapigen.models.ResolvedModel` into Python source files.

All naming and typing decisions are made here, in Python, and handed to
the Jinja2 templates as plain view dictionaries; the templates only lay
the text out. The output is a pure function of the resolved model and the
generator config, so two runs over the same input are byte-identical.

Generated package layout:

* ``types.py`` -- wrapper types, records in declaration order (with the
  event envelope at its position), then union aliases.
* ``requests.py`` -- one request body record per method with parameters.
* ``methods.py`` -- ``try_<name>`` / ``<name>`` per expanded operation.
* ``fluent.py`` -- receiver-bound convenience functions.
* ``__init__.py`` -- re-exports and a client factory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from botapigen import __version__
from botapigen.models import (
    ApiField,
    Binding,
    DiscriminatorStrategy,
    EventEnvelope,
    FieldPathBinding,
    FluentMethod,
    GeneratorConfig,
    LiteralBinding,
    MethodElement,
    ReceiverBinding,
    ResolvedModel,
    TypeElement,
    UnionResolution,
)
from botapigen.naming import loud_snake_case, pascal_case, snake_case
from botapigen.output import debug

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``emitter/templates/``)."""

_TEMPLATES = {
    "types.py": "types.py.j2",
    "requests.py": "requests.py.j2",
    "methods.py": "methods.py.j2",
    "fluent.py": "fluent.py.j2",
    "__init__.py": "__init__.py.j2",
}

_DOC_INDENT = "    "


def render_package(resolved: ResolvedModel, config: GeneratorConfig) -> dict[str, str]:
    """Render every file of the generated package.

    Returns:
        ``relative file name -> source text``, in a fixed order.
    """
    env = _create_jinja_env()
    context = _build_context(resolved, config)

    files: dict[str, str] = {}
    for filename, template_name in _TEMPLATES.items():
        files[filename] = env.get_template(template_name).render(**context)
        debug(f"Rendered {filename} ({len(files[filename].splitlines())} lines)")
    files["py.typed"] = ""
    return files


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for the Python source templates.

    Autoescape is off (the output is Python, not HTML) and undefined
    variables fail loudly instead of rendering as empty strings.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


# --- Docstrings ---


def escape_docstring(text: str) -> str:
    """Make one line of *text* safe inside a triple-double-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def format_docstring(
    text: str,
    sections: tuple[tuple[str, list[tuple[str, str]]], ...] = (),
    depth: int = 1,
) -> str:
    """Build an indented docstring literal, or ``""`` when there is nothing to say.

    *sections* are Google-style blocks such as ``("Args", [(name, doc), ...])``;
    entries without documentation are left out.
    """
    lines = text.strip().splitlines()
    for title, entries in sections:
        documented = [(name, doc.strip()) for name, doc in entries if doc.strip()]
        if not documented:
            continue
        if lines:
            lines.append("")
        lines.append(f"{title}:")
        for name, doc in documented:
            first, *rest = doc.splitlines()
            lines.append(f"{_DOC_INDENT}{name}: {first}")
            lines.extend(f"{_DOC_INDENT * 2}{line}" if line.strip() else "" for line in rest)

    if not lines:
        return ""

    pad = _DOC_INDENT * depth
    lines = [escape_docstring(line.rstrip()) for line in lines]
    if len(lines) == 1 and not lines[0].endswith('"'):
        return f'{pad}"""{lines[0]}"""'
    body = [f"{pad}{line}" if line else "" for line in lines[1:]]
    return "\n".join([f'{pad}"""{lines[0]}', *body, f'{pad}"""'])


# --- Context building ---


def _build_context(resolved: ResolvedModel, config: GeneratorConfig) -> dict[str, Any]:
    value_types = [
        {
            "name": rule.name,
            "primitive": rule.backing_primitive,
            "doc": format_docstring(rule.doc_string or ""),
        }
        for rule in resolved.rules.value_types
    ]

    blocks: list[dict[str, Any]] = []
    records: list[str] = []
    envelope = resolved.envelope
    for element in resolved.api.types:
        if envelope is not None and element.name == envelope.name:
            blocks.append(_envelope_view(resolved, envelope))
            records.extend(kind.record_name for kind in envelope.kinds)
        elif element.fields is not None:
            blocks.append(_record_view(resolved, element))
            records.append(element.name)

    unions = [_union_view(resolved, union) for union in resolved.unions]

    requests = [
        _request_view(resolved, method) for method in resolved.api.methods if method.parameters
    ]
    request_names = {r["api_name"]: r["name"] for r in requests}

    methods = [_method_view(resolved, method, request_names) for method in resolved.methods]
    fluent = [_fluent_view(resolved, fm) for fm in resolved.fluent_methods]
    delegates = list(dict.fromkeys(f["delegate"] for f in fluent))

    type_exports = [v["name"] for v in value_types]
    if envelope is not None:
        type_exports.append(envelope.enum_name)
    type_exports.extend(records)
    if envelope is not None:
        type_exports.extend([envelope.name, _selector_name(envelope.name)])
    type_exports.extend(u["name"] for u in unions)

    return {
        "version": __version__,
        "package_name": config.package_name,
        "api_url": config.api_url,
        "value_types": value_types,
        "blocks": blocks,
        "records": records,
        "unions": unions,
        "type_exports": type_exports,
        "requests": requests,
        "methods": methods,
        "fluent": fluent,
        "delegates": delegates,
    }


def _selector_name(envelope: str) -> str:
    return f"select_{snake_case(envelope)}"


def _annotation(type_expr: str, optional: bool) -> str:
    return f"Optional[{type_expr}]" if optional else type_expr


def _field_line(resolved: ResolvedModel, owner: str, field: ApiField) -> str:
    """``name: annotation[ = default]`` for a record field, aliased when renamed."""
    line = f"{field.name}: {_annotation(resolved.effective_type(owner, field), field.is_optional)}"
    default = repr(field.default_value) if field.is_optional else None

    if field.name != field.wire_name:
        args = [f"default={default}"] if default is not None else []
        args.append(f"alias={json.dumps(field.wire_name)}")
        return f"{line} = Field({', '.join(args)})"
    if default is not None:
        return f"{line} = {default}"
    return line


def _param_line(resolved: ResolvedModel, owner: str, param: ApiField) -> str:
    line = f"{param.name}: {_annotation(resolved.effective_type(owner, param), param.is_optional)}"
    if param.is_optional:
        line += f" = {param.default_value!r}"
    return line


def _record_view(resolved: ResolvedModel, element: TypeElement) -> dict[str, Any]:
    fields = resolved.visible_fields(element)
    body: list[str] = []

    parent = resolved.parent_union(element.name)
    tag = resolved.tag_of(element.name)
    if parent is not None and tag is not None and parent.discriminator_field is not None:
        discriminator = element.field(parent.discriminator_field)
        name = discriminator.name if discriminator is not None else parent.discriminator_field
        body.append(f"{name}: Literal[{json.dumps(tag)}] = {json.dumps(tag)}")

    body.extend(_field_line(resolved, element.name, f) for f in fields)

    return {
        "kind": "record",
        "name": element.name,
        "doc": format_docstring(
            element.description,
            (("Attributes", [(f.name, f.description) for f in fields]),),
        ),
        "body": body,
    }


def _envelope_view(resolved: ResolvedModel, envelope: EventEnvelope) -> dict[str, Any]:
    common = [_field_line(resolved, envelope.name, f) for f in envelope.common_fields]
    return {
        "kind": "envelope",
        "name": envelope.name,
        "enum_name": envelope.enum_name,
        "enum_doc": format_docstring(f"Kinds of {envelope.name} this bot can receive."),
        "type_property": f"{snake_case(envelope.name)}_type",
        "kinds_name": f"_{loud_snake_case(envelope.name)}_KINDS",
        "tag_function": f"_{snake_case(envelope.name)}_tag",
        "selector": _selector_name(envelope.name),
        "alias_doc": format_docstring(envelope.description, depth=0),
        "body": common,
        "kinds": [
            {
                "tag": kind.tag,
                "member": kind.enum_name,
                "record": kind.record_name,
                "doc": format_docstring(kind.field.description),
                "field": _field_line(resolved, envelope.name, kind.field),
            }
            for kind in envelope.kinds
        ],
    }


def _union_view(resolved: ResolvedModel, union: UnionResolution) -> dict[str, Any]:
    attribute = union.discriminator_field
    if union.members and attribute is not None:
        element = resolved.api.get_type(union.members[0].name)
        field = element.field(attribute) if element is not None else None
        if field is not None:
            attribute = field.name

    if len(union.members) == 1:
        style = "single"
    elif union.strategy == DiscriminatorStrategy.STRUCTURAL:
        style = "structural"
    elif union.keeps_discriminator:
        style = "plain"
    elif union.has_shared_tags:
        style = "grouped"
    else:
        style = "tagged"

    return {
        "name": union.name,
        "doc": format_docstring(union.description, depth=0),
        "style": style,
        "discriminator": union.discriminator_field,
        "attribute": attribute,
        "tag_function": f"_{snake_case(union.name)}_tag",
        "members": [{"name": m.name, "key": m.discriminator_field} for m in union.members],
        "groups": [{"tag": tag, "members": names} for tag, names in union.tag_groups()],
    }


def _request_view(resolved: ResolvedModel, method: MethodElement) -> dict[str, Any]:
    return {
        "name": f"{pascal_case(method.api_name)}Request",
        "api_name": method.api_name,
        "doc": format_docstring(f"Request body for ``{method.api_name}``."),
        "body": [_field_line(resolved, method.api_name, p) for p in method.parameters],
    }


def _method_view(
    resolved: ResolvedModel, method: MethodElement, request_names: dict[str, str]
) -> dict[str, Any]:
    name = snake_case(method.name)
    args = [(p.name, p.description) for p in method.parameters]
    return {
        "name": name,
        "try_name": f"try_{name}",
        "api_name": method.api_name,
        "try_doc": format_docstring(
            f"Call ``{method.api_name}`` and return the response envelope.\n\n"
            f"See :func:`{name}`.",
        ),
        "doc": format_docstring(
            method.description,
            (("Args", args), ("Raises", [("BotApiException", "If the call fails.")])),
        ),
        "params": [_param_line(resolved, method.api_name, p) for p in method.parameters],
        "arguments": [p.name for p in method.parameters],
        "request": request_names.get(method.api_name) if method.parameters else None,
        "returns": method.return_type,
    }


def _binding_expr(binding: Binding) -> str:
    if isinstance(binding, ReceiverBinding):
        return "receiver"
    if isinstance(binding, FieldPathBinding):
        return ".".join(("receiver", *binding.path))
    if isinstance(binding, LiteralBinding):
        return repr(binding.value)
    raise TypeError(f"Unknown binding {binding!r}")


def _bound_type(
    resolved: ResolvedModel, receiver: str, binding: Binding
) -> tuple[Optional[str], bool]:
    """Effective type of a receiver-derived binding and whether it may be ``None``."""
    if isinstance(binding, ReceiverBinding):
        return receiver, False
    if not isinstance(binding, FieldPathBinding):
        return None, False

    owner, type_, optional = receiver, None, False
    for segment in binding.path:
        element = resolved.api.get_type(owner)
        field = element.field_by_name(segment) if element is not None else None
        if field is None:
            return None, False
        type_ = resolved.effective_type(owner, field)
        optional = optional or field.is_optional
        owner = field.declared_type
    return type_, optional


def _argument_expr(
    resolved: ResolvedModel, fluent: FluentMethod, param: ApiField, binding: Binding
) -> str:
    """The bound value, unwrapped when the delegate expects something other than its wrapper."""
    expr = _binding_expr(binding)
    bound_type, optional = _bound_type(resolved, fluent.receiver, binding)
    if bound_type is None or resolved.rules.value_type(bound_type) is None:
        return expr
    if bound_type == resolved.effective_type(fluent.delegate.api_name, param):
        return expr
    if optional:
        return f"({expr}.root if {expr} is not None else None)"
    return f"{expr}.root"


def _fluent_view(resolved: ResolvedModel, fluent: FluentMethod) -> dict[str, Any]:
    delegate = fluent.delegate
    delegate_name = snake_case(delegate.name)

    arguments: list[str] = []
    bound: list[str] = []
    for param, binding in fluent.call_arguments():
        if binding is None:
            arguments.append(f"{param.name}={param.name}")
        else:
            arguments.append(f"{param.name}={_argument_expr(resolved, fluent, param, binding)}")
            bound.append(f"{param.name}={_binding_expr(binding)}")

    summary = f"Call ``{delegate_name}``"
    summary += f" with {', '.join(bound)}." if bound else "."
    return {
        "name": f"{snake_case(fluent.receiver)}_{snake_case(fluent.name)}",
        "receiver": fluent.receiver,
        "delegate": delegate_name,
        "doc": format_docstring(summary),
        "params": [_param_line(resolved, delegate.api_name, p) for p in fluent.parameters],
        "arguments": arguments,
        "returns": delegate.return_type,
    }
