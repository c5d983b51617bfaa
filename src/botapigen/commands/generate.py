"""Generate commands -- render the client package, or check it is up to date.

``botapigen generate`` runs the whole pipeline (load, extract, resolve,
render) and replaces the output package in one step. ``botapigen check``
runs the same pipeline but only compares the rendered files with what is
on disk, which is what CI uses to catch a stale committed client.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from botapigen.exceptions import BotApiGenError, OutputError
from botapigen.models import GeneratorConfig, ResolvedModel
from botapigen.output import debug, error, info, print_data, success, suggest, warning

_SOURCE_HELP = "Raw model document: file path, http(s) URL, or '-' for stdin."


def resolve_source(source: str) -> ResolvedModel:
    """Load, extract and resolve the raw model at *source* with the default rules."""
    from botapigen.parser import extract_model, load_model
    from botapigen.resolver import resolve_model
    from botapigen.rules import default_rules

    debug(f"Loading model from {source}")
    api = extract_model(load_model(source))
    info(f"Parsed {len(api.types)} types and {len(api.methods)} methods")
    return resolve_model(api, default_rules())


def fail(exc: BotApiGenError) -> typer.Exit:
    """Report *exc* on stderr and return the matching ``typer.Exit``."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _render(
    source: str,
    package: Optional[str],
    output_dir: Optional[str],
    api_url: Optional[str],
) -> tuple[GeneratorConfig, dict[str, str], Path]:
    from botapigen.config import resolve_config
    from botapigen.emitter import render_package

    config = resolve_config(cli_package=package, cli_output_dir=output_dir, cli_api_url=api_url)
    resolved = resolve_source(source)
    for rule in resolved.skipped_fluent_rules:
        warning(
            f"Skipped fluent method {rule.receiver}.{rule.name}: "
            f"method '{rule.delegate}' is not in the model"
        )
    files = render_package(resolved, config)
    return config, files, Path(config.output_dir) / config.package_name


def generate_command(
    source: str = typer.Argument(help=_SOURCE_HELP),
    package: Optional[str] = typer.Option(
        None, "--package", "-p", help="Import name of the generated package."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory that receives the package directory."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Default Bot API server of the generated client."
    ),
) -> None:
    """Generate the client package from a raw model document.

    The package directory is replaced as a whole: either every file is
    written or the previous package is left untouched.

    Example::

        botapigen generate botapi.yaml
        botapigen generate botapi.json --package mybot_api --output src
    """
    from botapigen.emitter import write_package

    try:
        config, files, target = _render(source, package, output_dir, api_url)
        written = write_package(files, target)
    except BotApiGenError as exc:
        raise fail(exc) from None

    for path in written:
        print_data(str(path))
    success(f"Generated package '{config.package_name}' in {target}")


def check_command(
    source: str = typer.Argument(help=_SOURCE_HELP),
    package: Optional[str] = typer.Option(
        None, "--package", "-p", help="Import name of the generated package."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory that contains the package directory."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Default Bot API server of the generated client."
    ),
) -> None:
    """Check that the generated package on disk matches the raw model.

    Prints the out-of-date files to stdout and exits with code 9 when
    any file differs.

    Example::

        botapigen check botapi.yaml --output src
    """
    from botapigen.emitter import check_package

    try:
        _, files, target = _render(source, package, output_dir, api_url)
        stale = check_package(files, target)
        if stale:
            for relative in stale:
                print_data(relative)
            raise OutputError(f"{len(stale)} file(s) in {target} are out of date")
    except OutputError as exc:
        exit_ = fail(exc)
        suggest(f"Run: botapigen generate {source} to refresh the package")
        raise exit_ from None
    except BotApiGenError as exc:
        raise fail(exc) from None

    success(f"{target} is up to date")
