"""Config commands -- view and modify global configuration.

Provides the ``botapigen config`` sub-command group for reading and
updating the user's global configuration file
(:class:`~botapigen.models.GlobalConfig`), which holds the lowest
precedence defaults for the generated package name, output directory and
API server.
"""

from __future__ import annotations

import typer

from botapigen.exceptions import BotApiGenError, InvalidUsageError
from botapigen.output import error, info, print_json, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the generator settings after env vars and botapigen.json are applied.",
    ),
) -> None:
    """Show current configuration.

    Example::

        botapigen config show
        botapigen config show --effective --json
    """
    from botapigen.config import get_config_dir, load_global_config, resolve_config

    try:
        if effective:
            data = resolve_config().model_dump(mode="json")
        else:
            data = load_global_config().model_dump(mode="json")
    except BotApiGenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    print_json(data)


def _apply_setting(data: dict, key: str, value: str) -> object:
    """Store *value* under the dotted *key* of *data* and return the stored value."""
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    coerced: object = value
    if isinstance(target[final_key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    target[final_key] = coerced

    if keys == ["generator", "package_name"] and not value.isidentifier():
        raise InvalidUsageError(f"Package name '{value}' is not a valid Python identifier")
    return coerced


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'generator.package_name')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. Boolean fields accept
    ``true``/``1``/``yes``; everything else is stored as a string. The
    updated config is validated before saving.

    Raises:
        typer.Exit: With the :class:`~botapigen.exceptions.InvalidUsageError`
            exit code if the key path is invalid or validation fails.

    Example::

        botapigen config set generator.package_name mybot_api
        botapigen config set no_color true
    """
    from pydantic import ValidationError

    from botapigen.config import load_global_config, save_global_config
    from botapigen.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
        coerced = _apply_setting(data, key, value)
        try:
            new_config = GlobalConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Validation error: {exc}") from exc
    except BotApiGenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")
