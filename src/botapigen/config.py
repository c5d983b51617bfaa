"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for botapigen:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.botapigen/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~botapigen.models.GlobalConfig`
  JSON file storing user-wide generator defaults.
* **Project config** -- An optional ``./botapigen.json`` next to the raw
  model document, pinning the package name and output directory of one
  client library.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and global config into the
  effective :class:`~botapigen.models.GeneratorConfig`.

The rule tables are *not* configuration files: they are static data in
:mod:`botapigen.rules`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from botapigen.exceptions import ConfigError
from botapigen.models import GeneratorConfig, GlobalConfig

_APP_NAME = "botapigen"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "botapigen.json"

_ENV_OVERRIDES = {
    "package_name": "BOTAPIGEN_PACKAGE",
    "output_dir": "BOTAPIGEN_OUTPUT_DIR",
    "api_url": "BOTAPIGEN_API_URL",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/botapigen/`` (default ``~/.config/botapigen/``).
    On macOS/Windows: ``~/.botapigen/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/botapigen/`` (default ``~/.local/share/botapigen/``).
    On macOS/Windows: ``~/.botapigen/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~botapigen.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local generator settings from ``botapigen.json``.

    Args:
        directory: Directory to look in. Defaults to the current directory.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a JSON object or names unknown keys.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    unknown = sorted(set(data) - set(GeneratorConfig.model_fields))
    if unknown:
        raise ConfigError(f"Unknown keys in project config {path}: {', '.join(unknown)}")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_package: Optional[str] = None,
    cli_output_dir: Optional[str] = None,
    cli_api_url: Optional[str] = None,
) -> GeneratorConfig:
    """Resolve the generator config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--package``, ``--output``, ``--api-url``)
        2. Environment variables (``BOTAPIGEN_PACKAGE``,
           ``BOTAPIGEN_OUTPUT_DIR``, ``BOTAPIGEN_API_URL``)
        3. Project config (``./botapigen.json``)
        4. User config (``~/.config/botapigen/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer is invalid or the merged result fails
            validation (for example, a package name that is not an identifier).
    """
    # 5 + 4.
    merged: dict[str, Any] = load_global_config().generator.model_dump()

    # 3.
    project = load_project_config()
    if project is not None:
        merged.update(project)

    # 2.
    for key, env_var in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            merged[key] = value

    # 1.
    cli = {"package_name": cli_package, "output_dir": cli_output_dir, "api_url": cli_api_url}
    merged.update({k: v for k, v in cli.items() if v is not None})

    try:
        config = GeneratorConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid generator config: {exc}") from exc

    if not config.package_name.isidentifier():
        raise ConfigError(
            f"Package name '{config.package_name}' is not a valid Python identifier"
        )
    return config
