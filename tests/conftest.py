"""Shared test fixtures for botapigen.

Provides reusable fixtures for loading the raw-model fixture, resolving it
with the default rule tables, creating isolated config environments,
managing output state, and running CLI commands. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import pytest
import yaml

from botapigen.models import ApiModel, GeneratorConfig, ResolvedModel, RuleSet
from botapigen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
MINI_API = FIXTURES_DIR / "mini_api.yaml"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mini_api_path() -> Path:
    return MINI_API


@pytest.fixture
def mini_raw() -> dict[str, Any]:
    """The raw mini Bot API document as a plain dict."""
    with open(MINI_API, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def mini_api(mini_raw: dict[str, Any]) -> ApiModel:
    from botapigen.parser import extract_model

    return extract_model(mini_raw)


@pytest.fixture
def default_rules() -> RuleSet:
    from botapigen.rules import default_rules

    return default_rules()


@pytest.fixture
def resolved(mini_api: ApiModel, default_rules: RuleSet) -> ResolvedModel:
    """The mini Bot API resolved with the default rule tables."""
    from botapigen.resolver import resolve_model

    return resolve_model(mini_api, default_rules)


# ---------------------------------------------------------------------------
# Generated package fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def build_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Any:
    """Factory that renders and imports a generated client package.

    Each call writes under its own import name so that module caching never
    leaks one package into another; all of them are unloaded at teardown.
    """
    from botapigen.emitter import render_package, write_package

    monkeypatch.syspath_prepend(str(tmp_path))
    built: list[str] = []

    def build(resolved: ResolvedModel) -> Any:
        package_name = f"tbot_api_{abs(hash(str(tmp_path))) % 10**8}_{len(built)}"
        config = GeneratorConfig(package_name=package_name, output_dir=str(tmp_path))
        write_package(render_package(resolved, config), tmp_path / package_name)
        built.append(package_name)
        importlib.invalidate_caches()
        return importlib.import_module(package_name)

    yield build

    for name in list(sys.modules):
        if any(name == p or name.startswith(f"{p}.") for p in built):
            del sys.modules[name]


@pytest.fixture
def generated_package(resolved: ResolvedModel, build_package: Any) -> Any:
    """The generated client package for the mini API, imported."""
    return build_package(resolved)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all BOTAPIGEN_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("botapigen.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["BOTAPIGEN_PACKAGE", "BOTAPIGEN_OUTPUT_DIR", "BOTAPIGEN_API_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
