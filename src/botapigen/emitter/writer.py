"""All-or-nothing output of a rendered package.

:func:`write_package` never leaves a half-written tree behind: files are
written into a temporary sibling directory which then replaces the target
directory. :func:`check_package` compares rendered files against what is
on disk, for CI jobs that verify the committed client is up to date.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from botapigen.exceptions import OutputError
from botapigen.output import debug


def write_package(files: dict[str, str], target: Path) -> list[Path]:
    """Replace the directory *target* with exactly *files*.

    Args:
        files: ``relative path -> text`` as returned by
            :func:`~botapigen.emitter.renderer.render_package`.
        target: The package directory, e.g. ``generated/tbot_api``.

    Returns:
        The written file paths, in *files* order.

    Raises:
        OutputError: If any file cannot be written or the swap fails. The
            previous contents of *target* are kept in that case.
    """
    target = Path(target)
    if target.exists() and not target.is_dir():
        raise OutputError(f"Output path {target} exists and is not a directory")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{target.name}.", dir=target.parent))
    except OSError as exc:
        raise OutputError(f"Cannot create output directory next to {target}: {exc}") from exc

    try:
        for relative, text in files.items():
            path = staging / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        _swap(staging, target)
    except OSError as exc:
        shutil.rmtree(staging, ignore_errors=True)
        raise OutputError(f"Failed to write package to {target}: {exc}") from exc

    debug(f"Wrote {len(files)} files to {target}")
    return [target / relative for relative in files]


def _swap(staging: Path, target: Path) -> None:
    """Move *staging* into place, keeping the old *target* until the move succeeds."""
    if not target.exists():
        os.replace(staging, target)
        return

    backup = Path(tempfile.mkdtemp(prefix=f".{target.name}.old.", dir=target.parent))
    backup.rmdir()
    os.replace(target, backup)
    try:
        os.replace(staging, target)
    except OSError:
        os.replace(backup, target)
        raise
    shutil.rmtree(backup, ignore_errors=True)


def check_package(files: dict[str, str], target: Path) -> list[str]:
    """Return the relative paths whose on-disk state differs from *files*.

    A file differs when it is missing, has other content, or exists under
    *target* without being part of *files*. An empty list means the
    package is up to date.
    """
    target = Path(target)
    stale: list[str] = []

    for relative, text in files.items():
        path = target / relative
        try:
            current = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            stale.append(relative)
            continue
        except OSError as exc:
            raise OutputError(f"Cannot read {path}: {exc}") from exc
        if current != text:
            stale.append(relative)

    if target.is_dir():
        for path in sorted(target.rglob("*")):
            if not path.is_file() or "__pycache__" in path.parts:
                continue
            relative = path.relative_to(target).as_posix()
            if relative not in files:
                stale.append(relative)

    return stale
