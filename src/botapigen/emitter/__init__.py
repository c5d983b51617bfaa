"""Code emission -- render resolved models to a Python package on disk.

* :mod:`~botapigen.emitter.renderer` -- Jinja2 rendering into an in-memory
  ``{filename: text}`` mapping.
* :mod:`~botapigen.emitter.writer` -- atomic directory replacement and the
  up-to-date check used in CI.
"""

from botapigen.emitter.renderer import render_package
from botapigen.emitter.writer import check_package, write_package

__all__ = ["render_package", "write_package", "check_package"]
