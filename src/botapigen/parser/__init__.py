"""Raw model parser -- load the front-end hand-off document and validate it.

This sub-package turns the document describing the Bot API's types and
methods (JSON or YAML, local file, remote URL or stdin) into an
:class:`~botapigen.models.ApiModel` that the resolver can consume.

Typical usage::

    from botapigen.parser import load_model, extract_model

    api = extract_model(load_model("botapi.yaml"))

Sub-modules:

* :mod:`~botapigen.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection.
* :mod:`~botapigen.parser.extractor` -- structural validation into the
  frozen raw model.
"""

from botapigen.parser.extractor import extract_model
from botapigen.parser.loader import load_model

__all__ = ["load_model", "extract_model"]
