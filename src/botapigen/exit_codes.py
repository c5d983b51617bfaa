"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~botapigen.exceptions.BotApiGenError` subclass.
CI jobs that regenerate the client library can inspect the exit code to
tell a broken model document apart from a rule-table inconsistency
without parsing stderr.

Example::

    $ botapigen check api.yaml --output ./tbot
    $ echo $?
    9   # EXIT_OUTPUT_ERROR -- generated files differ from the committed copy
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_MODEL_PARSE_ERROR = 7
"""The raw model document could not be loaded, parsed, or validated."""

EXIT_RESOLUTION_ERROR = 8
"""A construction-time invariant was violated while resolving the model."""

EXIT_OUTPUT_ERROR = 9
"""Generated output could not be written, or differs from the existing copy."""
