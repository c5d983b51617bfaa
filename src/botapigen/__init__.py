"""botapigen -- Generate a typed Python client for the Telegram Bot API.

This package converts a raw description of the Bot API (an ordered list of
type and method declarations) into an importable Python package: pydantic
records for every type, distinct wrapper types for identifiers, tagged
unions for polymorphic types, and one keyword-only function per method.

Typical workflow::

    botapigen inspect unions botapi.yaml        # review union strategies
    botapigen generate botapi.yaml -o src       # write src/tbot_api/
    botapigen check botapi.yaml -o src          # CI: fail if out of date

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser, rules, resolver, emitter: the generation pipeline.
    runtime: client support imported by generated packages.
"""

__version__ = "0.1.0"
