"""Built-in CLI sub-commands for botapigen.

This package groups the Typer sub-command modules that form the CLI's
command tree:

* :mod:`~botapigen.commands.generate` -- ``generate`` and ``check``.
* :mod:`~botapigen.commands.inspect` -- read-only views of the resolved model.
* :mod:`~botapigen.commands.config` -- view and modify global settings.

Single commands are plain callbacks registered on the root app;
multi-command groups export a :class:`typer.Typer` sub-application.
"""
