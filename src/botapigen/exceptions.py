"""Exception hierarchy for botapigen.

All exceptions inherit from :class:`BotApiGenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`botapigen.exit_codes`.
The top-level error handler in :func:`botapigen.app.main` catches
``BotApiGenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Every failure of the resolution pipeline is a construction-time invariant
violation. Those derive from :class:`ResolutionError` and keep the names of
the offending elements, fields and rules as attributes so that tests and
callers do not have to parse the message.

Subclass hierarchy::

    BotApiGenError (exit 1)
    +-- InvalidUsageError              (exit 2)
    +-- ConfigError                    (exit 1)
    +-- ModelParseError                (exit 7)
    +-- ResolutionError                (exit 8)
    |   +-- WrapperNameCollisionError
    |   +-- AmbiguousDiscriminatorError
    |   +-- MissingDiscriminatorError
    |   +-- MissingTagLiteralError
    |   +-- UnknownUnionMemberError
    |   +-- InvalidVariationError
    |   +-- InvalidFluentBindingError
    |   +-- MissingSpecialTypeError
    +-- OutputError                    (exit 9)
    +-- BotApiConnectionError          (exit 6)
    +-- BotApiException                (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from botapigen.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MODEL_PARSE_ERROR,
    EXIT_OUTPUT_ERROR,
    EXIT_RESOLUTION_ERROR,
)

if TYPE_CHECKING:
    from botapigen.runtime.response import BotApiResponse


class BotApiGenError(Exception):
    """Base exception for all botapigen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`botapigen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(BotApiGenError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(BotApiGenError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class ModelParseError(BotApiGenError):
    """Raised when the raw model document cannot be loaded or fails validation."""

    exit_code = EXIT_MODEL_PARSE_ERROR


class OutputError(BotApiGenError):
    """Raised when generated files cannot be written or differ from the committed copy."""

    exit_code = EXIT_OUTPUT_ERROR


# --- Resolution (construction-time invariant violations) ---


class ResolutionError(BotApiGenError):
    """Base class for invariant violations detected while resolving the model.

    Resolution errors abort the whole run before any file is written.
    """

    exit_code = EXIT_RESOLUTION_ERROR


class WrapperNameCollisionError(ResolutionError):
    """A declared type has the same name as a generated wrapper type."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"Type '{type_name}' collides with the value type of the same name; "
            f"rename the value-type rule or the declared type"
        )


class AmbiguousDiscriminatorError(ResolutionError):
    """The members of one union use more than one discriminator field name."""

    def __init__(self, union: str, field_names: list[str]) -> None:
        self.union = union
        self.field_names = field_names
        super().__init__(
            f"Union '{union}' has multiple discriminator field names: "
            f"{', '.join(field_names)}"
        )


class MissingDiscriminatorError(ResolutionError):
    """A union member has no field that can discriminate it from its siblings."""

    def __init__(self, union: str, member: str, field_names: list[str], reason: str) -> None:
        self.union = union
        self.member = member
        self.field_names = field_names
        super().__init__(
            f"Failed to find discriminator field for '{member}' in union '{union}' "
            f"({reason}); fields: [{', '.join(field_names)}]"
        )


class MissingTagLiteralError(ResolutionError):
    """The discriminator field description does not state the tag value."""

    def __init__(self, member: str, field: str, description: str) -> None:
        self.member = member
        self.field = field
        self.description = description
        super().__init__(
            f"Can't find union marker value for '{member}.{field}' in description: "
            f"'{description}'"
        )


class UnknownUnionMemberError(ResolutionError):
    """A union declares a member that is not a type of the model."""

    def __init__(self, union: str, member: str) -> None:
        self.union = union
        self.member = member
        super().__init__(f"Union '{union}' references unknown type '{member}'")


class InvalidVariationError(ResolutionError):
    """A method variation rule does not fit the method it is keyed to."""

    def __init__(self, method: str, variation: str, detail: str) -> None:
        self.method = method
        self.variation = variation
        super().__init__(f"Invalid variation '{variation}' of method '{method}': {detail}")


class InvalidFluentBindingError(ResolutionError):
    """A fluent rule binds arguments that the delegate method does not accept."""

    def __init__(
        self,
        receiver: str,
        name: str,
        delegate: str,
        detail: str,
        keys: Optional[list[str]] = None,
    ) -> None:
        self.receiver = receiver
        self.name = name
        self.delegate = delegate
        self.keys = keys or []
        super().__init__(f"Invalid fluent method {receiver}.{name} -> {delegate}: {detail}")


class MissingSpecialTypeError(ResolutionError):
    """A type that the generator handles specially is absent or malformed."""

    def __init__(self, type_name: str, detail: str = "not declared in the model") -> None:
        self.type_name = type_name
        super().__init__(f"Special type '{type_name}' {detail}")


# --- Runtime (raised by generated client code) ---


class BotApiConnectionError(BotApiGenError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_CONNECTION_ERROR


class BotApiException(BotApiGenError):
    """Raised when the Bot API answers a call with ``ok: false``.

    Args:
        response: The decoded response envelope. Its ``description`` and
            ``error_code`` are surfaced in the message.
    """

    def __init__(self, response: BotApiResponse[Any]) -> None:
        self.response = response
        self.error_code = response.error_code
        self.description = response.description
        super().__init__(
            f"Bot API request failed ({response.error_code}): {response.description}"
        )
