"""Exception hierarchy for resting.

All exceptions inherit from :class:`RestingError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`resting.exit_codes`.
Every fallible step of the request pipeline raises one of these types; none
of them is logged and discarded along the way.

Subclass hierarchy::

    RestingError (exit 1)
    +-- ConfigurationError  (exit 2)
    +-- ConstructionError   (exit 5)
    +-- BodyReadError       (exit 5)
    +-- TransportError      (exit 6)
    +-- ParseError          (exit 7)
    +-- DecodeError         (exit 8)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from resting.exit_codes import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_PARSE_ERROR,
    EXIT_RESPONSE_ERROR,
    EXIT_TRANSPORT_ERROR,
)

if TYPE_CHECKING:
    from resting.models import TransformationType


class RestingError(Exception):
    """Base exception for all resting errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`resting.exit_codes`. The CLI entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(RestingError):
    """Raised when required configuration is missing or invalid (alias map, payload, port)."""

    exit_code = EXIT_CONFIGURATION_ERROR


class ConstructionError(RestingError):
    """Raised when a :class:`~resting.component.response.ServiceResponse` cannot be built from the response handle."""

    exit_code = EXIT_RESPONSE_ERROR


class BodyReadError(RestingError):
    """Raised when draining the HTTP response body fails with an I/O error."""

    exit_code = EXIT_RESPONSE_ERROR


class TransportError(RestingError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_TRANSPORT_ERROR


class DecodeError(RestingError):
    """Raised when response bytes cannot be decoded under the declared encoding."""

    exit_code = EXIT_DECODE_ERROR


class ParseError(RestingError):
    """Raised when a response document is malformed or does not match the target type.

    Args:
        message: Human-readable error description.
        transformation_type: The format that was being parsed.
        fragment: The offending part of the document, when it can be located.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(
        self,
        message: str,
        transformation_type: Optional[TransformationType] = None,
        fragment: Optional[str] = None,
    ):
        super().__init__(message)
        self.transformation_type = transformation_type
        self.fragment = fragment
