"""Numeric process exit codes used by the ``resting`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~resting.exceptions.RestingError` subclass.
Shell wrappers can inspect the exit code to tell a connection failure from
a malformed response without parsing stderr.

Example::

    $ resting request http://localhost:9/none
    $ echo $?
    6   # EXIT_TRANSPORT_ERROR -- the endpoint could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_CONFIGURATION_ERROR = 2
"""Required configuration was missing or invalid."""

EXIT_RESPONSE_ERROR = 5
"""The HTTP response could not be captured (missing handle or body read failure)."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_PARSE_ERROR = 7
"""The response body could not be parsed into entities."""

EXIT_DECODE_ERROR = 8
"""The response body is not valid text under the declared encoding."""
