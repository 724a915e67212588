"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~clientsynth.exceptions.ClientsynthError` subclass.
Build scripts can inspect the exit code to tell a bad document apart from
a network failure without parsing stderr.

Example::

    $ clientsynth generate https://example.com/openapi.json
    $ echo $?
    6   # EXIT_FETCH_ERROR -- the document could not be downloaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_FETCH_ERROR = 6
"""The document could not be fetched (timeout, DNS failure, HTTP error status)."""

EXIT_MALFORMED_DOCUMENT = 7
"""The API document could not be decoded or is not an OpenAPI/Swagger document."""
