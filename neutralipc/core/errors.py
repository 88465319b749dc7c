# SPDX-License-Identifier: MIT

"""Errors raised by neutralipc."""

from __future__ import annotations


class IpcError(Exception):
    """Base class for every error raised by neutralipc."""

    msg = "Neutral IPC error."

    def __init__(self, msg: str | None = None) -> None:
        """Create a new IpcError instance.

        Args:
            msg (str | None, optional): A message overriding the class default.
        """
        super().__init__(msg or self.msg)


class TransportError(IpcError):
    """Raised when connecting, reading or writing fails, including timeouts."""

    msg = "I/O error while talking to the Neutral server."


class InvalidHeaderLengthError(IpcError):
    """Raised when a record header is not exactly HEADER_LEN bytes."""

    msg = "Invalid header length received."


class InvalidResponseError(IpcError):
    """Raised when the server response is malformed."""

    msg = "Invalid response from server."


class ConnectionClosedError(IpcError):
    """Raised when the server closes the connection before a block is complete."""

    msg = "Connection closed unexpectedly."


class InvalidUtf8Error(IpcError):
    """Raised when a content block is not valid UTF-8."""

    msg = "Invalid UTF-8 encoding in response."


class SchemaError(IpcError):
    """Raised when a schema or result document is not valid JSON."""

    msg = "Invalid JSON document."
