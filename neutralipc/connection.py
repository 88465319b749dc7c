# SPDX-License-Identifier: MIT

"""Request/response exchanges with a Neutral IPC server."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from .core.config import load_options, options_from_uri
from .core.errors import (
    ConnectionClosedError,
    InvalidUtf8Error,
    IpcError,
    TransportError,
)
from .core.models import ConnectionOptions, Header, Record
from .core.record import decode_header, decode_record, encode_record
from .core.typings import HEADER_LEN, RESERVED, ContentFormat, Control

T = TypeVar("T")

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 1


async def _io(aw: Awaitable[T], timeout: float | None, action: str) -> T:
    """Await a single I/O step, folding timeouts and OS errors into TransportError.

    Args:
        aw (Awaitable[T]): The I/O step.
        timeout (float | None): Seconds to wait, None to wait forever.
        action (str): What the step does, used in the error message.

    Raises:
        TransportError: If the step fails or times out.

    Returns:
        T: The result of the step.
    """
    try:
        return await asyncio.wait_for(aw, timeout)
    except asyncio.TimeoutError as e:
        msg = f"Timed out {action}"
        raise TransportError(msg) from e
    except OSError as e:
        msg = f"Failed {action}: {e}"
        raise TransportError(msg) from e


async def read_header(
    reader: asyncio.StreamReader, timeout: float | None = None
) -> bytes:
    """Read exactly HEADER_LEN bytes.

    Args:
        reader (asyncio.StreamReader): The reader to read from.
        timeout (float | None, optional): Seconds to wait for the header.

    Raises:
        ConnectionClosedError: If the stream ends before the header is complete.
        TransportError: If reading fails or times out.

    Returns:
        bytes: The raw header.
    """
    try:
        return await _io(reader.readexactly(HEADER_LEN), timeout, "reading header")
    except asyncio.IncompleteReadError as e:
        msg = f"Got {len(e.partial)} of {HEADER_LEN} header bytes"
        raise ConnectionClosedError(msg) from e


async def read_block(
    reader: asyncio.StreamReader,
    length: int,
    chunk_size: int,
    timeout: float | None = None,
) -> bytes:
    """Read exactly ``length`` bytes, at most ``chunk_size`` bytes per read.

    Args:
        reader (asyncio.StreamReader): The reader to read from.
        length (int): The number of bytes declared in the header.
        chunk_size (int): The largest single read.
        timeout (float | None, optional): Seconds to wait for each read.

    Raises:
        ConnectionClosedError: If the stream ends before ``length`` bytes arrive.
        TransportError: If a read fails or times out.

    Returns:
        bytes: The block.
    """
    if chunk_size < 1:
        msg = f"chunk_size must be positive, got {chunk_size}"
        raise ValueError(msg)

    if length == 0:
        return b""

    block = bytearray()
    remaining = length
    while remaining > 0:
        chunk = await _io(
            reader.read(min(chunk_size, remaining)), timeout, "reading content"
        )
        if not chunk:
            msg = f"Got {length - remaining} of {length} content bytes"
            raise ConnectionClosedError(msg)

        block += chunk
        remaining -= len(chunk)

    return bytes(block)


async def read_content(
    reader: asyncio.StreamReader,
    length: int,
    chunk_size: int,
    timeout: float | None = None,
) -> str:
    """Read a content block and decode it as UTF-8.

    Args:
        reader (asyncio.StreamReader): The reader to read from.
        length (int): The number of bytes declared in the header.
        chunk_size (int): The largest single read.
        timeout (float | None, optional): Seconds to wait for each read.

    Raises:
        InvalidUtf8Error: If the block is not valid UTF-8.

    Returns:
        str: The decoded block.
    """
    block = await read_block(reader, length, chunk_size, timeout)
    try:
        return block.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(str(e)) from e


class Connection:
    """Connection settings for a Neutral IPC server.

    Every exchange opens its own TCP connection and closes it when done,
    nothing is shared between calls.
    """

    def __init__(self, options: ConnectionOptions | str | None = None) -> None:
        """Create a new Connection instance.

        Args:
            options (ConnectionOptions | str | None, optional): The options,
                or a URI such as ``neutral://127.0.0.1:4273?timeout=10``.
                Read from the default config file if None.
        """
        if options is None:
            options = load_options()
        elif isinstance(options, str):
            options = options_from_uri(options)
        self._options: ConnectionOptions = options

    def __repr__(self) -> str:
        """Get the string representation of the connection."""
        return f"<Connection {self._options.host}:{self._options.port}>"

    @property
    def options(self) -> ConnectionOptions:
        """Get the connection options.

        Returns:
            ConnectionOptions: The options used for every exchange.
        """
        return self._options

    async def _open(
        self, timeout: float | None
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        host, port = self._options.host, self._options.port
        try:
            return await _io(
                asyncio.open_connection(host, port),
                timeout,
                f"connecting to {host}:{port}",
            )
        except (OverflowError, ValueError) as e:
            # port out of range or unusable host
            msg = f"Failed connecting to {host}:{port}: {e}"
            raise TransportError(msg) from e

    async def exchange(
        self,
        control: int,
        format1: int,
        content1: bytes,
        format2: int,
        content2: bytes,
    ) -> Record:
        """Send one record and read the response record.

        Args:
            control (int): The operation code, e.g. Control.PARSE_TEMPLATE.
            format1 (int): The content format of the first block.
            content1 (bytes): The first block.
            format2 (int): The content format of the second block.
            content2 (bytes): The second block.

        Raises:
            TransportError: If connecting, writing or reading fails or times out.
            ConnectionClosedError: If the server closes the connection early.
            InvalidUtf8Error: If a response block is not valid UTF-8.

        Returns:
            Record: The response.
        """
        timeout = self._options.timeout
        buffer_size = self._options.buffer_size
        request = encode_record(control, format1, content1, format2, content2)

        reader, writer = await self._open(timeout)
        try:
            logger.debug(
                "> %s",
                Header(
                    RESERVED, control, format1, len(content1), format2, len(content2)
                ),
            )
            writer.write(request)
            await _io(writer.drain(), timeout, "writing request")

            header_bytes = await read_header(reader, timeout)
            header = decode_header(header_bytes)
            logger.debug("< %s", header)

            response1 = await read_content(reader, header.length1, buffer_size, timeout)
            response2 = await read_content(reader, header.length2, buffer_size, timeout)
        finally:
            writer.close()

        return decode_record(header_bytes, response1, response2)

    async def ping(self) -> bool:
        """Check whether the server is up and answers with a record header.

        The response body is never read.

        Returns:
            bool: True if a full header arrived within PROBE_TIMEOUT.
        """
        request = encode_record(
            Control.PARSE_TEMPLATE,
            ContentFormat.JSON,
            b"{}",
            ContentFormat.TEXT,
            b"",
        )

        try:
            reader, writer = await self._open(PROBE_TIMEOUT)
        except IpcError as e:
            logger.debug("%r unavailable: %s", self, e)
            return False

        try:
            writer.write(request)
            await _io(writer.drain(), PROBE_TIMEOUT, "writing request")
            await read_header(reader, PROBE_TIMEOUT)
        except IpcError as e:
            logger.debug("%r unavailable: %s", self, e)
            return False
        finally:
            writer.close()

        return True


def exchange(
    options: ConnectionOptions | str | None,
    control: int,
    format1: int,
    content1: bytes,
    format2: int,
    content2: bytes,
) -> Record:
    """Blocking version of Connection.exchange, runs on the calling thread.

    Must not be called from a running event loop.
    """
    return asyncio.run(
        Connection(options).exchange(control, format1, content1, format2, content2)
    )


def is_server_available(options: ConnectionOptions | str | None = None) -> bool:
    """Blocking version of Connection.ping."""
    return asyncio.run(Connection(options).ping())
