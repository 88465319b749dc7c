from __future__ import annotations

import asyncio
import socket
import socketserver
import threading
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

import pytest

from neutralipc.core.models import ConnectionOptions, Record
from neutralipc.core.record import decode_header, decode_record, encode_record
from neutralipc.core.typings import HEADER_LEN, ContentFormat, Control

HELLO_RESPONSE = encode_record(
    Control.STATUS_OK, ContentFormat.JSON, b"{}", ContentFormat.TEXT, b"hello"
)


async def _read_request(reader: asyncio.StreamReader) -> Record:
    header = await reader.readexactly(HEADER_LEN)
    decoded = decode_header(header)
    content1 = await reader.readexactly(decoded.length1)
    content2 = await reader.readexactly(decoded.length2)
    return decode_record(header, content1.decode(), content2.decode())


class StubServer:
    """A Neutral server that answers every request with canned bytes."""

    def __init__(self, response: bytes | None) -> None:
        self.response = response
        self.requests: list[Record] = []
        self.options = ConnectionOptions()

    async def handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.requests.append(await _read_request(reader))
        if self.response is None:
            # never answer, wait for the client to give up
            await reader.read()
        else:
            writer.write(self.response)
            await writer.drain()
        writer.close()


@asynccontextmanager
async def _stub_server(
    response: bytes | None = HELLO_RESPONSE, **options: object
) -> AsyncIterator[StubServer]:
    stub = StubServer(response)
    server = await asyncio.start_server(stub.handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    stub.options = ConnectionOptions(host="127.0.0.1", port=port)._replace(**options)
    try:
        yield stub
    finally:
        server.close()
        await server.wait_closed()


@pytest.fixture()
def stub_server():  # type: ignore[no-untyped-def]
    return _stub_server


@contextmanager
def _threaded_stub_server(response: bytes = HELLO_RESPONSE) -> Iterator[ConnectionOptions]:
    class Handler(socketserver.StreamRequestHandler):
        def handle(self) -> None:
            decoded = decode_header(self.rfile.read(HEADER_LEN))
            self.rfile.read(decoded.length1 + decoded.length2)
            self.wfile.write(response)

    with socketserver.TCPServer(("127.0.0.1", 0), Handler) as server:
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            yield ConnectionOptions(host="127.0.0.1", port=server.server_address[1])
        finally:
            server.shutdown()
            thread.join()


@pytest.fixture()
def threaded_stub_server():  # type: ignore[no-untyped-def]
    return _threaded_stub_server


@pytest.fixture()
def closed_port() -> int:
    """A local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
