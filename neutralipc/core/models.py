# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import NamedTuple


class Header(NamedTuple):
    reserved: int
    control: int
    format1: int
    length1: int
    format2: int
    length2: int


class Record(NamedTuple):
    reserved: int
    control: int
    format1: int
    content1: str
    format2: int
    content2: str


class ConnectionOptions(NamedTuple):
    host: str = "127.0.0.1"
    port: int = 4273
    timeout: float = 10
    """Seconds, applied to connect, read and write alike."""
    buffer_size: int = 8192
    """Upper bound of a single read while collecting a content block."""
