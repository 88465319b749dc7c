# SPDX-License-Identifier: MIT
"""Encoding and decoding of Neutral IPC records.

Header layout (all integers big endian, all text UTF-8)::

    \\x00              reserved
    \\x00              control (action/status)
    \\x00              content-format 1
    \\x00\\x00\\x00\\x00  content-length 1
    \\x00              content-format 2
    \\x00\\x00\\x00\\x00  content-length 2 (can be zero)

The two content blocks follow the header back to back, without delimiters.
"""
from __future__ import annotations

import struct

from .errors import InvalidHeaderLengthError
from .models import Header, Record
from .typings import HEADER_LEN, RESERVED

_HEADER = struct.Struct(">BBBIBI")


def encode_header(
    control: int, format1: int, length1: int, format2: int, length2: int
) -> bytes:
    """Encode a record header.

    Args:
        control (int): The operation or status code.
        format1 (int): The content format of the first block.
        length1 (int): The length of the first block in bytes.
        format2 (int): The content format of the second block.
        length2 (int): The length of the second block in bytes.

    Returns:
        bytes: Exactly HEADER_LEN bytes.
    """
    return _HEADER.pack(RESERVED, control, format1, length1, format2, length2)


def encode_record(
    control: int, format1: int, content1: bytes, format2: int, content2: bytes
) -> bytes:
    """Encode a complete record: header, then both content blocks verbatim.

    Args:
        control (int): The operation or status code.
        format1 (int): The content format of the first block.
        content1 (bytes): The first block.
        format2 (int): The content format of the second block.
        content2 (bytes): The second block, may be empty.

    Returns:
        bytes: The encoded record.
    """
    header = encode_header(control, format1, len(content1), format2, len(content2))
    return header + content1 + content2


def decode_header(data: bytes) -> Header:
    """Decode a record header.

    Control and format codes are not checked, unknown values are passed through.

    Args:
        data (bytes): The raw header.

    Raises:
        InvalidHeaderLengthError: If ``data`` is not exactly HEADER_LEN bytes.

    Returns:
        Header: The decoded header.
    """
    if len(data) != HEADER_LEN:
        msg = f"Expected a {HEADER_LEN} byte header, got {len(data)} bytes"
        raise InvalidHeaderLengthError(msg)
    return Header(*_HEADER.unpack(data))


def decode_record(header: bytes, content1: str, content2: str) -> Record:
    """Assemble a record from a raw header and the decoded content blocks.

    Args:
        header (bytes): The raw header, validated again here.
        content1 (str): The first block.
        content2 (str): The second block.

    Returns:
        Record: The record. ``reserved`` is always RESERVED.
    """
    decoded = decode_header(header)
    return Record(
        reserved=RESERVED,
        control=decoded.control,
        format1=decoded.format1,
        content1=content1,
        format2=decoded.format2,
        content2=content2,
    )
