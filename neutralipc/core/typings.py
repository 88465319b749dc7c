# SPDX-License-Identifier: MIT
from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict

Document = Dict[str, Any]

# Neutral IPC record, version 0 (draft).
HEADER_LEN = 12
RESERVED = 0


class Control(IntEnum):
    """Operation codes (requests) and status codes (responses)."""

    STATUS_OK = 0
    STATUS_KO = 1
    PARSE_TEMPLATE = 10


class ContentFormat(IntEnum):
    """Content-type tags of the two payload blocks."""

    JSON = 10
    PATH = 20
    TEXT = 30
    BIN = 40
