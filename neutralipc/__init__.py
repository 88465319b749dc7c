# SPDX-License-Identifier: MIT

"""neutralipc - A client for the Neutral template IPC server."""

__all__ = (
    "Connection",
    "ConnectionOptions",
    "ContentFormat",
    "Control",
    "Header",
    "Record",
    "Template",
    "exchange",
    "is_server_available",
    "load_options",
)

from .connection import Connection, exchange, is_server_available
from .core.config import load_options
from .core.models import ConnectionOptions, Header, Record
from .core.typings import ContentFormat, Control
from .template import Template
