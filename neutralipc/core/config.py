# SPDX-License-Identifier: MIT
"""Connection settings for the Neutral IPC client."""
from __future__ import annotations

import json
import logging
import os
from typing import Any
from urllib.parse import parse_qs, urlparse

from .models import ConnectionOptions

logger = logging.getLogger(__name__)

# Shared with the Neutral IPC server.
DEFAULT_CONFIG_FILE = "/etc/neutral-ipc-cfg.json"

MAX_PORT = 65535

_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "host": (str,),
    "port": (int,),
    "timeout": (int, float),
    "buffer_size": (int,),
}


def _pick(settings: dict[str, Any]) -> dict[str, Any]:
    picked: dict[str, Any] = {}
    for key, types in _FIELD_TYPES.items():
        value = settings.get(key)
        # bool is an int, but never a valid port or size
        if not isinstance(value, types) or isinstance(value, bool):
            continue
        if key == "port" and not 0 <= value <= MAX_PORT:
            logger.debug("Ignoring out of range port %s", value)
            continue
        picked[key] = value
    return picked


def read_config_file(path: str) -> dict[str, Any]:
    """Read the JSON configuration file.

    Args:
        path (str): The file to read.

    Returns:
        dict[str, Any]: The settings found, empty if the file is missing or unreadable.
    """
    if not os.path.exists(path):
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Ignoring config file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.debug("Ignoring config file %s: not a JSON object", path)
        return {}
    return data


def load_options(
    path: str | None = DEFAULT_CONFIG_FILE, **overrides: Any
) -> ConnectionOptions:
    """Build connection options from defaults, a config file and overrides.

    Args:
        path (str | None, optional): The JSON file to read, None to skip it.
        **overrides (Any): Settings applied last, e.g. ``port=4274``.

    Returns:
        ConnectionOptions: The resulting options.
    """
    options = ConnectionOptions()
    if path is not None:
        options = options._replace(**_pick(read_config_file(path)))
    return options._replace(**_pick(overrides))


def options_from_uri(uri: str) -> ConnectionOptions:
    """Parse options from a URI such as ``neutral://127.0.0.1:4273?timeout=5``.

    Args:
        uri (str): The URI to parse.

    Returns:
        ConnectionOptions: The parsed options, defaults for missing parts.
    """
    parsed = urlparse(uri)
    query_string = parse_qs(parsed.query)
    options = ConnectionOptions()

    if parsed.hostname:
        options = options._replace(host=parsed.hostname)
    if parsed.port is not None:
        options = options._replace(port=parsed.port)

    timeout = query_string.get("timeout")
    if timeout is not None:
        options = options._replace(timeout=float(timeout[0]))

    buffer_size = query_string.get("buffer_size")
    if buffer_size is not None:
        options = options._replace(buffer_size=int(buffer_size[0]))

    return options
