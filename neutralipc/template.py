# SPDX-License-Identifier: MIT

"""A Neutral template rendered by the IPC server."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any, Mapping, Union

from .connection import Connection
from .core.errors import SchemaError
from .core.results import RenderResult
from .core.typings import ContentFormat, Control

if TYPE_CHECKING:
    from .core.models import ConnectionOptions
    from .core.typings import Document

Schema = Union[Mapping[str, Any], str, None]


def _load_schema(schema: Schema) -> Document:
    if schema is None:
        return {}

    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except ValueError as e:
            msg = f"Schema is not valid JSON: {e}"
            raise SchemaError(msg) from e

    if not isinstance(schema, Mapping):
        msg = "Schema must be a JSON object"
        raise SchemaError(msg)
    return dict(schema)


def deep_merge(a: Any, b: Any) -> Any:
    """Merge ``b`` into ``a``.

    Nested objects are merged key by key, any other value in ``b`` replaces
    the one in ``a``.
    """
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        merged = dict(a)
        for key, value in b.items():
            merged[key] = deep_merge(merged[key], value) if key in merged else value
        return merged
    return b


class Template:
    """A template and the schema it is rendered with."""

    def __init__(
        self,
        template: str = "",
        schema: Schema = None,
        *,
        kind: int = ContentFormat.PATH,
        options: ConnectionOptions | str | None = None,
    ) -> None:
        """Create a new Template instance.

        Args:
            template (str, optional): A template path or template source.
            schema (Schema, optional): The schema, a mapping or a JSON string.
            kind (int, optional): ContentFormat.PATH if ``template`` is a path
                on the server, ContentFormat.TEXT if it is the template source.
                Defaults to PATH.
            options (ConnectionOptions | str | None, optional): Connection
                options or URI. Read from the default config file if None.
        """
        self._template = template
        self._kind = ContentFormat(kind)
        self._schema: Document = _load_schema(schema)
        self._connection = Connection(options)
        self._result: RenderResult | None = None

    @classmethod
    def from_file(cls, path: str, schema: Schema = None, **kwargs: Any) -> Template:
        """Create a template from a file path known to the server."""
        return cls(path, schema, kind=ContentFormat.PATH, **kwargs)

    @classmethod
    def from_source(cls, source: str, schema: Schema = None, **kwargs: Any) -> Template:
        """Create a template from its source."""
        return cls(source, schema, kind=ContentFormat.TEXT, **kwargs)

    def __repr__(self) -> str:
        """Get the string representation of the template."""
        return f"<Template {self._kind.name} {self._template[:32]!r}>"

    @property
    def schema(self) -> Document:
        return self._schema

    def set_path(self, path: str) -> None:
        self._kind = ContentFormat.PATH
        self._template = path

    def set_source(self, source: str) -> None:
        self._kind = ContentFormat.TEXT
        self._template = source

    def merge_schema(self, schema: Schema) -> None:
        """Merge a schema into the current one.

        Args:
            schema (Schema): The schema to merge, a mapping or a JSON string.

        Raises:
            SchemaError: If ``schema`` is not a JSON object.
        """
        self._schema = deep_merge(self._schema, _load_schema(schema))

    async def render(self) -> str:
        """Render the template.

        Raises:
            SchemaError: If the schema cannot be serialised or the result
                document is not valid JSON. Any JSON value is accepted as the
                result, the status fields stay empty unless it is an object.
            IpcError: If the exchange with the server fails.

        Returns:
            str: The rendered content.
        """
        try:
            schema = json.dumps(self._schema)
        except (TypeError, ValueError) as e:
            msg = f"Schema cannot be serialised: {e}"
            raise SchemaError(msg) from e

        response = await self._connection.exchange(
            Control.PARSE_TEMPLATE,
            ContentFormat.JSON,
            schema.encode("utf-8"),
            self._kind,
            self._template.encode("utf-8"),
        )
        self._result = RenderResult.from_response(response)
        return self._result.content

    def render_sync(self) -> str:
        """Blocking version of render, must not be called from a running event loop."""
        return asyncio.run(self.render())

    @property
    def result(self) -> Any:
        """Get the result document of the last render, None before the first."""
        return None if self._result is None else self._result.result

    def has_error(self) -> bool:
        return self._result is not None and self._result.has_error

    @property
    def status_code(self) -> str:
        return "" if self._result is None else self._result.status_code

    @property
    def status_text(self) -> str:
        return "" if self._result is None else self._result.status_text

    @property
    def status_param(self) -> str:
        return "" if self._result is None else self._result.status_param
