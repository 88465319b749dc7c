from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import SchemaError
from .typings import Control

if TYPE_CHECKING:
    from .models import Record


@dataclass(frozen=True)
class RenderResult:
    """The result of rendering a template."""

    status: int
    """The control byte of the response, 0 on success."""

    result: Any
    """The result document sent back in the first block, usually an object."""

    content: str
    """The rendered template."""

    @classmethod
    def from_response(cls, response: Record) -> RenderResult:
        try:
            result = json.loads(response.content1)
        except ValueError as e:
            msg = f"Result document is not valid JSON: {e}"
            raise SchemaError(msg) from e

        return cls(status=response.control, result=result, content=response.content2)

    @property
    def has_error(self) -> bool:
        if self.status != Control.STATUS_OK:
            return True
        return isinstance(self.result, dict) and self.result.get("has_error") is True

    def _field(self, name: str) -> str:
        if not isinstance(self.result, dict):
            return ""
        value = self.result.get(name)
        return value if isinstance(value, str) else ""

    @property
    def status_code(self) -> str:
        return self._field("status_code")

    @property
    def status_text(self) -> str:
        return self._field("status_text")

    @property
    def status_param(self) -> str:
        return self._field("status_param")
