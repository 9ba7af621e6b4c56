"""JSON backend for the descriptor parse engine (object-key lookup)."""

from __future__ import annotations
import json
from typing import Any, List

from ..errors import DocumentParseError
from .base import DocumentParser, format_number
from .descriptor import DescriptorNode


class JsonDocumentParser(DocumentParser):
    """Descriptor paths are plain object keys of the current JSON object."""

    fmt = "json"

    def load(self, raw: bytes) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise DocumentParseError(self.fmt, str(exc)) from exc

    def find(self, scope: Any, node: DescriptorNode) -> List[Any]:
        if not isinstance(scope, dict):
            return []
        value = scope.get(node.path)
        if value is None:
            return []
        return [value]

    def elements(self, matches: List[Any]) -> List[Any]:
        value = matches[0]
        if isinstance(value, list):
            return value
        # a single object where an array was expected
        return [value]

    def scalar(self, match: Any, attr: str | None) -> str | None:
        if isinstance(match, bool):
            return "true" if match else "false"
        if isinstance(match, int):
            return str(match)
        if isinstance(match, float):
            return format_number(match)
        if isinstance(match, str):
            return match or None
        return None


__all__ = ["JsonDocumentParser"]
