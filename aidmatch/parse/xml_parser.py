"""XML backend for the descriptor parse engine (ElementTree paths)."""

from __future__ import annotations
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, List

from ..errors import DocumentParseError
from .base import DocumentParser
from .descriptor import DescriptorNode

logger = logging.getLogger(__name__)

# Only the default namespace is blanked; prefixed declarations are still
# needed by prefixed elements and attributes.
_DEFAULT_NS = re.compile(rb'\sxmlns\s*=\s*("[^"]*"|\'[^\']*\')')


def strip_default_namespace(raw: bytes) -> bytes:
    """Blank out default namespace declarations, keeping byte offsets.

    ElementTree paths cannot address unprefixed elements once a default
    namespace is declared, so the declaration text is overwritten with spaces.
    """
    return _DEFAULT_NS.sub(lambda m: b" " * len(m.group(0)), raw)


class XmlDocumentParser(DocumentParser):
    """Descriptor paths are ElementTree paths relative to the current element.

    The parsed root element is wrapped in a synthetic parent so the top-level
    descriptor can name the document element itself (e.g. "metadata").
    """

    fmt = "xml"

    def load(self, raw: bytes) -> Any:
        try:
            root = ET.fromstring(strip_default_namespace(raw))
        except (ET.ParseError, LookupError, ValueError) as exc:
            raise DocumentParseError(self.fmt, str(exc)) from exc
        document = ET.Element("document")
        document.append(root)
        return document

    def find(self, scope: Any, node: DescriptorNode) -> List[Any]:
        if not isinstance(scope, ET.Element):
            return []
        try:
            return scope.findall(node.path)
        except (SyntaxError, KeyError) as exc:
            logger.warning(f"xml-parse: bad path expression {node.path!r}: {exc}")
            return []

    def elements(self, matches: List[Any]) -> List[Any]:
        return matches

    def scalar(self, match: Any, attr: str | None) -> str | None:
        if attr is not None:
            value = match.get(attr)
            return value if value else None
        # not stripped: join phrases carry their surrounding spaces
        text = "".join(match.itertext())
        return text or None


__all__ = ["XmlDocumentParser", "strip_default_namespace"]
