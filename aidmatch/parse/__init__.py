"""Descriptor-driven parse engine with interchangeable XML and JSON backends."""

from .base import DocumentParser, SCORE_SCALE, FIXED_SCORE
from .descriptor import (
    NodeKind,
    RoleMapping,
    DescriptorNode,
    Descriptor,
    END,
    validate_descriptor,
)
from .json_parser import JsonDocumentParser
from .xml_parser import XmlDocumentParser

__all__ = [
    "DocumentParser",
    "JsonDocumentParser",
    "XmlDocumentParser",
    "SCORE_SCALE",
    "FIXED_SCORE",
    "NodeKind",
    "RoleMapping",
    "DescriptorNode",
    "Descriptor",
    "END",
    "validate_descriptor",
]
