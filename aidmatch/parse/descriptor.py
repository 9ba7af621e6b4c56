"""Declarative parse instructions walked by both document parsers.

A descriptor is a tuple of DescriptorNode terminated by an END node. TREE,
ARRAY and DATA_ARRAY nodes carry nested data (a child descriptor or a role
table). Descriptors are built once by the source modules and never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from ..errors import DescriptorError
from ..tags import AttributeKey


class NodeKind(str, Enum):
    SET = "set"
    DATA = "data"
    TREE = "tree"
    ARRAY = "array"
    DATA_ARRAY = "data_array"
    END = "end"


@dataclass(frozen=True)
class RoleMapping:
    """Maps one exact role string of a DATA_ARRAY onto a target key."""
    name: str
    key: AttributeKey


@dataclass(frozen=True)
class DescriptorNode:
    kind: NodeKind
    key: AttributeKey | None
    path: str = ""
    attr: str | None = None  # XML attribute to read instead of the text
    children: Tuple["DescriptorNode", ...] = ()
    roles: Tuple[RoleMapping, ...] = ()
    scale: float | None = None  # multiplier for numeric DATA values


Descriptor = Tuple[DescriptorNode, ...]

END = DescriptorNode(NodeKind.END, None)


def set_(key: AttributeKey, literal: str) -> DescriptorNode:
    return DescriptorNode(NodeKind.SET, key, literal)


def data(key: AttributeKey, path: str, attr: str | None = None,
         scale: float | None = None) -> DescriptorNode:
    return DescriptorNode(NodeKind.DATA, key, path, attr=attr, scale=scale)


def tree(path: str, children: Sequence[DescriptorNode], top: bool = False) -> DescriptorNode:
    """Nested scope; top=True finalizes one candidate when the scope ends."""
    key = AttributeKey.TOP if top else AttributeKey.ARRAY
    return DescriptorNode(NodeKind.TREE, key, path, children=tuple(children))


def array(path: str, children: Sequence[DescriptorNode], top: bool = False) -> DescriptorNode:
    """Repeated scope; top=True finalizes one candidate per element."""
    key = AttributeKey.TOP if top else AttributeKey.ARRAY
    return DescriptorNode(NodeKind.ARRAY, key, path, children=tuple(children))


def data_array(key: AttributeKey, path: str, roles: Sequence[RoleMapping]) -> DescriptorNode:
    return DescriptorNode(NodeKind.DATA_ARRAY, key, path, roles=tuple(roles))


def validate_descriptor(descriptor: Sequence[DescriptorNode], where: str = "root") -> None:
    """Check END termination and nested data, recursively.

    Raises:
        DescriptorError: on the first structural problem found
    """
    if not descriptor or descriptor[-1].kind is not NodeKind.END:
        raise DescriptorError(f"{where}: descriptor is not terminated by END")
    for pos, node in enumerate(descriptor[:-1]):
        label = f"{where}[{pos}:{node.path or node.kind.value}]"
        if node.kind is NodeKind.END:
            raise DescriptorError(f"{label}: END before the last node")
        if node.key is None:
            raise DescriptorError(f"{label}: node has no target key")
        if node.kind is not NodeKind.SET and not node.path:
            raise DescriptorError(f"{label}: node has no path")
        if node.kind in (NodeKind.TREE, NodeKind.ARRAY):
            validate_descriptor(node.children, label)
        elif node.kind is NodeKind.DATA_ARRAY and not node.roles:
            raise DescriptorError(f"{label}: data array without role table")


__all__ = [
    "NodeKind",
    "RoleMapping",
    "DescriptorNode",
    "Descriptor",
    "END",
    "set_",
    "data",
    "tree",
    "array",
    "data_array",
    "validate_descriptor",
]
