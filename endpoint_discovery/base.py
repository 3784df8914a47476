"""
Shared data models for endpoint discovery.

All discovery modules import from this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


# =============================================================================
# ENUMS
# =============================================================================

class HttpVerb(Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"

    @classmethod
    def parse(cls, text: str) -> Optional["HttpVerb"]:
        """Return the verb for an exact lowercase file name segment, or None."""
        for verb in cls:
            if verb.value == text:
                return verb
        return None


class EndpointKind(Enum):
    CRUD_CREATE = "crud-create"
    CRUD_READ = "crud-read"
    CRUD_UPDATE = "crud-update"
    CRUD_DELETE = "crud-delete"
    CRUD_COUNT = "crud-count"
    CRUD_SQL = "crud-sql"
    CRUD_STATISTICS = "crud-statistics"


# =============================================================================
# NODE
# =============================================================================

class Node:
    """
    Generic labeled tree.

    Parsed scripts and the output manifest share this representation:
    a name, an optional scalar value and an ordered list of children.
    """

    __slots__ = ("name", "value", "children")

    def __init__(self, name: str = "", value: Any = None, children: Optional[List["Node"]] = None):
        self.name = name
        self.value = value
        self.children: List[Node] = list(children) if children else []

    def __repr__(self) -> str:
        return f"Node({self.name!r}, {self.value!r}, children={len(self.children)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (self.name, self.value, self.children) == (other.name, other.value, other.children)

    def add(self, node: "Node") -> "Node":
        self.children.append(node)
        return node

    def clone(self) -> "Node":
        return Node(self.name, self.value, [c.clone() for c in self.children])

    def children_named(self, name: str) -> Iterator["Node"]:
        return (c for c in self.children if c.name == name)

    def first(self, name: str) -> Optional["Node"]:
        return next(self.children_named(name), None)

    def last(self, *names: str) -> Optional["Node"]:
        """Last direct child whose name is any of names."""
        for child in reversed(self.children):
            if child.name in names:
                return child
        return None

    def has(self, name: str) -> bool:
        return self.first(name) is not None

    def descendants(self) -> Iterator["Node"]:
        """All nodes below this one, pre-order."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def get_str(self) -> Optional[str]:
        if self.value is None:
            return None
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)

    def get_bool(self) -> bool:
        if isinstance(self.value, bool):
            return self.value
        if isinstance(self.value, str):
            return self.value.strip().lower() == "true"
        return False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.value is not None:
            result["value"] = self.value
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class Field:
    """A (name, type) pair in an input or returns schema."""
    name: str
    type: Optional[Any] = None

    @classmethod
    def from_node(cls, node: Node) -> "Field":
        return cls(name=node.name, type=node.value)

    def to_node(self) -> Node:
        return Node(self.name, self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type}


@dataclass
class EndpointDescriptor:
    """Represents one discovered endpoint file."""
    path: str
    verb: HttpVerb
    file_path: str = ""
    auth: Optional[List[str]] = None
    input: Optional[List[Field]] = None
    description: Optional[str] = None
    returns: Optional[List[Field]] = None
    array: Optional[bool] = None
    kind: Optional[EndpointKind] = None

    @property
    def key(self) -> tuple:
        return (self.path, self.verb)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, leaving out every optional field that was not derived."""
        data: Dict[str, Any] = {"path": self.path, "verb": self.verb.value}
        if self.input is not None:
            data["input"] = [f.to_dict() for f in self.input]
        if self.auth is not None:
            data["auth"] = list(self.auth)
        if self.description is not None:
            data["description"] = self.description
        if self.returns is not None:
            data["returns"] = [f.to_dict() for f in self.returns]
        if self.array is not None:
            data["array"] = self.array
        if self.kind is not None:
            data["kind"] = self.kind.value
        return data

    def to_node(self) -> Node:
        result = Node("")
        result.add(Node("path", self.path))
        result.add(Node("verb", self.verb.value))
        if self.input is not None:
            result.add(Node("input", children=[f.to_node() for f in self.input]))
        if self.auth is not None:
            result.add(Node("auth", children=[Node("", role) for role in self.auth]))
        if self.description is not None:
            result.add(Node("description", self.description))
        if self.returns is not None:
            result.add(Node("returns", children=[f.to_node() for f in self.returns]))
        if self.array is not None:
            result.add(Node("array", self.array))
        if self.kind is not None:
            result.add(Node("kind", self.kind.value))
        return result
