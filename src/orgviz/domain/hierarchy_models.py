from __future__ import annotations

"""
Hierarchy Data Models.

Defines the normalized tree element consumed by the visualization layer and
the validated per-directory metadata that feeds it. Optional attributes are
kept as None in memory and omitted entirely from the serialized form.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple, Union

Number = Union[int, float]

# -----------------------------------------------------------------------------
# METADATA
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeMetadata:
    """
    Validated contents of a directory-local metadata document.

    Every attribute is optional; an empty instance means "use defaults".

    Attributes:
        name: Display name override.
        description: Free text description.
        node_color: Color token for this node only.
        owner: Team or person responsible.
        contact_email: Contact address for the owner.
        size: Relative weight of a leaf node.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    node_color: Optional[str] = None
    owner: Optional[str] = None
    contact_email: Optional[str] = None
    size: Optional[Number] = None

    @property
    def is_empty(self) -> bool:
        return all(
            v is None for v in (
                self.name, self.description, self.node_color,
                self.owner, self.contact_email, self.size,
            )
        )


# -----------------------------------------------------------------------------
# TREE ELEMENT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    """
    One compiled tree element, corresponding 1:1 to a source directory.

    Exactly one of `size` (leaf) or `children` (branch) is set, and a
    branch always has at least one child.
    """
    name: str
    description: str
    node_color: Optional[str] = None
    owner: Optional[str] = None
    contact_email: Optional[str] = None
    size: Optional[Number] = None
    children: Optional[Tuple["Node", ...]] = None

    def __post_init__(self) -> None:
        if (self.size is None) == (self.children is None):
            raise ValueError(
                f"Node '{self.name}' must define exactly one of 'size' or 'children'."
            )
        if self.children is not None and not self.children:
            raise ValueError(f"Branch node '{self.name}' has an empty 'children' list.")

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def walk(self) -> Iterator["Node"]:
        """Yield this node and every descendant in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the tree into its serialized mapping form.

        Key order is fixed so serialization is byte-stable, and absent
        optional attributes are omitted rather than written as null.
        """
        root: Dict[str, Any] = {}
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            out["name"] = node.name
            out["description"] = node.description
            if node.node_color is not None:
                out["nodeColor"] = node.node_color
            if node.owner is not None:
                out["owner"] = node.owner
            if node.contact_email is not None:
                out["contactEmail"] = node.contact_email
            if node.children is None:
                out["size"] = node.size
            else:
                child_dicts: list = []
                out["children"] = child_dicts
                for child in node.children:
                    child_out: Dict[str, Any] = {}
                    child_dicts.append(child_out)
                    stack.append((child, child_out))
        return root

    @classmethod
    def from_dict(cls, data: Any) -> "Node":
        """
        Rebuild a Node tree from its serialized mapping form.

        Raises:
            ValueError: If the mapping does not describe a valid tree.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}.")

        children_raw = data.get("children")
        children: Optional[Tuple[Node, ...]] = None
        if children_raw is not None:
            if not isinstance(children_raw, list):
                raise ValueError("'children' must be a list.")
            children = tuple(cls.from_dict(c) for c in children_raw)

        name = data.get("name")
        description = data.get("description")
        if not isinstance(name, str) or not isinstance(description, str):
            raise ValueError("'name' and 'description' must be strings.")

        size = data.get("size")
        if size is not None and (isinstance(size, bool) or not isinstance(size, (int, float))):
            raise ValueError(f"'size' must be a number, got {type(size).__name__}.")

        return cls(
            name=name,
            description=description,
            node_color=data.get("nodeColor"),
            owner=data.get("owner"),
            contact_email=data.get("contactEmail"),
            size=size,
            children=children,
        )
