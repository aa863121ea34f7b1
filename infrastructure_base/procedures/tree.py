"""
Result trees built from dotted column names.

Stored procedures describe nested structures through their column names,
e.g. ``Customer.Address.City``. Each row is folded into a tree of ``Node``
and ``Leaf`` values which the object mapper turns into nested objects:

    >>> row_to_tree([("Id", 7), ("Address.City", "Oslo")]).to_dict()
    {'Id': 7, 'Address': {'City': 'Oslo'}}

Keys are split on the first dot, one level at a time. Sibling columns
sharing a prefix are deep-merged into the same node.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from infrastructure_base.exceptions import ColumnConflictError

@dataclass(frozen=True)
class Leaf:
    """A single column value."""
    value: Any

@dataclass
class Node:
    """A mapping of key to nested ``Node`` or ``Leaf``."""
    children: Dict[str, Union["Node", Leaf]] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.children

    def __getitem__(self, key: str) -> Union["Node", Leaf]:
        return self.children[key]

    def __len__(self) -> int:
        return len(self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the tree to plain nested dictionaries."""
        return {
            key: child.to_dict() if isinstance(child, Node) else child.value
            for key, child in self.children.items()
        }

ResultTree = Union[Node, Leaf]

def nested_from_key(key: str, value: Any) -> Node:
    """
    Build a single-path tree for one column.

    Args:
        key: Column name, possibly dotted
        value: Column value

    Returns:
        Node: ``A.B.C`` becomes ``Node(A: Node(B: Node(C: Leaf(value))))``
    """
    head, dot, rest = key.partition('.')
    if dot:
        return Node({head: nested_from_key(rest, value)})
    return Node({key: Leaf(value)})

def merge(target: Node, other: Node, _path: str = "") -> Node:
    """
    Deep-merge two trees into a new one.

    Neither input is modified. Keys present in both trees as nodes are
    merged recursively.

    Args:
        target: Tree collected so far
        other: Tree to merge in

    Returns:
        Node: The merged tree

    Raises:
        ColumnConflictError: If a key is a leaf in one tree and present in the other
    """
    merged = Node(dict(target.children))
    for key, child in other.children.items():
        path = f"{_path}.{key}" if _path else key
        if key not in merged.children:
            merged.children[key] = child
            continue

        existing = merged.children[key]
        if isinstance(existing, Node) and isinstance(child, Node):
            merged.children[key] = merge(existing, child, path)
        else:
            raise ColumnConflictError(path)
    return merged

def row_to_tree(
    row: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
    skip_nulls: bool = True
) -> Node:
    """
    Fold one result row into a tree.

    Args:
        row: Column name/value pairs, or a mapping of them
        skip_nulls: Drop null columns instead of keeping ``Leaf(None)``

    Returns:
        Node: Tree for the whole row
    """
    pairs = row.items() if isinstance(row, Mapping) else row

    tree = Node()
    for key, value in pairs:
        if value is None and skip_nulls:
            continue
        _insert(tree, key, value)
    return tree

def _insert(node: Node, key: str, value: Any, _path: str = "") -> None:
    """Add one column to a tree owned by the current row, in place."""
    head, dot, rest = key.partition('.')
    path = f"{_path}.{head}" if _path else head

    if not dot:
        if head in node.children:
            raise ColumnConflictError(path)
        node.children[head] = Leaf(value)
        return

    child = node.children.setdefault(head, Node())
    if not isinstance(child, Node):
        raise ColumnConflictError(path)
    _insert(child, rest, value, path)
