"""
Unit tests for dotted-column result trees.
"""

import pytest

from infrastructure_base.exceptions import ColumnConflictError
from infrastructure_base.procedures.tree import Leaf, Node, merge, nested_from_key, row_to_tree

def test_sibling_dotted_columns_share_a_node():
    """Columns with the same prefix end up under one nested mapping."""
    tree = row_to_tree([("A.B", 1), ("A.C", 2)])

    assert tree.to_dict() == {"A": {"B": 1, "C": 2}}

def test_plain_column_is_a_leaf():
    """A column without dots maps straight to its value."""
    tree = row_to_tree([("A", 1)])

    assert tree == Node({"A": Leaf(1)})
    assert tree.to_dict() == {"A": 1}

def test_null_columns_are_skipped():
    """A null column contributes no key at any level."""
    tree = row_to_tree([("Id", 7), ("Email", None), ("Address.City", None), ("Address.Zip", "0150")])

    assert tree.to_dict() == {"Id": 7, "Address": {"Zip": "0150"}}
    assert "Email" not in tree

def test_all_null_row_is_empty():
    tree = row_to_tree([("A", None), ("B.C", None)])

    assert len(tree) == 0
    assert tree.to_dict() == {}

def test_null_columns_kept_when_requested():
    """skip_nulls=False represents null columns as explicit leaves."""
    tree = row_to_tree([("Id", 7), ("Address.City", None)], skip_nulls=False)

    assert tree["Address"]["City"] == Leaf(None)
    assert tree.to_dict() == {"Id": 7, "Address": {"City": None}}

def test_merge_is_deep():
    """Merging partial trees for the same key combines their children."""
    left = Node({"A": Node({"B": Leaf(1)})})
    right = Node({"A": Node({"C": Leaf(2)})})

    assert merge(left, right).to_dict() == {"A": {"B": 1, "C": 2}}

def test_merge_leaves_inputs_untouched():
    left = Node({"A": Node({"B": Leaf(1)})})
    right = Node({"A": Node({"C": Leaf(2)})})

    merge(left, right)

    assert left.to_dict() == {"A": {"B": 1}}
    assert right.to_dict() == {"A": {"C": 2}}

def test_key_is_split_on_first_dot():
    """Each level splits at the first dot and recurses on the remainder."""
    tree = nested_from_key("Customer.Address.City", "Oslo")

    assert tree == Node({"Customer": Node({"Address": Node({"City": Leaf("Oslo")})})})

def test_deeply_nested_columns_merge():
    tree = row_to_tree({
        "Customer.Name": "Ann",
        "Customer.Address.City": "Oslo",
        "Customer.Address.Street": "Main",
        "OrderCount": 2,
    })

    assert tree.to_dict() == {
        "Customer": {"Name": "Ann", "Address": {"City": "Oslo", "Street": "Main"}},
        "OrderCount": 2,
    }

def test_leaf_and_node_for_same_key_conflict():
    with pytest.raises(ColumnConflictError) as exc_info:
        row_to_tree([("Total", 1), ("Total.Net", 2)])

    assert exc_info.value.path == "Total"

def test_duplicate_columns_conflict():
    with pytest.raises(ColumnConflictError) as exc_info:
        row_to_tree([("A.B", 1), ("A.B", 2)])

    assert exc_info.value.path == "A.B"
    assert isinstance(exc_info.value, ValueError)

def test_node_before_leaf_conflicts():
    with pytest.raises(ColumnConflictError) as exc_info:
        row_to_tree([("Total.Net", 2), ("Total", 1)])

    assert exc_info.value.path == "Total"

def test_wide_row_folds_every_column():
    """Many columns sharing prefixes land in one tree without losing any."""
    row = [(f"Group{g}.Item{i}", g * 100 + i) for g in range(20) for i in range(50)]

    tree = row_to_tree(row).to_dict()

    assert len(tree) == 20
    assert all(len(items) == 50 for items in tree.values())
    assert tree["Group7"]["Item42"] == 742

def test_row_trees_are_independent():
    first = row_to_tree([("A.B", 1)])
    second = row_to_tree([("A.C", 2)])

    assert first.to_dict() == {"A": {"B": 1}}
    assert second.to_dict() == {"A": {"C": 2}}
