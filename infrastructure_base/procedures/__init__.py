"""
Stored procedure execution and dotted-column result trees.
"""

from infrastructure_base.procedures.tree import Leaf, Node, merge, nested_from_key, row_to_tree
from infrastructure_base.procedures.reader import ProcedureReader

__all__ = ['Leaf', 'Node', 'merge', 'nested_from_key', 'row_to_tree', 'ProcedureReader']
