# model/__init__.py

"""
Domain objects for the scheduler: nodes and their states, immutable build
items with their handles and assignments, and run references. These types
carry no scheduling logic of their own.
"""

from .run_reference import RunReference
from .node import Node, NodeState
from .item import Assignment, Item, ItemHandle, ItemState

__all__ = [
    "Assignment",
    "Item",
    "ItemHandle",
    "ItemState",
    "Node",
    "NodeState",
    "RunReference",
]
