# model/node.py

"""
Node
====

A worker able to run one build item at a time. Each node is described by a
static set of label atoms; the pool adds a self-atom named after the node so
that an expression can pin work to one specific machine.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Optional

from labels.expression import LabelAtom


class NodeState(Enum):
    IDLE = auto()
    BUSY = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True)
class Node:
    identity: str
    atoms: FrozenSet[LabelAtom]
    state: NodeState = NodeState.IDLE
    # item_id of the queue item currently occupying this node, if any
    current_item: Optional[int] = None

    @property
    def is_idle(self) -> bool:
        return self.state is NodeState.IDLE

    def has_label(self, name: str) -> bool:
        return any(atom.name == name for atom in self.atoms)

    @property
    def labels_string(self) -> str:
        """Space-separated label names, self-atom included, sorted."""
        return " ".join(sorted(atom.name for atom in self.atoms))

    def __str__(self) -> str:
        return f"{self.identity}[{self.state}]"
