# core/pool.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Node pool: registered nodes, their atom sets and busy/idle state

"""Node pool tracking workers available to the build queue.

The pool owns the atom registry used for its nodes, so label expressions
parsed through ``NodePool.parse`` share atoms with the nodes they are
evaluated against. It also owns the re-entrant lock that serializes node
state changes with the queue's match passes.

Listeners registered with ``add_listener`` are told whenever a node becomes
available (registration or a transition to IDLE). They are invoked after the
pool lock has been released.
"""

from __future__ import annotations
import threading
from typing import Callable, Dict, Iterable, List, Optional, Union

from labels import AtomRegistry, LabelExpression, parse, satisfies
from labels.expression import LabelAtom
from model.node import Node, NodeState
from .exceptions import DuplicateNodeError, NodeBusyError, UnknownNodeError
from utils.logger import get_logger

NodeListener = Callable[[Node], None]


class NodePool:
    """Registry of nodes in registration order.

    Example:
        >>> pool = NodePool()
        >>> node = pool.register_node("w32", "win 32bit")
        >>> [n.identity for n in pool.nodes_matching(pool.parse("win"))]
        ['w32']
    """

    def __init__(self, registry: Optional[AtomRegistry] = None):
        self.registry = registry if registry is not None else AtomRegistry()
        self._nodes: Dict[str, Node] = {}
        self._listeners: List[NodeListener] = []
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def parse(self, text: str) -> LabelExpression:
        """Parse a label expression against this pool's atom registry."""
        return parse(text, self.registry)

    def add_listener(self, listener: NodeListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    # Node lifecycle
    def register_node(
        self, identity: str, atoms: Union[str, Iterable[Union[str, LabelAtom]]] = ()
    ) -> Node:
        """Add an idle node to the pool.

        Args:
            identity: Unique node name, also used as its self-atom
            atoms: Either a whitespace-separated label string (``"win 32bit"``)
                or an iterable of label names / atoms

        Returns:
            The registered node

        Raises:
            DuplicateNodeError: If the identity is already registered
        """
        logger = get_logger()

        atom_set = self._atoms_for(atoms) | {self.registry.atom(identity)}

        with self._lock:
            if identity in self._nodes:
                raise DuplicateNodeError(f"Node already registered: {identity!r}")
            node = Node(identity, frozenset(atom_set))
            self._nodes[identity] = node

        logger.node_registered(identity, node.labels_string)
        self._notify(node)
        return node

    def remove_node(self, identity: str) -> Node:
        """Decommission a node.

        Any item still running there is left to the execution collaborator.

        Raises:
            UnknownNodeError: If the node is not registered
        """
        with self._lock:
            node = self._nodes.pop(identity, None)
            if node is None:
                raise UnknownNodeError(identity)

        if node.current_item is not None:
            get_logger().warning(
                f"Node '{identity}' removed while running item #{node.current_item}"
            )
        get_logger().debug(f"Node '{identity}' removed from pool")
        return node

    def set_state(self, identity: str, state: NodeState) -> None:
        """Change a node's state, e.g. when taken or released externally.

        Setting a node IDLE triggers the listeners. A node running a queue
        item is only released by completing that item.

        Raises:
            UnknownNodeError: If the node is not registered
            NodeBusyError: If the node is set IDLE while it holds a queue item
        """
        with self._lock:
            node = self.get(identity)
            if state is NodeState.IDLE and node.current_item is not None:
                raise NodeBusyError(
                    f"Node '{identity}' is running item #{node.current_item}; "
                    f"complete the item to release it"
                )
            old_state = node.state
            node.state = state

        get_logger().node_state_changed(identity, str(old_state), str(state))

        if state is NodeState.IDLE:
            self._notify(node)

    # Internal transitions used by the queue under the pool lock
    def _occupy(self, node: Node, item_id: int) -> None:
        node.state = NodeState.BUSY
        node.current_item = item_id
        get_logger().node_state_changed(node.identity, "IDLE", "BUSY")

    def _release(self, node: Node, item_id: int) -> bool:
        if node.current_item != item_id:
            return False
        node.state = NodeState.IDLE
        node.current_item = None
        get_logger().node_state_changed(node.identity, "BUSY", "IDLE")
        return True

    # Queries
    def get(self, identity: str) -> Node:
        with self._lock:
            try:
                return self._nodes[identity]
            except KeyError:
                raise UnknownNodeError(identity) from None

    def find(self, identity: str) -> Optional[Node]:
        with self._lock:
            return self._nodes.get(identity)

    def nodes(self) -> List[Node]:
        """All nodes in registration order."""
        with self._lock:
            return list(self._nodes.values())

    def idle_nodes(self) -> List[Node]:
        with self._lock:
            return [n for n in self._nodes.values() if n.is_idle]

    def nodes_matching(self, expression: Optional[LabelExpression]) -> List[Node]:
        """Nodes whose atoms satisfy the expression, in registration order."""
        with self._lock:
            return [n for n in self._nodes.values() if satisfies(expression, n.atoms)]

    def idle_nodes_matching(self, expression: Optional[LabelExpression]) -> List[Node]:
        with self._lock:
            return [
                n
                for n in self._nodes.values()
                if n.is_idle and satisfies(expression, n.atoms)
            ]

    def can_satisfy(self, expression: Optional[LabelExpression]) -> bool:
        """True if at least one registered node matches, busy or not."""
        return bool(self.nodes_matching(expression))

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._nodes

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def _atoms_for(self, atoms) -> set:
        if isinstance(atoms, str):
            return set(self.registry.atoms_from_string(atoms))
        result = set()
        for atom in atoms:
            if isinstance(atom, LabelAtom):
                result.add(self.registry.atom(atom.name))
            else:
                result.add(self.registry.atom(atom))
        return result

    def _notify(self, node: Node) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(node)
