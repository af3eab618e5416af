# labels/atoms.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Registry of canonical label atoms

"""Canonical label atom registry.

Each registry maps label names to a single ``LabelAtom`` instance, creating it
on first reference. Registries are plain objects owned by a node pool (and
handed to the parser), so independent schedulers never share atoms by
accident.
"""

import threading
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

from .expression import LabelAtom
from utils.logger import get_logger


class AtomRegistry:
    """Thread-safe mapping from label names to canonical atoms.

    Atoms are never removed once created.

    Example:
        >>> registry = AtomRegistry()
        >>> registry.atom("linux") is registry.atom("linux")
        True
    """

    def __init__(self):
        self._atoms: Dict[str, LabelAtom] = {}
        self._lock = threading.Lock()

    def atom(self, name: str) -> LabelAtom:
        """Return the canonical atom for ``name``, creating it if needed.

        Args:
            name: Label text; surrounding whitespace is stripped

        Returns:
            The single ``LabelAtom`` registered under that name

        Raises:
            ValueError: If the name is empty or contains whitespace
        """
        name = name.strip()
        if not name:
            raise ValueError("Label atom name must not be empty")
        if any(ch.isspace() for ch in name):
            raise ValueError(f"Label atom name must not contain whitespace: {name!r}")

        with self._lock:
            existing = self._atoms.get(name)
            if existing is not None:
                return existing

            created = LabelAtom(name)
            self._atoms[name] = created

        get_logger().debug(f"Registered label atom '{name}'")
        return created

    def get(self, name: str) -> Optional[LabelAtom]:
        """Look up an atom without creating it."""
        with self._lock:
            return self._atoms.get(name)

    def atoms_from_string(self, labels: str) -> FrozenSet[LabelAtom]:
        """Parse a whitespace-separated label string like ``"win 32bit"``.

        Args:
            labels: Label names separated by spaces or tabs

        Returns:
            Frozen set of canonical atoms, empty for a blank string
        """
        return self.atoms_for(labels.split())

    def atoms_for(self, names: Iterable[str]) -> FrozenSet[LabelAtom]:
        return frozenset(self.atom(name) for name in names)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._atoms)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._atoms

    def __len__(self) -> int:
        with self._lock:
            return len(self._atoms)

    def __iter__(self) -> Iterator[LabelAtom]:
        with self._lock:
            return iter(list(self._atoms.values()))
