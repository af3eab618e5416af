# labels/expression.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Immutable label atoms and label expression trees

"""Label atoms and label expression trees.

A label expression is a boolean formula over label atoms (node tags). Every
expression node is an instance of the single tagged type ``LabelExpression``
carrying its operator, its operands and a ``grouped`` flag recording whether
the user wrapped it in explicit parentheses. The flag only affects the
rendered name, never the truth value.

Operator precedence (tightest first):
    ATOM, NOT (``!``), AND (``&&``), OR (``||``), IMPLIES (``->``), IFF (``<->``)

Rendering rules:
    - An operand is parenthesized when its operator binds looser than the
      parent's, or when it is a right-hand ``->`` or ``<->`` under the same
      operator. ``&&`` and ``||`` are associative, so ``x&&(y&&z)`` built in
      code renders as ``x&&y&&z``.
    - A node marked as grouped is always rendered with one layer of
      parentheses, whether or not precedence requires them.

Example:
    >>> registry = AtomRegistry()
    >>> x = registry.atom("x")
    >>> x.or_(x).and_(x).name
    '(x||x)&&x'
    >>> x.and_(x).or_(x).name
    'x&&x||x'
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Tuple, Union


class Operator(Enum):
    """Label expression operators with their precedence and textual symbol.

    Lower precedence values bind tighter.
    """

    ATOM = (0, "")
    NOT = (1, "!")
    AND = (2, "&&")
    OR = (3, "||")
    IMPLIES = (4, "->")
    IFF = (5, "<->")

    def __init__(self, precedence: int, symbol: str):
        self.precedence = precedence
        self.symbol = symbol

    @property
    def arity(self) -> int:
        if self is Operator.ATOM:
            return 0
        if self is Operator.NOT:
            return 1
        return 2

    @property
    def is_binary(self) -> bool:
        return self.arity == 2


class LabelOperators:
    """Boolean combinators shared by atoms and expressions.

    Combinators never mutate their operands; each call builds a new
    expression node. Python reserves ``not``, ``and`` and ``or``, so the
    method names carry a trailing underscore. The ``~``, ``&`` and ``|``
    operators are provided as shorthand.
    """

    __slots__ = ()

    def as_expression(self) -> LabelExpression:
        raise NotImplementedError

    def not_(self) -> LabelExpression:
        return LabelExpression(Operator.NOT, (self.as_expression(),))

    def and_(self, other: LabelLike) -> LabelExpression:
        return self._binary(Operator.AND, other)

    def or_(self, other: LabelLike) -> LabelExpression:
        return self._binary(Operator.OR, other)

    def implies(self, other: LabelLike) -> LabelExpression:
        return self._binary(Operator.IMPLIES, other)

    def iff(self, other: LabelLike) -> LabelExpression:
        return self._binary(Operator.IFF, other)

    def __invert__(self) -> LabelExpression:
        return self.not_()

    def __and__(self, other):
        if not isinstance(other, LabelOperators):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other):
        if not isinstance(other, LabelOperators):
            return NotImplemented
        return self.or_(other)

    def matches(self, atoms) -> bool:
        """Check whether a set of atoms satisfies this label."""
        from .evaluator import satisfies

        return satisfies(self, atoms)

    def _binary(self, operator: Operator, other: LabelLike) -> LabelExpression:
        if not isinstance(other, LabelOperators):
            raise TypeError(f"Cannot combine a label with {type(other).__name__}")
        return LabelExpression(
            operator, (self.as_expression(), other.as_expression())
        )


@dataclass(frozen=True, slots=True)
class LabelAtom(LabelOperators):
    """A single named tag attached to nodes.

    Equality and hashing are by name. Canonical instances are handed out by
    ``AtomRegistry`` so that two references to the same name are the same
    object.

    Attributes:
        name: The label text, e.g. ``"linux"`` or ``"32bit.dot"``
    """

    name: str

    def as_expression(self) -> LabelExpression:
        return LabelExpression(Operator.ATOM, atom=self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class LabelExpression(LabelOperators):
    """Immutable node of a label expression tree.

    Attributes:
        operator: Node kind
        operands: Child expressions (empty for atoms, one for NOT, two otherwise)
        atom: The referenced atom for ``Operator.ATOM`` nodes
        grouped: True when the user wrote explicit parentheses around this node
        name: Canonical rendered text, computed on construction
    """

    operator: Operator
    operands: Tuple[LabelExpression, ...] = ()
    atom: Optional[LabelAtom] = None
    grouped: bool = False
    name: str = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        if len(self.operands) != self.operator.arity:
            raise ValueError(
                f"{self.operator.name} takes {self.operator.arity} operand(s), "
                f"got {len(self.operands)}"
            )
        if (self.operator is Operator.ATOM) != (self.atom is not None):
            raise ValueError("Only ATOM nodes reference an atom")
        object.__setattr__(self, "name", self._render())

    def as_expression(self) -> LabelExpression:
        return self

    def parenthesized(self) -> LabelExpression:
        """Return this expression marked as explicitly grouped.

        Grouping an already grouped expression returns it unchanged, so
        ``((x))`` keeps a single layer of parentheses.
        """
        if self.grouped:
            return self
        return replace(self, grouped=True)

    @property
    def precedence(self) -> int:
        return self.operator.precedence

    def atoms(self) -> FrozenSet[LabelAtom]:
        """Collect every atom referenced anywhere in the tree."""
        return frozenset(node.atom for node in self.walk() if node.atom is not None)

    def walk(self) -> Iterator[LabelExpression]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for operand in self.operands:
            yield from operand.walk()

    def _render(self) -> str:
        op = self.operator
        if op is Operator.ATOM:
            text = self.atom.name
        elif op is Operator.NOT:
            text = op.symbol + _operand_text(op, self.operands[0], right=False)
        else:
            lhs, rhs = self.operands
            text = (
                _operand_text(op, lhs, right=False)
                + op.symbol
                + _operand_text(op, rhs, right=True)
            )

        if self.grouped:
            return f"({text})"
        return text

    def __str__(self) -> str:
        return self.name


def _operand_text(parent: Operator, child: LabelExpression, right: bool) -> str:
    # A grouped child already carries its own parentheses.
    if child.grouped:
        return child.name

    looser = child.precedence > parent.precedence
    # Right-nested -> and <-> keep their parentheses.
    right_tie = (
        right
        and parent in (Operator.IMPLIES, Operator.IFF)
        and child.operator is parent
    )
    if looser or right_tie:
        return f"({child.name})"
    return child.name


LabelLike = Union[LabelAtom, LabelExpression]
