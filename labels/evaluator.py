# labels/evaluator.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Boolean evaluation of label expressions against node atom sets

"""Evaluation of label expressions against a node's atoms.

Evaluation is pure: an ``ATOM`` holds when the atom is in the node's set, the
connectives follow ordinary two-valued logic. Both operands of a binary node
are always evaluated. A missing expression (``None``) is satisfied by every
node.
"""

from __future__ import annotations
from itertools import product
from typing import AbstractSet, Dict, Iterable, Optional, Union

from .expression import LabelAtom, LabelExpression, LabelOperators, Operator
from utils.logger import get_logger


def satisfies(
    expression: Optional[Union[LabelExpression, LabelAtom]],
    atoms: AbstractSet[LabelAtom],
) -> bool:
    """Decide whether a set of atoms satisfies a label expression.

    Args:
        expression: Expression tree, a bare atom, or None for "any node"
        atoms: The node's atom set (including its self-atom)

    Returns:
        True if the expression holds for the given atoms
    """
    if expression is None:
        return True
    return _holds(expression.as_expression(), atoms)


def _holds(expr: LabelExpression, atoms: AbstractSet[LabelAtom]) -> bool:
    op = expr.operator

    if op is Operator.ATOM:
        return expr.atom in atoms

    if op is Operator.NOT:
        return not _holds(expr.operands[0], atoms)

    lhs = _holds(expr.operands[0], atoms)
    rhs = _holds(expr.operands[1], atoms)

    if op is Operator.AND:
        return lhs and rhs
    elif op is Operator.OR:
        return lhs or rhs
    elif op is Operator.IMPLIES:
        return (not lhs) or rhs
    elif op is Operator.IFF:
        return lhs == rhs
    else:
        raise ValueError(f"Unknown operator: {op}")


def truth_table(
    expression: LabelOperators, over: Optional[Iterable[LabelAtom]] = None
) -> Dict[frozenset, bool]:
    """Tabulate an expression over every assignment of its atoms.

    Args:
        expression: Expression or atom to tabulate
        over: Atoms to vary; defaults to the atoms the expression references

    Returns:
        Mapping from the set of true atoms to the expression's value
    """
    expr = expression.as_expression()
    variables = sorted(set(over) if over is not None else expr.atoms(), key=str)

    table = {}
    for bits in product((False, True), repeat=len(variables)):
        true_atoms = frozenset(a for a, bit in zip(variables, bits) if bit)
        table[true_atoms] = _holds(expr, true_atoms)
    return table


def equivalent(left: LabelOperators, right: LabelOperators) -> bool:
    """Check whether two label expressions have the same truth table.

    Explicit grouping and operator layout may differ; only the boolean
    function over the union of both atom sets is compared.
    """
    atoms = left.as_expression().atoms() | right.as_expression().atoms()
    result = truth_table(left, atoms) == truth_table(right, atoms)

    get_logger().debug(
        f"Equivalence of '{left}' and '{right}' over {len(atoms)} atoms: {result}"
    )
    return result
