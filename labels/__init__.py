# labels/__init__.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Label expression parsing, rendering and evaluation

"""Label expressions for node eligibility.

A label expression is a boolean formula over label atoms that decides which
nodes may run a build item. This package parses the textual form typed into
job configuration, renders trees back to a stable, re-parseable string and
evaluates them against a node's atom set.

Core Functions:
    parse: Converts expression text into a ``LabelExpression`` tree
    render: Produces the canonical text of an expression
    satisfies: Evaluates an expression against a set of atoms

Supported Syntax:
    - Atoms: ``linux``, ``32bit.dot``, ``solaris-x86``
    - Operators: ``!``, ``&&``, ``||``, ``->``, ``<->``
    - Parenthetical grouping, preserved in the rendered text

Example:
    >>> from labels import AtomRegistry, parse
    >>> registry = AtomRegistry()
    >>> parse("foo ->\\tbar", registry).name
    'foo->bar'
"""

from typing import Optional

from .atoms import AtomRegistry
from .evaluator import equivalent, satisfies, truth_table
from .exceptions import ParseError
from .expression import LabelAtom, LabelExpression, LabelOperators, Operator
from .grammar import _LabelParser
from utils.logger import get_logger


def parse(source: str, registry: Optional[AtomRegistry] = None) -> LabelExpression:
    """Parse label expression text into an expression tree.

    A fresh parser instance is used for each call. Atoms are canonicalized
    through ``registry``; callers that do not share atoms with a node pool
    may omit it and get a private registry.

    Args:
        source: Label expression text
        registry: Atom registry that owns the referenced atoms

    Returns:
        Root node of the parsed expression

    Raises:
        ParseError: The text is empty or malformed
    """
    logger = get_logger()
    logger.debug(f"Parsing label: {source}")

    if registry is None:
        registry = AtomRegistry()

    parser = _LabelParser(registry)

    try:
        result = parser.parse(source)
        logger.debug(f"Label parsed successfully, canonical form: {result.name}")
        return result

    except ParseError:
        logger.debug("ParseError encountered during label parsing")
        raise

    except Exception as exc:
        logger.debug(f"Unexpected parsing error: {type(exc).__name__}: {exc}")
        raise ParseError(str(exc)) from exc


def render(expression: LabelOperators) -> str:
    """Return the canonical, re-parseable text of a label expression."""
    return expression.as_expression().name


__all__ = [
    "AtomRegistry",
    "LabelAtom",
    "LabelExpression",
    "LabelOperators",
    "Operator",
    "ParseError",
    "equivalent",
    "parse",
    "render",
    "satisfies",
    "truth_table",
]
