# tests/labels_tests/test_label_precedence.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Test suite for label parser operator precedence and associativity

"""Test suite for label parser operator precedence and associativity.

Operator precedence (tightest to loosest):
1. () - parentheses for grouping
2. ! - negation (right-associative)
3. && - conjunction (left-associative)
4. || - disjunction (left-associative)
5. -> - implication (left-associative)
6. <-> - equivalence (left-associative)
"""

import pytest
from labels import AtomRegistry, parse


class TestLabelPrecedence:
    """Test cases comparing parsed trees with trees built from combinators."""

    def setup_method(self):
        self.registry = AtomRegistry()
        self.a, self.b, self.c, self.d = (
            self.registry.atom(n) for n in ("a", "b", "c", "d")
        )

    def _expected(self, builder):
        return builder(self.a, self.b, self.c, self.d).as_expression()

    PRECEDENCE_TEST_CASES = [
        ("a || b && c", lambda a, b, c, d: a | (b & c)),
        ("a && b || c", lambda a, b, c, d: (a & b) | c),
        ("!a && b", lambda a, b, c, d: (~a) & b),
        ("a || !b && c", lambda a, b, c, d: a | ((~b) & c)),
        ("a -> b || c", lambda a, b, c, d: a.implies(b | c)),
        ("a || b -> c", lambda a, b, c, d: (a | b).implies(c)),
        ("a <-> b -> c", lambda a, b, c, d: a.iff(b.implies(c))),
        ("!a <-> b", lambda a, b, c, d: (~a).iff(b)),
        # Left associativity
        ("a && b && c", lambda a, b, c, d: (a & b) & c),
        ("a || b || c", lambda a, b, c, d: (a | b) | c),
        ("a -> b -> c", lambda a, b, c, d: a.implies(b).implies(c)),
        ("a <-> b <-> c", lambda a, b, c, d: a.iff(b).iff(c)),
        # NOT is right-associative
        ("!!!a", lambda a, b, c, d: ~~~a),
        # Complex chain
        (
            "a && b || c && d -> a",
            lambda a, b, c, d: ((a & b) | (c & d)).implies(a),
        ),
    ]

    @pytest.mark.parametrize("formula, builder", PRECEDENCE_TEST_CASES)
    def test_precedence_and_associativity(self, formula, builder):
        """Parsed tree equals the tree built with implicit precedence."""
        assert parse(formula, self.registry) == self._expected(builder)

    GROUPING_TEST_CASES = [
        ("(a || b) && c", lambda a, b, c, d: (a | b).parenthesized() & c),
        ("a && (b || c)", lambda a, b, c, d: a & (b | c).parenthesized()),
        ("!(a || b)", lambda a, b, c, d: (a | b).parenthesized().not_()),
        ("a -> (b -> c)", lambda a, b, c, d: a.implies(b.implies(c).parenthesized())),
    ]

    @pytest.mark.parametrize("formula, builder", GROUPING_TEST_CASES)
    def test_explicit_grouping_overrides_precedence(self, formula, builder):
        """Parentheses change the tree and are recorded on the grouped node."""
        assert parse(formula, self.registry) == self._expected(builder)

    def test_atoms_are_canonical(self):
        """Every occurrence of a label name resolves to the registry's atom."""
        expr = parse("a && (a || b)", self.registry)
        lhs = expr.operands[0]
        inner_lhs = expr.operands[1].operands[0]
        assert lhs.atom is self.a
        assert inner_lhs.atom is self.a
