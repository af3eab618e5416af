# labels/grammar.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# LALR(1) grammar and parser for label expressions using SLY

"""Label expression grammar implementation using SLY parser generator.

The parser builds ``LabelExpression`` trees from the token stream produced by
``LabelLexer``. Atoms are resolved through an ``AtomRegistry`` so that every
reference to the same label name yields the same canonical atom.

Grammar Features:
- Boolean operators (NOT, AND, OR) plus implication and equivalence
- Parenthetical grouping, remembered on the node for rendering
- Meaningful error messages for malformed expressions

Operator Precedence (lowest to highest):
- IFF ('<->'): left-associative
- IMPLIES ('->'): left-associative
- OR ('||'): left-associative
- AND ('&&'): left-associative
- NOT ('!'): right-associative
"""

from sly import Parser
from .lexer import LabelLexer
from .atoms import AtomRegistry
from .expression import LabelExpression, Operator
from .exceptions import ParseError
from utils.logger import get_logger


class _LabelParser(Parser):
    """SLY-based LALR(1) parser for label expressions.

    Attributes:
        tokens: Token types from LabelLexer
        precedence: Operator precedence and associativity rules
        registry: Atom registry used to canonicalize label names
    """

    tokens = LabelLexer.tokens

    precedence = (
        ("left", "IFF"),
        ("left", "IMPLIES"),
        ("left", "OR"),
        ("left", "AND"),
        ("right", "NOT"),
    )

    def __init__(self, registry: AtomRegistry):
        self.registry = registry

    @_("expr")
    def start(self, p) -> LabelExpression:
        return p.expr

    @_("expr IFF expr")
    def expr(self, p) -> LabelExpression:
        return LabelExpression(Operator.IFF, (p.expr0, p.expr1))

    @_("expr IMPLIES expr")
    def expr(self, p) -> LabelExpression:
        return LabelExpression(Operator.IMPLIES, (p.expr0, p.expr1))

    @_("expr OR expr")
    def expr(self, p) -> LabelExpression:
        return LabelExpression(Operator.OR, (p.expr0, p.expr1))

    @_("expr AND expr")
    def expr(self, p) -> LabelExpression:
        return LabelExpression(Operator.AND, (p.expr0, p.expr1))

    @_("NOT expr")
    def expr(self, p) -> LabelExpression:
        return LabelExpression(Operator.NOT, (p.expr,))

    @_("LPAREN expr RPAREN")
    def expr(self, p) -> LabelExpression:
        """Explicit grouping is recorded so the rendered name keeps it."""
        return p.expr.parenthesized()

    @_("ATOM")
    def expr(self, p) -> LabelExpression:
        return self.registry.atom(p.ATOM).as_expression()

    def parse(self, text: str) -> LabelExpression:
        """Parse label expression text into a tree.

        Args:
            text: Label expression string to parse

        Returns:
            Root node of the parsed expression

        Raises:
            ParseError: If the expression is empty or contains syntax errors
        """
        logger = get_logger()
        logger.debug(f"Parsing label expression: {text}")

        if text.strip() == "":
            raise ParseError("Label expression is empty.")

        try:
            ast_result = super().parse(LabelLexer().tokenize(text))

            if ast_result is None:
                raise ParseError("Failed to parse label expression (syntax error).")

            logger.debug(f"Parsed label expression into {ast_result.operator.name}")
            return ast_result

        except ParseError:
            logger.debug("Parse error encountered")
            raise
        except Exception as e:
            logger.debug(f"Unexpected parsing error: {e}")
            raise ParseError(f"Parse failed: {e}") from e

    def error(self, token):
        """Handle syntax errors during parsing.

        Args:
            token: Problematic token or None for end of input

        Raises:
            ParseError: Always raises with detailed error information
        """
        if token:
            error_msg = (
                f"Syntax error near '{token.value}' "
                f"(type: {token.type}) at position {token.index}"
            )
        else:
            error_msg = "Syntax error: Unexpected end of label expression"

        raise ParseError(error_msg)
