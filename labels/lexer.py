# labels/lexer.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Lexical analyzer for label expression tokenization using SLY

"""Lexical analyzer for label expression strings.

This module breaks label expressions such as ``win && (32bit || solaris-x86)``
into tokens for the parser. Label atoms are free-form node tags, so the atom
pattern is deliberately wide: Unicode letters and digits, dots, underscores and
dashes.

Supported Tokens:
- Operators: !, &&, ||, ->, <->, (, )
- Atoms: node labels like ``linux``, ``32bit.dot``, ``solaris-x86``
- Whitespace: ignored during tokenization
"""

from sly import Lexer
from utils.logger import get_logger


class LabelLexer(Lexer):
    """SLY-based lexer for label expression tokenization.

    Token patterns are tried in definition order, so the two-character
    operators come first and ``<->`` is tried before ``->``. A dash inside an
    atom is accepted unless it is immediately followed by ``>``, which lets
    ``foo->bar`` split into an implication while ``solaris-x86`` stays whole.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
    """

    tokens = {
        "ATOM",
        "NOT",
        "AND",
        "OR",
        "IMPLIES",
        "IFF",
        "LPAREN",
        "RPAREN",
    }

    ignore = " \t\r\n"

    IFF = r"<->"
    IMPLIES = r"->"
    AND = r"&&"
    OR = r"\|\|"
    NOT = r"!"
    LPAREN = r"\("
    RPAREN = r"\)"

    ATOM = r"(?:[\w.]|-(?!>))+"

    def error(self, t):
        """Handle illegal characters during tokenization.

        Args:
            t: SLY token object containing error context

        Raises:
            ValueError: Always raised with character and position information
        """
        logger = get_logger()

        illegal_char = t.value[0]
        error_pos = self.index

        logger.debug(f"Illegal character '{illegal_char}' at position {error_pos}")

        self.index += 1

        raise ValueError(
            f"Illegal character '{illegal_char}' encountered at position {error_pos}"
        )
