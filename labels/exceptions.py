# labels/exceptions.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Custom exceptions for label expression parsing

"""Domain-specific exceptions for label expression processing.

Malformed label expressions are always reported back to whoever typed them
(a job configuration or a direct submission). The queue never receives text
that failed to parse.
"""


class ParseError(RuntimeError):
    """Exception raised when label expression parsing fails.

    Indicates that the input does not conform to the label expression grammar:
    adjacent identifiers without an operator, illegal characters, unbalanced
    parentheses or empty input.
    """

    pass
