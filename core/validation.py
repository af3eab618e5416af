# core/validation.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Label expression checks for job configuration input

"""Validation of label expressions typed into job configuration.

``check_label`` is the logic behind a configuration form's label field: it
reports malformed expressions as errors and warns when no registered node
could ever run the job. An empty label is valid and means "any node".
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto

from labels import ParseError
from .pool import NodePool
from utils.logger import get_logger


class CheckKind(Enum):
    OK = auto()
    WARNING = auto()
    ERROR = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LabelCheck:
    kind: CheckKind
    message: str

    @property
    def ok(self) -> bool:
        return self.kind is not CheckKind.ERROR

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


def check_label(text: str, pool: NodePool) -> LabelCheck:
    """Validate label expression text against the nodes currently in ``pool``.

    Args:
        text: Label expression as typed by the user
        pool: Node pool supplying both the atom registry and the nodes

    Returns:
        ERROR with the parser message for malformed text, WARNING when no
        node matches, OK otherwise
    """
    logger = get_logger()

    if not text.strip():
        return LabelCheck(CheckKind.OK, "Any node may run this job")

    try:
        expression = pool.parse(text)
    except ParseError as e:
        logger.validation_result(False, f"Invalid label expression '{text}': {e}")
        return LabelCheck(CheckKind.ERROR, f"Invalid label expression: {e}")

    matching = pool.nodes_matching(expression)
    if not matching:
        return LabelCheck(
            CheckKind.WARNING, f"No node matches the label '{expression.name}'"
        )

    logger.validation_result(True, f"Label '{expression.name}' is valid")
    names = ", ".join(node.identity for node in matching)
    return LabelCheck(
        CheckKind.OK,
        f"Label '{expression.name}' is serviced by {len(matching)} node(s): {names}",
    )
