# utils/scenario_reader.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# CSV readers for node pools and job submission scenarios

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Set

from model.run_reference import RunReference
from utils.logger import get_logger


class ScenarioFormatError(Exception):
    """Exception raised when scenario files contain invalid format or data."""

    pass


@dataclass(frozen=True)
class NodeSpec:
    """One row of a nodes file."""

    name: str
    labels: str


@dataclass(frozen=True)
class JobSpec:
    """One row of a jobs file.

    Attributes:
        task: Job name
        label: Label expression text, empty for "any node"
        upstream: Task whose running builds block this job
        after: Externalizable run id (``job#number``) that blocks this job
    """

    task: str
    label: str = ""
    upstream: Optional[str] = None
    after: Optional[str] = None


def read_nodes(filepath: str) -> List[NodeSpec]:
    """Read node definitions from a CSV file.

    Expected CSV format:
        name,labels
        w32,win 32bit
        w64,win 64bit

    Args:
        filepath: Path to the CSV nodes file

    Returns:
        Node specs in file order, which is also their registration order

    Raises:
        ScenarioFormatError: If the file is missing, malformed or repeats a name
    """
    nodes = []
    seen: Set[str] = set()

    for row_num, row in _read_rows(filepath, {"name", "labels"}):
        name = (row["name"] or "").strip()
        if not name:
            raise ScenarioFormatError(f"Row {row_num}: empty node name")
        if name in seen:
            raise ScenarioFormatError(f"Row {row_num}: duplicate node name '{name}'")
        seen.add(name)
        nodes.append(NodeSpec(name, (row["labels"] or "").strip()))

    return nodes


def read_jobs(filepath: str) -> List[JobSpec]:
    """Read job submissions from a CSV file.

    Expected CSV format (``upstream`` and ``after`` columns are optional):
        task,label,upstream,after
        p1,win && 32bit,,
        p2,win && 32bit,p1,
        p3,win,,p1#1

    Args:
        filepath: Path to the CSV jobs file

    Returns:
        Job specs in submission order

    Raises:
        ScenarioFormatError: If the file is missing or malformed
    """
    jobs = []
    for row_num, row in _read_rows(filepath, {"task", "label"}):
        task = (row["task"] or "").strip()
        if not task:
            raise ScenarioFormatError(f"Row {row_num}: empty task name")
        if "#" in task:
            raise ScenarioFormatError(f"Row {row_num}: task name may not contain '#'")

        after = _optional(row.get("after"))
        if after is not None:
            try:
                RunReference.from_externalizable_id(after)
            except ValueError as e:
                raise ScenarioFormatError(f"Row {row_num}: {e}") from e

        jobs.append(
            JobSpec(
                task=task,
                label=(row["label"] or "").strip(),
                upstream=_optional(row.get("upstream")),
                after=after,
            )
        )
    return jobs


def _read_rows(filepath: str, required_headers: Set[str]) -> Iterator[tuple]:
    logger = get_logger()
    path = Path(filepath)

    if not path.exists():
        raise ScenarioFormatError(f"Scenario file not found: {filepath}")

    logger.debug(f"Reading scenario file: {filepath}")

    try:
        with open(path, "r", newline="", encoding="utf-8") as file:
            reader = csv.DictReader(file)

            fieldnames = {f.strip() for f in (reader.fieldnames or [])}
            if not required_headers.issubset(fieldnames):
                missing = required_headers - fieldnames
                raise ScenarioFormatError(f"Missing required headers: {missing}")

            for row_num, row in enumerate(reader, start=2):
                row = {(k or "").strip(): v for k, v in row.items()}
                logger.debug(f"Read scenario row {row_num}: {row}")
                yield row_num, row

    except ScenarioFormatError:
        raise
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise ScenarioFormatError(f"Error reading scenario file: {e}") from e


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
