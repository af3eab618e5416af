# model/run_reference.py

"""
RunReference
============

Identifies a single build run by job name and build number. The
externalizable form is ``"<job>#<number>"``, e.g. ``"nightly#42"``, which is
how blocking policies and configuration files refer to a specific run.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RunReference:
    job_name: str
    number: int

    def __post_init__(self):
        if not self.job_name or "#" in self.job_name:
            raise ValueError(f"Invalid job name for a run reference: {self.job_name!r}")
        if self.number < 1:
            raise ValueError(f"Build numbers start at 1, got {self.number}")

    @classmethod
    def from_externalizable_id(cls, run_id: str) -> RunReference:
        """Parse ``"job#number"`` into a reference.

        Raises:
            ValueError: if the id is not exactly one job name and one number
        """
        parts = run_id.strip().split("#")
        if len(parts) != 2:
            raise ValueError(f"Run id must look like 'job#number': {run_id!r}")

        job_name, number = parts[0].strip(), parts[1].strip()
        try:
            return cls(job_name, int(number))
        except ValueError as e:
            raise ValueError(f"Invalid run id {run_id!r}: {e}") from e

    @property
    def externalizable_id(self) -> str:
        return f"{self.job_name}#{self.number}"

    def short_description(self, parameter_name: str) -> str:
        return f"(RunReference) {parameter_name}='{self.externalizable_id}'"

    def __str__(self) -> str:
        return self.externalizable_id
