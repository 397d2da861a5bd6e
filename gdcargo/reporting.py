"""Terminal outcome of a command and how it is shown to the operator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gdcargo.errors import GdcargoError
from gdcargo.utils import print_error, print_success


@dataclass(frozen=True)
class Success:
    message: str

    def to_message(self) -> str:
        return self.message


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str

    @classmethod
    def from_error(cls, error: GdcargoError) -> "Failure":
        return cls(kind=error.kind, message=error.to_message())

    def to_message(self) -> str:
        return self.message


ExecutionOutcome = Union[Success, Failure]


def report(outcome: ExecutionOutcome) -> int:
    """Print *outcome* (success to stdout, failure to stderr) and return the exit code."""
    if isinstance(outcome, Success):
        print_success(outcome.to_message())
        return 0
    print_error(outcome.to_message())
    return 1
