"""Per-entry results of multi-entry registry operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class OutcomeStatus(Enum):
    SAVED = "saved"
    RELOADED = "reloaded"
    CREATED = "created"
    REMOVED = "removed"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    """What happened to one file during a batch operation."""

    file_name: str
    status: OutcomeStatus
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED


@dataclass
class BatchReport:
    """
    Outcomes of ``save_all``/``reload_all``/``load_all`` keyed by file name.

    ``success_count`` counts entries that were saved, reloaded or created;
    evicted entries are listed separately in ``removed``.
    """

    outcomes: Dict[str, Outcome] = field(default_factory=dict)

    def record(self, outcome: Outcome) -> None:
        self.outcomes[outcome.file_name] = outcome

    def _with_status(self, *statuses: OutcomeStatus) -> List[str]:
        return [name for name, outcome in self.outcomes.items() if outcome.status in statuses]

    @property
    def succeeded(self) -> List[str]:
        return self._with_status(OutcomeStatus.SAVED, OutcomeStatus.RELOADED, OutcomeStatus.CREATED)

    @property
    def failed(self) -> List[str]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def removed(self) -> List[str]:
        return self._with_status(OutcomeStatus.REMOVED)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def ok(self) -> bool:
        return not self.failed

    def __str__(self) -> str:
        return (
            f"{self.success_count} succeeded, {len(self.failed)} failed, "
            f"{len(self.removed)} removed"
        )
