"""
Progress tracking for a single check run.

The counters live on a CheckProgress object created per run and passed into
the reconciler, so two runs in one process never share state.
"""

from dataclasses import dataclass, field
from enum import Enum


class ModuleStatus(Enum):
    """Outcome of looking up one module name."""

    PENDING = "pending"
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass
class CheckProgress:
    """Counters for one reconcile pass."""

    total: int = 0
    processed: int = 0
    found: int = 0
    not_found: int = 0
    rows: int = 0
    statuses: dict[str, ModuleStatus] = field(default_factory=dict)

    @staticmethod
    def create(names: list[str]) -> "CheckProgress":
        """Create counters for the given (already deduplicated) names."""
        return CheckProgress(
            total=len(names),
            statuses={name: ModuleStatus.PENDING for name in names},
        )

    def record(self, name: str, status: ModuleStatus, rows: int = 0) -> None:
        self.statuses[name] = status
        self.processed += 1
        self.rows += rows
        if status is ModuleStatus.FOUND:
            self.found += 1
        elif status is ModuleStatus.NOT_FOUND:
            self.not_found += 1

    def summary(self) -> str:
        return (
            f"Checked: {self.processed}/{self.total} | Found: {self.found} | "
            f"Not found: {self.not_found} | Rows: {self.rows}"
        )
