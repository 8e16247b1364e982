"""
Structured step logger.

Provides StepLogger, a lightweight observer that records StepRecord objects
into an in-memory list during simulation. Supports serialisation to
list-of-dicts for downstream persistence.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..simulation.annual_step import SimulationState, StepRecord

_SERIES_FIELDS = ("investment", "damage", "W", "R", "P", "D", "B")


class StepLogger:
    """Records StepRecord objects produced during a simulation run.

    Intended for use as a post-step hook with the SimulationRunner:

        logger = StepLogger()
        runner.register_post_hook(logger.hook)

    Attributes:
        max_records: Maximum number of records to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty logger.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[StepRecord] = []

    def record(self, record: StepRecord) -> None:
        """Append a record to the log."""
        self._records.append(record)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)

    def hook(
        self,
        before: SimulationState,
        after: SimulationState,
        record: StepRecord,
    ) -> None:
        """Post-step hook signature accepted by SimulationRunner."""
        self.record(record)

    def records(self) -> List[StepRecord]:
        """Return all recorded steps in chronological order (copy)."""
        return list(self._records)

    def clear(self) -> None:
        """Empty the log."""
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialise all records to plain dictionaries."""
        return [r.to_dict() for r in self._records]

    def series(self) -> Dict[str, List[float]]:
        """Return per-field time series (investment, damage and each lever)."""
        return {
            name: [getattr(r, name) for r in self._records]
            for name in _SERIES_FIELDS
        }

    def infeasible_years(self) -> List[int]:
        """Years whose record carries the infeasibility sentinel."""
        return [r.year for r in self._records if not r.feasible]
