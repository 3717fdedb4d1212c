from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from tweetswarm_plot.records import TweetRecord


@dataclass
class SelectionSet:
    """Records toggled by clicks, keyed by `idx`, most recently selected first."""

    _records: list[TweetRecord] = field(default_factory=list)

    def toggle(self, record: TweetRecord) -> bool:
        """Insert at the front if absent, remove if present; returns new membership."""
        for i, existing in enumerate(self._records):
            if existing.idx == record.idx:
                del self._records[i]
                return False
        self._records.insert(0, record)
        return True

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, idx: object) -> bool:
        return any(record.idx == idx for record in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TweetRecord]:
        return iter(tuple(self._records))

    def ids(self) -> tuple[Any, ...]:
        return tuple(record.idx for record in self._records)

    def records(self) -> tuple[TweetRecord, ...]:
        return tuple(self._records)
