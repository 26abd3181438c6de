"""
match_collector.py

Keeps the N longest matches seen during a scan.
"""

import bisect
from typing import List, NamedTuple

from errors import ConfigurationError


class MatchRecord(NamedTuple):
    # length: length of the dictionary word that matched (the only ranking key)
    length: int
    # result: the line printed for this match
    result: str


def _by_length(record: MatchRecord) -> int:
    return record.length


class MatchCollector:
    """
    Fixed-capacity list of matches kept in ascending order of length.

    Each offered record is placed by binary search; when the list grows past
    `capacity` the shortest entry is dropped. Records of equal length keep
    their arrival order, but which of them survives an eviction is not part
    of the contract.
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigurationError(
                f"match collector capacity must be a positive integer, got {capacity!r}"
            )
        self.capacity = capacity
        self._records: List[MatchRecord] = []

    def __len__(self):
        return len(self._records)

    def offer(self, record: MatchRecord):
        bisect.insort(self._records, record, key=_by_length)
        if len(self._records) > self.capacity:
            del self._records[0]

    def drain_descending(self) -> List[MatchRecord]:
        """Return the retained records longest first and empty the collector."""
        records, self._records = self._records, []
        records.reverse()
        return records
