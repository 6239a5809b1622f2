"""
In-memory snapshot store for the published aircraft board.

Holds exactly one current Snapshot, the merged output of the most recent
ingestion cycle, and hands it out to any number of concurrent readers.

Design rationale:
Snapshots are immutable (frozen dataclasses holding a tuple of frozen
records), so publishing a new one is a single reference swap under the
lock. Readers take the lock only long enough to grab that reference,
which means a reader sees either the whole old snapshot or the whole new
one and is never held up by a cycle that is still enriching aircraft.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

UNKNOWN = 'Unknown'
ERROR_SUFFIX = ' (Error fetching data)'


@dataclass(frozen=True)
class AircraftRecord:
    """
    Display-ready aircraft entry for the board.

    Built once per cycle from registry metadata plus an optional route,
    and never modified afterwards.
    """
    registration: str
    owner: str
    manufacturer: str
    type: str
    origin: str = UNKNOWN
    destination: str = UNKNOWN
    last_updated: str = ''

    def to_dict(self) -> dict:
        """Convert to the JSON feed representation."""
        return {
            'Registration': self.registration,
            'Owner': self.owner,
            'Manufacturer': self.manufacturer,
            'Type': self.type,
            'Origin': self.origin,
            'Destination': self.destination,
            'LastUpdated': self.last_updated,
        }


@dataclass(frozen=True)
class Snapshot:
    """The complete set of records published by one cycle."""
    records: Tuple[AircraftRecord, ...] = ()
    last_updated: str = ''
    error: bool = False

    def __post_init__(self):
        # Callers may hand in a list; freeze it so the snapshot stays immutable
        if not isinstance(self.records, tuple):
            object.__setattr__(self, 'records', tuple(self.records))

    @property
    def count(self) -> int:
        return len(self.records)

    @classmethod
    def failed(cls, timestamp: str) -> 'Snapshot':
        """Empty snapshot for a cycle whose acquisition step failed."""
        return cls(records=(), last_updated=timestamp + ERROR_SUFFIX, error=True)

    def to_dict(self) -> dict:
        return {
            'aircraft': [record.to_dict() for record in self.records],
            'last_update': self.last_updated,
            'count': self.count,
        }


class SnapshotStore:
    """
    Thread-safe holder of the current Snapshot.

    The ingestion pipeline is the only writer (via replace()); the read
    surfaces only ever call read().
    """

    def __init__(self, initial: Snapshot = None):
        self._snapshot = initial or Snapshot()
        self._lock = threading.Lock()
        self._replacements = 0

    def read(self) -> Snapshot:
        """Return the current snapshot."""
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: Snapshot) -> None:
        """Atomically publish a new snapshot, discarding the previous one."""
        if not isinstance(snapshot, Snapshot):
            raise TypeError(f'expected Snapshot, got {type(snapshot).__name__}')

        with self._lock:
            self._snapshot = snapshot
            self._replacements += 1

        logger.debug(f'Snapshot replaced: {snapshot.count} aircraft at {snapshot.last_updated}')

    @property
    def stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            snapshot = self._snapshot
            replacements = self._replacements
        return {
            'count': snapshot.count,
            'last_updated': snapshot.last_updated,
            'error': snapshot.error,
            'replacements': replacements,
        }
