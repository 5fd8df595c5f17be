"""VITRINE — Sales Data Cache.

Caller-owned holder for the latest canonical record set. A refresh swaps
the whole snapshot; readers always see one complete ingestion cycle.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from vitrine.models.sales_models import SalesRecord
from vitrine.core.logging import get_logger

logger = get_logger("cache")


@dataclass(frozen=True)
class SalesSnapshot:
    """One ingestion cycle's output."""

    records: Tuple[SalesRecord, ...] = ()
    source: str = ""
    loaded_at: Optional[datetime] = None
    version: int = 0


class SalesDataCache:
    """Explicit cache for the canonical record set.

    Create one per application and pass it to whatever needs the data.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = SalesSnapshot()

    @property
    def snapshot(self) -> SalesSnapshot:
        return self._snapshot

    @property
    def records(self) -> Tuple[SalesRecord, ...]:
        return self._snapshot.records

    @property
    def is_empty(self) -> bool:
        return not self._snapshot.records

    def replace(self, records, source: str = "") -> SalesSnapshot:
        """Install a new record set, discarding the previous one entirely."""
        with self._lock:
            self._snapshot = SalesSnapshot(
                records=tuple(records),
                source=source,
                loaded_at=datetime.now(timezone.utc),
                version=self._snapshot.version + 1,
            )
            snapshot = self._snapshot
        logger.info(
            f"Cache replaced with {len(snapshot.records)} records (v{snapshot.version})",
            extra={"records": len(snapshot.records)},
        )
        return snapshot

    def invalidate(self) -> None:
        """Mark the snapshot stale so the next sync refetches."""
        with self._lock:
            self._snapshot = SalesSnapshot(
                records=self._snapshot.records,
                source=self._snapshot.source,
                loaded_at=None,
                version=self._snapshot.version,
            )
        logger.info("Cache invalidated")

    def clear(self) -> None:
        with self._lock:
            self._snapshot = SalesSnapshot(version=self._snapshot.version + 1)

    def is_fresh(self, max_age_seconds: float) -> bool:
        """True when the snapshot was loaded less than ``max_age_seconds`` ago."""
        loaded_at = self._snapshot.loaded_at
        if loaded_at is None:
            return False
        age = datetime.now(timezone.utc) - loaded_at
        return age < timedelta(seconds=max_age_seconds)
