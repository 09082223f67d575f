# egg_compare/storage/history_store.py

"""In-process, append-only store of daily price snapshots."""

import logging
import threading

from egg_compare.config.settings import Settings
from egg_compare.models.comparison import HistoryEntry

logger = logging.getLogger("egg_compare.price_history")


class PriceHistoryStore:
    """Date-ordered sequence of ``HistoryEntry`` objects.

    Entries live for the lifetime of the process only. Every access goes
    through one lock, so the day check and the append in
    :meth:`append_if_new_day` happen atomically with respect to other
    comparisons running in worker threads.
    """

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ── Recording ────────────────────────────────────────

    def append_if_new_day(self, entry: HistoryEntry) -> bool:
        """Append *entry* unless the last stored entry has the same date.

        Returns True when the entry was stored. An entry dated before
        the newest stored day is rejected to keep the sequence ascending.
        """
        with self._lock:
            if self._entries:
                last_date = self._entries[-1].date
                if last_date == entry.date:
                    return False
                if entry.date < last_date:
                    logger.warning(
                        "Rejected history entry for %s: older than "
                        "latest stored day %s",
                        entry.date,
                        last_date,
                    )
                    return False
            self._entries.append(entry)
            count = len(self._entries)

        logger.info(
            "Recorded price history for %s (%d entries)",
            entry.date,
            count,
        )
        return True

    # ── Querying ─────────────────────────────────────────

    def last(self, days: int | None = None) -> list[HistoryEntry]:
        """Return the most recent *days* entries, oldest first.

        ``None`` or a non-positive window falls back to
        ``Settings.DEFAULT_HISTORY_DAYS``.
        """
        window = (
            days
            if days is not None and days > 0
            else Settings.DEFAULT_HISTORY_DAYS
        )
        with self._lock:
            return list(self._entries[-window:])

    def summary(
        self, retailer: str, days: int | None = None,
    ) -> dict[str, object] | None:
        """Compute min / max / avg / latest price for *retailer*.

        Only the trailing window from :meth:`last` is considered.
        Returns ``None`` when the retailer has no recorded prices.
        """
        prices: list[float] = []
        for entry in self.last(days):
            price = entry.price_for(retailer)
            if price is not None:
                prices.append(price)
        if not prices:
            return None
        return {
            "min": min(prices),
            "max": max(prices),
            "avg": round(sum(prices) / len(prices), 2),
            "count": len(prices),
            "latest": prices[-1],
        }
