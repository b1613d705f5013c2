"""
tests/test_result_cache.py

ResultCache freshness, append-only history and ERROR rejection.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.indexing.cache import ResultCache
from app.indexing.types import CacheEntry, CheckStatus
from conftest import InMemoryCheckStorage


class TestCacheEntryFreshness:
    def test_recent_entry_is_fresh(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        entry = CacheEntry(url="u", status=CheckStatus.INDEXED, checked_at=now - timedelta(hours=10))
        assert entry.is_fresh(168, now=now)

    def test_old_entry_is_stale(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        entry = CacheEntry(url="u", status=CheckStatus.INDEXED, checked_at=now - timedelta(hours=169))
        assert not entry.is_fresh(168, now=now)

    def test_naive_timestamps_are_utc(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        entry = CacheEntry(url="u", status=CheckStatus.INDEXED, checked_at=datetime(2026, 10, 19, 11, 0))
        assert entry.is_fresh(2, now=now)
        assert not entry.is_fresh(0.5, now=now)


class TestResultCache:
    def test_put_then_get_round_trip(self, storage: InMemoryCheckStorage) -> None:
        cache = ResultCache(storage)
        assert cache.put("https://a.test/x", CheckStatus.INDEXED) is True

        entry = cache.get("https://a.test/x", 1)
        assert entry is not None
        assert entry.status == CheckStatus.INDEXED

    def test_zero_window_treats_entry_as_absent(self, storage: InMemoryCheckStorage) -> None:
        storage.scans.append(
            CacheEntry(
                url="https://a.test/x",
                status=CheckStatus.INDEXED,
                checked_at=datetime.now(timezone.utc) - timedelta(seconds=5),
            )
        )
        assert ResultCache(storage).get("https://a.test/x", 0) is None

    def test_error_is_never_stored(self, storage: InMemoryCheckStorage) -> None:
        cache = ResultCache(storage)
        assert cache.put("https://a.test/x", CheckStatus.ERROR) is False
        assert storage.scans == []
        assert cache.get("https://a.test/x", 168) is None

    def test_error_rows_from_storage_are_not_hits(self, storage: InMemoryCheckStorage) -> None:
        storage.scans.append(
            CacheEntry(url="https://a.test/x", status=CheckStatus.ERROR, checked_at=datetime.now(timezone.utc))
        )
        assert ResultCache(storage).get("https://a.test/x", 168) is None

    def test_history_is_append_only_and_latest_wins(self, storage: InMemoryCheckStorage) -> None:
        cache = ResultCache(storage)
        cache.put("https://a.test/x", CheckStatus.NOT_INDEXED)
        cache.put("https://a.test/x", CheckStatus.INDEXED)

        assert len(storage.scans) == 2
        entry = cache.get("https://a.test/x", 168)
        assert entry is not None
        assert entry.status == CheckStatus.INDEXED

    def test_stale_latest_entry_is_a_miss_but_kept(self, storage: InMemoryCheckStorage) -> None:
        storage.scans.append(
            CacheEntry(
                url="https://a.test/x",
                status=CheckStatus.INDEXED,
                checked_at=datetime.now(timezone.utc) - timedelta(hours=200),
            )
        )
        assert ResultCache(storage).get("https://a.test/x", 168) is None
        assert len(storage.scans) == 1
