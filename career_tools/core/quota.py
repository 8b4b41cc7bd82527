from __future__ import annotations

import logging
import math
import os
import sqlite3
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Protocol, Sequence

from career_tools.core.config import settings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

BURST_TIER = "burst"
MINUTE_TIER = "minute"
FREE_TIER = "free"


@dataclass(frozen=True)
class QuotaTier:
    name: str
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None = None
    tier: str = FREE_TIER
    window_seconds: int = 3600

    @property
    def reset_at_iso(self) -> str:
        return datetime.fromtimestamp(self.reset_at, tz=timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class QuotaWindow:
    window_start: float
    window_seconds: int
    count: int = 0

    def expired(self, now: float) -> bool:
        return now - self.window_start >= self.window_seconds


class QuotaStore(Protocol):
    def check_and_increment(self, identity: str, route: str, tiers: Sequence[QuotaTier]) -> QuotaDecision: ...

    def purge_expired(self) -> int: ...

    def clear(self) -> None: ...


def _retry_after(now: float, window_start: float, window_seconds: int) -> int:
    return max(1, math.ceil(window_seconds - (now - window_start)))


def _denied(tier: QuotaTier, window_start: float, now: float) -> QuotaDecision:
    return QuotaDecision(
        allowed=False,
        limit=tier.limit,
        remaining=0,
        reset_at=window_start + tier.window_seconds,
        retry_after_seconds=_retry_after(now, window_start, tier.window_seconds),
        tier=tier.name,
        window_seconds=tier.window_seconds,
    )


def _allowed(tier: QuotaTier, window_start: float, count: int) -> QuotaDecision:
    return QuotaDecision(
        allowed=True,
        limit=tier.limit,
        remaining=max(0, tier.limit - count),
        reset_at=window_start + tier.window_seconds,
        tier=tier.name,
        window_seconds=tier.window_seconds,
    )


class InMemoryQuotaStore:
    """Fixed-window counters held in process memory, one per (identity, route, tier).

    Tiers are checked in the order given and the first exhausted one denies
    the request without charging any tier. An allowed request charges every
    tier; the last tier is the headline quota reported back to the caller.
    """

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._windows: dict[tuple[str, str, str], QuotaWindow] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, identity: str, route: str, tiers: Sequence[QuotaTier]) -> QuotaDecision:
        if not tiers:
            raise ValueError("at least one quota tier is required")
        with self._lock:
            now = self._clock()
            windows: list[QuotaWindow] = []
            for tier in tiers:
                key = (identity, route, tier.name)
                window = self._windows.get(key)
                # A request landing exactly on the boundary opens a new window.
                if window is None or window.expired(now):
                    window = QuotaWindow(window_start=now, window_seconds=tier.window_seconds)
                    self._windows[key] = window
                windows.append(window)

            for tier, window in zip(tiers, windows):
                if window.count >= tier.limit:
                    return _denied(tier, window.window_start, now)

            for window in windows:
                window.count += 1
            return _allowed(tiers[-1], windows[-1].window_start, windows[-1].count)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            stale = [key for key, window in self._windows.items() if window.expired(now)]
            for key in stale:
                del self._windows[key]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


class SqliteQuotaStore:
    """Fixed-window counters in a SQLite file shared by every worker on the host."""

    def __init__(self, db_path: str, clock: Clock = time.time):
        self._db_path = db_path
        self._clock = clock
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS quota_windows (
                client_key TEXT NOT NULL,
                route_key TEXT NOT NULL,
                tier TEXT NOT NULL,
                window_start REAL NOT NULL,
                window_seconds INTEGER NOT NULL,
                count INTEGER NOT NULL,
                PRIMARY KEY (client_key, route_key, tier)
            );
            """
        )
        self._conn = conn
        return conn

    def check_and_increment(self, identity: str, route: str, tiers: Sequence[QuotaTier]) -> QuotaDecision:
        if not tiers:
            raise ValueError("at least one quota tier is required")
        with self._conn_lock:
            now = self._clock()
            try:
                return self._check_and_increment(
                    conn=self._get_connection(),
                    now=now,
                    identity=identity,
                    route=route,
                    tiers=tiers,
                )
            except sqlite3.Error as exc:
                # Soft limit: an unavailable counter store lets the request through.
                logger.warning("quota_store_unavailable route=%s: %s", route, exc)
                return _allowed(tiers[-1], now, 1)

    def _check_and_increment(
        self,
        *,
        conn: sqlite3.Connection,
        now: float,
        identity: str,
        route: str,
        tiers: Sequence[QuotaTier],
    ) -> QuotaDecision:
        cursor = conn.cursor()
        cursor.execute("BEGIN IMMEDIATE")
        try:
            windows: list[tuple[float, int]] = []
            for tier in tiers:
                cursor.execute(
                    """
                    SELECT window_start, count
                    FROM quota_windows
                    WHERE client_key = ? AND route_key = ? AND tier = ?
                    """,
                    (identity, route, tier.name),
                )
                row = cursor.fetchone()
                if row is None or now - float(row[0]) >= tier.window_seconds:
                    windows.append((now, 0))
                else:
                    windows.append((float(row[0]), int(row[1])))

            for tier, (window_start, count) in zip(tiers, windows):
                if count >= tier.limit:
                    conn.rollback()
                    return _denied(tier, window_start, now)

            cursor.executemany(
                """
                INSERT OR REPLACE INTO quota_windows
                    (client_key, route_key, tier, window_start, window_seconds, count)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (identity, route, tier.name, window_start, tier.window_seconds, count + 1)
                    for tier, (window_start, count) in zip(tiers, windows)
                ],
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise

        window_start, count = windows[-1]
        return _allowed(tiers[-1], window_start, count + 1)

    def purge_expired(self) -> int:
        with self._conn_lock:
            conn = self._get_connection()
            cursor = conn.execute(
                "DELETE FROM quota_windows WHERE window_start + window_seconds <= ?",
                (self._clock(),),
            )
            return cursor.rowcount or 0

    def clear(self) -> None:
        with self._conn_lock:
            self._get_connection().execute("DELETE FROM quota_windows")

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def build_tiers(
    *, burst_limit: int, burst_window_seconds: int, minute_limit: int, free_limit: int
) -> tuple[QuotaTier, ...]:
    """Shortest window first; a tier with a limit of 0 is switched off."""
    tiers = []
    if burst_limit > 0:
        tiers.append(QuotaTier(BURST_TIER, burst_limit, burst_window_seconds))
    if minute_limit > 0:
        tiers.append(QuotaTier(MINUTE_TIER, minute_limit, 60))
    tiers.append(QuotaTier(FREE_TIER, free_limit, settings.quota_window_seconds))
    return tuple(tiers)


def build_quota_store() -> QuotaStore:
    if settings.quota_backend == "sqlite":
        return SqliteQuotaStore(settings.quota_db_path)
    return InMemoryQuotaStore()


@lru_cache(maxsize=1)
def get_quota_store() -> QuotaStore:
    return build_quota_store()
