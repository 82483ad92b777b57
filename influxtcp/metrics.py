"""Write metrics: thread-safe counters and flush-size percentiles."""

import collections
import threading
import time


class WriteMetrics:
    """Collects statistics about points written and flushes performed."""

    def __init__(self, window: int = 1000) -> None:
        self._lock = threading.Lock()
        self._points: int = 0
        self._splits: int = 0
        self._split_parts: int = 0
        self._flushes: int = 0
        self._failed_flushes: int = 0
        self._bytes_sent: int = 0
        self._max_flush_bytes: int = 0
        # percentiles cover only the most recent flushes
        self._flush_sizes = collections.deque(maxlen=window)
        self._start_time = time.monotonic()

    def record_points(self, count: int) -> None:
        """Record *count* points handed to the writer."""
        with self._lock:
            self._points += count

    def record_split(self, parts: int) -> None:
        """Record one oversized point split into *parts* sub-points."""
        with self._lock:
            self._splits += 1
            self._split_parts += parts

    def record_flush(self, nbytes: int, ok: bool = True) -> None:
        """Record one transport write of *nbytes*.

        Args:
            nbytes: Size of the chunk handed to the transport.
            ok: False when the transport raised for this chunk.
        """
        with self._lock:
            self._flushes += 1
            if ok:
                self._bytes_sent += nbytes
                self._max_flush_bytes = max(self._max_flush_bytes, nbytes)
                self._flush_sizes.append(nbytes)
            else:
                self._failed_flushes += 1

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all collected metrics."""
        with self._lock:
            sizes = list(self._flush_sizes)
            ok_flushes = self._flushes - self._failed_flushes
            return {
                "points": self._points,
                "splits": self._splits,
                "split_parts": self._split_parts,
                "flushes": self._flushes,
                "failed_flushes": self._failed_flushes,
                "bytes_sent": self._bytes_sent,
                "avg_flush_bytes": self._bytes_sent / ok_flushes if ok_flushes else 0.0,
                "p50_flush_bytes": self._percentile(sizes, 50),
                "p95_flush_bytes": self._percentile(sizes, 95),
                "max_flush_bytes": self._max_flush_bytes,
                "window_size": len(sizes),
                "uptime_seconds": time.monotonic() - self._start_time,
            }

    @staticmethod
    def _percentile(data: list, pct: float) -> float:
        """Interpolated percentile (0-100) of *data*, 0.0 when empty."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        n = len(sorted_data)

        if n == 1:
            return float(sorted_data[0])

        idx = (pct / 100) * (n - 1)
        lower = int(idx)
        upper = lower + 1
        fraction = idx - lower

        if upper >= n:
            return float(sorted_data[-1])

        return float(sorted_data[lower] + fraction * (sorted_data[upper] - sorted_data[lower]))
