from __future__ import annotations

import logging
import threading
import time
from collections import deque
from statistics import mean
from typing import Any, Deque, Dict, Iterable, Optional, Tuple

LabelKey = Tuple[Tuple[str, str], ...]  # sorted (k, v) pairs
MetricKey = Tuple[str, LabelKey]


def _labels_key(labels: Dict[str, Any] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _pct(sorted_vals: Iterable[float], q: float) -> float:
    vals = list(sorted_vals)
    if not vals:
        return 0.0
    idx = max(0, min(len(vals) - 1, int(round((len(vals) - 1) * q))))
    return vals[idx]


# ---------------- Metric types ----------------

class _Metric:
    def __init__(self, name: str, labels: LabelKey):
        self.name = name
        self.labels = labels
        self._lock = threading.Lock()


class Counter(_Metric):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0

    def inc(self, n: float = 1.0) -> None:
        with self._lock:
            self._value += n

    def value(self) -> float:
        with self._lock:
            return self._value


class Gauge(_Metric):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0

    def set(self, v: float) -> None:
        with self._lock:
            self._value = float(v)

    def value(self) -> float:
        with self._lock:
            return self._value


class Histogram(_Metric):
    def __init__(self, name: str, labels: LabelKey, maxlen: int = 2048):
        super().__init__(name, labels)
        self._values: Deque[float] = deque(maxlen=maxlen)

    def observe(self, v: float) -> None:
        with self._lock:
            self._values.append(float(v))

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            vals = list(self._values)
        if not vals:
            return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
        vals_sorted = sorted(vals)
        return {
            "count": float(len(vals)),
            "min": vals_sorted[0],
            "max": vals_sorted[-1],
            "mean": mean(vals),
            "p50": _pct(vals_sorted, 0.50),
            "p90": _pct(vals_sorted, 0.90),
            "p99": _pct(vals_sorted, 0.99),
        }


# ---------------- Store ----------------

class _MetricStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._counters: Dict[MetricKey, Counter] = {}
        self._gauges: Dict[MetricKey, Gauge] = {}
        self._hists: Dict[MetricKey, Histogram] = {}

    def _get(self, table: Dict[MetricKey, Any], cls: type, name: str, labels: Dict[str, Any] | None):
        key = (name, _labels_key(labels))
        with self._lock:
            m = table.get(key)
            if m is None:
                m = cls(name, key[1])
                table[key] = m
            return m

    def counter(self, name: str, labels: Dict[str, Any] | None) -> Counter:
        return self._get(self._counters, Counter, name, labels)

    def gauge(self, name: str, labels: Dict[str, Any] | None) -> Gauge:
        return self._get(self._gauges, Gauge, name, labels)

    def hist(self, name: str, labels: Dict[str, Any] | None) -> Histogram:
        return self._get(self._hists, Histogram, name, labels)

    def items(self):
        with self._lock:
            return (
                list(self._counters.items()),
                list(self._gauges.items()),
                list(self._hists.items()),
            )

    def clear(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._hists.clear()


_STORE = _MetricStore()

# ---------------- Public API ----------------

def inc_counter(name: str, n: float = 1.0, **labels: Any) -> None:
    _STORE.counter(name, labels).inc(n)


def set_gauge(name: str, v: float, **labels: Any) -> None:
    _STORE.gauge(name, labels).set(v)


def observe_hist(name: str, v: float, **labels: Any) -> None:
    _STORE.hist(name, labels).observe(v)


def counter_value(name: str, **labels: Any) -> float:
    """Current value of one counter series (0.0 if never incremented)."""
    return _STORE.counter(name, labels).value()


def reset() -> None:
    """Drop every series (tests only)."""
    _STORE.clear()


# ---------------- Exporter (log every N seconds) ----------------

class _Exporter(threading.Thread):
    def __init__(self, interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None):
        super().__init__(name="metrics-exporter", daemon=True)
        self.interval = float(interval_sec)
        self.json_mode = bool(json_mode)
        self.log = logger or logging.getLogger("actionhub.metrics")
        self._stop_evt = threading.Event()

    def run(self) -> None:
        while not self._stop_evt.is_set():
            t0 = time.monotonic()
            self.emit_snapshot()
            to_sleep = max(0.5, self.interval - (time.monotonic() - t0))
            self._stop_evt.wait(to_sleep)

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_evt.set()
        self.join(timeout=timeout)

    def emit_snapshot(self) -> None:
        snap = snapshot_all()
        if self.json_mode:
            for kind, rows in (("counter", snap["counters"]), ("gauge", snap["gauges"]), ("hist", snap["hists"])):
                for row in rows:
                    self.log.info({"type": kind, **row})
            return

        for row in snap["counters"]:
            self.log.info(f"[ctr] {row['name']} {row['labels']} value={row['value']:.0f}")
        for row in snap["gauges"]:
            self.log.info(f"[gauge] {row['name']} {row['labels']} value={row['value']:.3f}")
        for row in snap["hists"]:
            self.log.info(
                f"[hist] {row['name']} {row['labels']} "
                f"n={int(row['count'])} min={row['min']:.3f} p50={row['p50']:.3f} "
                f"p90={row['p90']:.3f} p99={row['p99']:.3f} max={row['max']:.3f}"
            )


_EXPORTER: Optional[_Exporter] = None


def start_exporter(interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        return
    _EXPORTER = _Exporter(interval_sec=interval_sec, json_mode=json_mode, logger=logger)
    _EXPORTER.start()


def stop_exporter(timeout: float = 1.0) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        _EXPORTER.stop(timeout=timeout)
        _EXPORTER = None


def force_emit(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Emit one snapshot now, without the exporter thread."""
    _Exporter(interval_sec=0, json_mode=json_mode, logger=logger).emit_snapshot()


# ---------------- Timer ----------------

class Timer:
    """Context manager recording elapsed milliseconds into a histogram."""
    def __init__(self, hist_name: str, **labels: Any) -> None:
        self.hist_name = hist_name
        self.labels = labels
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        observe_hist(self.hist_name, (time.perf_counter() - self._t0) * 1000.0, **self.labels)
        return False


def snapshot_all() -> dict:
    counters, gauges, hists = _STORE.items()
    out: dict = {"counters": [], "gauges": [], "hists": []}
    for (name, labels), m in counters:
        out["counters"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in gauges:
        out["gauges"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in hists:
        out["hists"].append({"name": name, "labels": dict(labels), **m.snapshot()})
    return out
