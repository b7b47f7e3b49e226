# tests/test_metrics_exporter_smoke.py
import logging
import os
import time

import pytest

from actionhub.core.metrics import force_emit, observe_hist, snapshot_all


def _series(snap, kind, name):
    return [row for row in snap[kind] if row["name"] == name]


def test_registry_records_dispatch_metrics(registry):
    registry.assign_category("a", "C")
    registry.subscribe("C", lambda n, d: None)
    registry.subscribe("C", lambda n, d: None)
    registry.post("a", [1])
    registry.post("a", [2])

    snap = snapshot_all()
    (posted,) = _series(snap, "counters", "actions_posted_total")
    assert posted["labels"] == {"action": "a"} and posted["value"] == 2
    (subs,) = _series(snap, "gauges", "category_subscribers")
    assert subs["value"] == 2.0
    (lat,) = _series(snap, "hists", "dispatch_latency_ms")
    assert lat["count"] == 2 and lat["labels"] == {"category": "C"}


def test_force_emit_text_and_json(caplog):
    observe_hist("probe_ms", 4.0, stage="t")
    lg = logging.getLogger("actionhub.test.metrics")
    with caplog.at_level(logging.INFO, logger="actionhub.test.metrics"):
        force_emit(logger=lg)
        force_emit(logger=lg, json_mode=True)
    text = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("[hist] probe_ms") for m in text)
    assert any("'type': 'hist'" in m and "probe_ms" in m for m in text)


@pytest.mark.smoke
def test_metrics_exporter_emits_logs(caplog):
    """Exporter (interval set in conftest) logs registered series."""
    caplog.set_level(logging.INFO, logger="actionhub.metrics")
    observe_hist("test_latency_ms", 12.3, state="SMOKE")

    time.sleep(float(os.getenv("METRICS_WAIT_SMOKE", "1.8")))

    records = [r for r in caplog.records if r.name == "actionhub.metrics"]
    assert records, "expected at least one metrics log line"
    assert "test_latency_ms" in " ".join(r.getMessage() for r in records)
