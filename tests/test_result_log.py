"""tests/test_result_log.py — Unit tests for the per-integration result log"""
from datetime import datetime, timedelta, timezone

import pytest

from errors import NotFound
from models.analysis_result import AnalysisResult, AnalysisStatus

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _result(rid, minutes=0, status=AnalysisStatus.PENDING, integration_id="i1"):
    return AnalysisResult(
        id=rid, integration_id=integration_id, system_name="sys",
        status=status, created_at=T0 + timedelta(minutes=minutes),
    )


@pytest.fixture()
def log(results):
    results.init_sequence("i1")
    return results


def test_append_requires_sequence(results):
    assert results.append("unknown", _result("r1")) is False
    assert results.query("unknown") == []


def test_query_newest_first_and_limit(log):
    for i, minutes in enumerate([5, 1, 9, 3]):
        log.append("i1", _result(f"r{i}", minutes))

    ordered = log.query("i1")
    stamps = [r.created_at for r in ordered]
    assert stamps == sorted(stamps, reverse=True)
    assert [r.id for r in log.query("i1", 2)] == ["r2", "r0"]
    assert log.query("i1", 0) == []


def test_query_returns_copy(log):
    log.append("i1", _result("r1"))
    snapshot = log.query("i1")
    log.append("i1", _result("r2", 1))
    assert len(snapshot) == 1
    assert len(log.query("i1")) == 2


def test_replace_targets_result_by_id(log):
    first = _result("first", 0)
    second = _result("second", 1)
    log.append("i1", first)
    log.append("i1", second)

    done = first.transition(AnalysisStatus.COMPLETED, payload={"ok": True})
    assert log.replace("i1", done) is True

    assert log.get("i1", "first").status is AnalysisStatus.COMPLETED
    assert log.get("i1", "second").status is AnalysisStatus.PENDING


def test_replace_refuses_terminal(log):
    pending = _result("r1")
    log.append("i1", pending)
    failed = pending.transition(AnalysisStatus.FAILED, payload={"error": "x"})
    assert log.replace("i1", failed) is True

    overwrite = pending.transition(AnalysisStatus.COMPLETED)
    assert log.replace("i1", overwrite) is False
    assert log.get("i1", "r1").status is AnalysisStatus.FAILED


def test_replace_after_discard_is_dropped(log):
    pending = _result("r1")
    log.append("i1", pending)
    log.discard_sequence("i1")
    assert log.replace("i1", pending.transition(AnalysisStatus.PROCESSING)) is False


def test_get_unknown_result(log):
    with pytest.raises(NotFound):
        log.get("i1", "nope")


def test_terminal_results_cannot_transition():
    done = _result("r1").transition(AnalysisStatus.COMPLETED)
    with pytest.raises(ValueError):
        done.transition(AnalysisStatus.FAILED)
