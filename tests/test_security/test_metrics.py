"""Tests for validation metrics."""

from src.security.metrics import ValidationMetrics


def test_record_stage_basic():
    m = ValidationMetrics()
    m.record_stage("contract", 150.0)
    m.record_stage("contract", 250.0, timeout=True)

    stage = m.get_summary()["stages"]["contract"]
    assert stage["runs"] == 2
    assert stage["avg_latency_ms"] == 200  # (150+250)/2
    assert stage["max_latency_ms"] == 250
    assert stage["timeouts"] == 1
    assert stage["errors"] == 0


def test_record_stage_errors_and_unavailable():
    m = ValidationMetrics()
    m.record_stage("external", 10.0, error=True)
    m.record_stage("external", 12.0, unavailable=True)

    stage = m.get_stage("external")
    assert stage.errors == 1
    assert stage.unavailable == 1


def test_validation_levels():
    m = ValidationMetrics()
    m.record_validation("low")
    m.record_validation("low")
    m.record_validation("critical")

    summary = m.get_summary()
    assert summary["validations"] == 3
    assert summary["risk_levels"] == {"low": 2, "critical": 1}


def test_cache_hit_rate():
    m = ValidationMetrics()
    assert m.get_summary()["cache_hit_rate"] == 0.0

    m.record_cache(hit=True)
    m.record_cache(hit=False)
    m.record_cache(hit=False)
    m.record_cache(hit=True)
    assert m.get_summary()["cache_hit_rate"] == 50.0


def test_counters():
    m = ValidationMetrics()
    m.record_quick_check()
    m.record_input_error()

    summary = m.get_summary()
    assert summary["quick_checks"] == 1
    assert summary["input_errors"] == 1
    assert summary["uptime_sec"] >= 0


def test_empty_stage():
    m = ValidationMetrics()
    assert m.get_stage("missing").avg_latency_ms == 0.0
