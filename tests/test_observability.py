import io
import logging

import pytest

from docviewer.observability import MetricsRecorder


def _capture_logger_output(logger_name: str):
    logger = logging.getLogger(logger_name)
    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger, handler, buffer


def test_metrics_recorder_logs_when_enabled() -> None:
    metrics = MetricsRecorder(enabled=True, namespace="docviewer.test")
    logger, handler, buffer = _capture_logger_output("docviewer.metrics")

    try:
        metrics.increment("catalog.projects.resolved", category="backend")
        metrics.record_timing(
            "project_details.build",
            0.05,
            project="my-api-server",
            docs=3,
        )
    finally:
        logger.removeHandler(handler)

    output = buffer.getvalue()
    assert "docviewer.test.catalog.projects.resolved value=1 category=backend" in output
    assert "docviewer.test.project_details.build" in output
    assert "duration_ms=50" in output
    assert "project=my-api-server" in output


def test_metrics_recorder_disabled_suppresses_logs(caplog) -> None:
    metrics = MetricsRecorder(enabled=False)

    with caplog.at_level(logging.INFO, logger="docviewer.metrics"):
        metrics.increment("catalog.metadata.created", category="tools")
        metrics.record_timing("project_details.build", 0.1, project="tools-cli")

    assert not caplog.records


def test_track_timing_records_even_on_error(caplog) -> None:
    metrics = MetricsRecorder(enabled=True, namespace="docviewer")

    with caplog.at_level(logging.INFO, logger="docviewer.metrics"):
        with pytest.raises(ValueError):
            with metrics.track_timing("catalog.group_by_category", projects=2):
                raise ValueError("boom")

    assert "docviewer.catalog.group_by_category" in caplog.text
    assert "projects=2" in caplog.text


def test_prometheus_export_renders_samples() -> None:
    metrics = MetricsRecorder(enabled=True, namespace="docviewer", prometheus_enabled=True)

    metrics.increment("catalog.projects.resolved", category="backend")
    metrics.increment("catalog.projects.resolved", category="backend")
    metrics.record_timing("project_details.build", 0.2, project="site")

    rendered = metrics.render_prometheus().decode("utf-8")
    assert 'docviewer_catalog_projects_resolved_total{category="backend"} 2.0' in rendered
    assert "docviewer_project_details_build_seconds_count" in rendered
    assert metrics.prometheus_content_type.startswith("text/plain")


def test_prometheus_export_disabled_by_default() -> None:
    metrics = MetricsRecorder()

    assert not metrics.prometheus_enabled
    with pytest.raises(RuntimeError):
        metrics.render_prometheus()
