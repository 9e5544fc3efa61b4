"""
Unit tests for the scheduled sweep task callables.
"""
from unittest.mock import MagicMock, patch

import pytest

from image_compressor.core.exceptions import QueueUnavailableError
from image_compressor.lifecycle import LifecycleRecord
from image_compressor.lifecycle.tasks import (
    report_sweep_task,
    run_sweep_tick,
    sweep_expired_originals_task,
)
from tests.fakes import HOUR_MS, T0, TEST_BUCKET

SOURCE = "uploads/1700000000000.png"


def make_context(pulled=None):
    ti = MagicMock()
    ti.xcom_pull.return_value = pulled
    return {'task_instance': ti}


@pytest.mark.unit
class TestRunSweepTick:
    """Test run_sweep_tick."""

    def test_returns_summary(self, components, queue, blob_store, clock):
        """Test the tick returns a summary."""
        blob_store.add(SOURCE, b"original")
        queue.send(LifecycleRecord(TEST_BUCKET, SOURCE, T0).to_json())
        clock.advance(HOUR_MS)

        summary = run_sweep_tick(components)

        assert summary["retired"] == 1
        assert summary["outcomes"][0]["key"] == SOURCE

    def test_queue_outage_propagates(self, components):
        """Test a queue outage propagates."""
        components.sweeper.queue = MagicMock()
        components.sweeper.queue.receive.side_effect = QueueUnavailableError("redis down")

        with pytest.raises(QueueUnavailableError):
            run_sweep_tick(components)


@pytest.mark.unit
class TestAirflowCallables:
    """Test Airflow task callables."""

    def test_sweep_task_pushes_summary(self, components):
        """Test the sweep task pushes its summary."""
        context = make_context()

        with patch("image_compressor.lifecycle.tasks.build_components", return_value=components):
            sweep_expired_originals_task(**context)

        ti = context['task_instance']
        ti.xcom_push.assert_called_once()
        assert ti.xcom_push.call_args.kwargs["key"] == "sweep_result"
        assert ti.xcom_push.call_args.kwargs["value"]["claimed"] == 0

    def test_report_lists_failures(self):
        """Test the report lists failed records."""
        summary = {
            "claimed": 2, "retired": 1, "deferred": 0, "failed": 1, "dropped": 0,
            "outcomes": [
                {"outcome": "retired", "key": "uploads/1.png", "error": None},
                {"outcome": "failed", "key": "uploads/2.png", "error": "storage down"},
            ],
        }
        context = make_context(summary)

        report_sweep_task(**context)

        ti = context['task_instance']
        ti.xcom_pull.assert_called_once_with(key='sweep_result', task_ids='sweep_expired_originals')
        report = ti.xcom_push.call_args.kwargs["value"]
        assert "Retired:          1" in report
        assert "failed: uploads/2.png - storage down" in report
        assert "uploads/1.png" not in report

    def test_report_without_upstream_result(self):
        """Test the report without an upstream result."""
        context = make_context(None)

        report_sweep_task(**context)

        assert "Records claimed:  0" in context['task_instance'].xcom_push.call_args.kwargs["value"]
