"""
Scheduled sweep tasks.

Airflow callables used by ``retention_sweep_pipeline``. Each task run
builds its own clients; nothing is shared between runs.
"""
import logging
from typing import Any, Dict, Optional

from image_compressor.bootstrap import Components, build_components
from image_compressor.core.config import Settings

logger = logging.getLogger(__name__)


def run_sweep_tick(components: Optional[Components] = None) -> Dict[str, Any]:
    """
    Run one retention sweep tick.

    Queue outages propagate so the scheduler's retry policy applies.
    """
    if components is None:
        components = build_components(Settings())

    result = components.sweeper.sweep()
    return result.to_dict()


def sweep_expired_originals_task(**context):
    """
    Task 1: Claim lifecycle records and delete expired originals
    """
    logger.info("Starting retention sweep...")

    summary = run_sweep_tick()

    context['task_instance'].xcom_push(key='sweep_result', value=summary)

    logger.info(
        f"Retention sweep completed: {summary['retired']} retired, "
        f"{summary['deferred']} deferred, {summary['failed']} failed, "
        f"{summary['dropped']} dropped"
    )


def report_sweep_task(**context):
    """
    Task 2: Log a sweep report and flag delete failures
    """
    ti = context['task_instance']
    summary = ti.xcom_pull(key='sweep_result', task_ids='sweep_expired_originals') or {}

    report = [
        "=" * 60,
        "RETENTION SWEEP REPORT",
        "=" * 60,
        f"Records claimed:  {summary.get('claimed', 0)}",
        f"Retired:          {summary.get('retired', 0)}",
        f"Deferred:         {summary.get('deferred', 0)}",
        f"Failed deletes:   {summary.get('failed', 0)}",
        f"Dropped records:  {summary.get('dropped', 0)}",
        "=" * 60,
    ]

    for outcome in summary.get('outcomes', []):
        if outcome.get('error'):
            report.append(f"  {outcome['outcome']}: {outcome.get('key')} - {outcome['error']}")

    report_text = "\n".join(report)
    logger.info(f"\n{report_text}")

    if summary.get('failed'):
        logger.warning(f"{summary['failed']} lifecycle records kept after failed deletes")

    ti.xcom_push(key='sweep_report', value=report_text)
