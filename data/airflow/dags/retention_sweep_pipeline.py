"""
Airflow DAG for the Retention Sweep

Runs the retention sweeper on a fixed cadence (SWEEP_SCHEDULE, daily by
default):
- Claim lifecycle records from the delay queue
- Delete uploaded originals older than the retention window
- Log a sweep report
"""
from airflow import DAG
from airflow.providers.standard.operators.python import PythonOperator
from datetime import datetime, timedelta
import logging

from image_compressor.core.config import Settings
from image_compressor.lifecycle.tasks import report_sweep_task, sweep_expired_originals_task

logger = logging.getLogger(__name__)


# ============================================================================
# DAG CONFIGURATION
# ============================================================================

default_args = {
    'owner': 'image-compressor',
    'depends_on_past': False,
    'email_on_failure': False,
    'email_on_retry': False,
    'retries': 2,
    'retry_delay': timedelta(minutes=5),
}

settings = Settings()


with DAG(
    'retention_sweep_pipeline',
    default_args=default_args,
    description='Delete uploaded originals past the retention window',
    schedule=settings.SWEEP_SCHEDULE,
    start_date=datetime(2025, 1, 1),
    catchup=False,
    tags=['storage', 'retention', 'lifecycle'],
    max_active_runs=1,
) as dag:

    sweep_expired_originals = PythonOperator(
        task_id='sweep_expired_originals',
        python_callable=sweep_expired_originals_task,
    )

    report_sweep = PythonOperator(
        task_id='report_sweep',
        python_callable=report_sweep_task,
    )

    sweep_expired_originals >> report_sweep
