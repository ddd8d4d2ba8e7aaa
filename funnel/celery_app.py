"""
Funnel.vc Celery Application Configuration

Configures the Celery task queue used for out-of-band CRM delivery.
Tasks here are fire-and-forget: at-most-once delivery, no retries.
"""

import logging
import time
from typing import Any

from celery import Celery, Task
from celery.signals import task_failure, task_postrun, task_prerun
from kombu import Exchange, Queue

from funnel.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Queue Definitions
# =============================================================================

default_exchange = Exchange("default", type="direct")

TASK_QUEUES = (
    Queue("crm", exchange=default_exchange, routing_key="crm"),
    Queue("default", exchange=default_exchange, routing_key="default"),
)

TASK_ROUTES = {
    "funnel.tasks.crm.sync_pitch_to_crm": {"queue": "crm"},
}


# =============================================================================
# Celery Application
# =============================================================================

def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Configured Celery application instance.
    """
    app = Celery(
        "funnel",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["funnel.tasks.crm"],
    )

    app.conf.update(
        # =============
        # Serialization
        # =============
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",

        # =======
        # Queues
        # =======
        task_queues=TASK_QUEUES,
        task_routes=TASK_ROUTES,
        task_default_queue="default",
        task_default_exchange="default",
        task_default_routing_key="default",

        # ===========
        # Time Limits
        # ===========
        task_soft_time_limit=30,
        task_time_limit=60,

        # ========
        # Delivery
        # ========
        # Ack on receipt: a crashed worker drops the message instead of
        # redelivering it, so a CRM item is never created twice.
        task_acks_late=False,
        task_reject_on_worker_lost=False,
        task_max_retries=0,
        worker_prefetch_multiplier=1,

        # ===========
        # Result Backend
        # ===========
        task_ignore_result=True,
        result_expires=3600,

        # ========
        # Timezone
        # ========
        timezone="UTC",
        enable_utc=True,

        # ===========
        # Broker Settings
        # ===========
        broker_connection_retry_on_startup=True,
        broker_pool_limit=10,
    )

    return app


celery_app = create_celery_app()


# =============================================================================
# Monitoring Hooks
# =============================================================================

_task_start_times: dict[str, float] = {}


@task_prerun.connect
def task_prerun_handler(
    sender: Task | None = None,
    task_id: str | None = None,
    **extra: Any,
) -> None:
    """Record task start time for latency tracking."""
    if task_id:
        _task_start_times[task_id] = time.time()
        logger.debug(f"Task {sender.name if sender else 'unknown'}[{task_id}] started")


@task_postrun.connect
def task_postrun_handler(
    sender: Task | None = None,
    task_id: str | None = None,
    state: str | None = None,
    **extra: Any,
) -> None:
    """Log task latency."""
    if task_id and task_id in _task_start_times:
        latency = time.time() - _task_start_times.pop(task_id)
        logger.info(
            f"Task {sender.name if sender else 'unknown'}[{task_id}] completed in {latency:.3f}s with state={state}"
        )


@task_failure.connect
def task_failure_handler(
    sender: Task | None = None,
    task_id: str | None = None,
    exception: Exception | None = None,
    **kwargs: Any,
) -> None:
    """Log task failure. Failed tasks are not retried."""
    logger.error(f"Task {sender.name if sender else 'unknown'}[{task_id}] failed: {exception}")
    if task_id:
        _task_start_times.pop(task_id, None)


__all__ = ["celery_app"]
