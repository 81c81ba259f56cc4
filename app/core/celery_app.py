"""
Celery application configuration.

Redis is both the message broker and the result backend. The worker renders
generated reports and processes due report schedules.
"""

from celery import Celery
from celery.schedules import crontab
from app.core.config import settings

celery_app = Celery(
    "assessment_admin_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,

    result_expires=3600,

    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,

    beat_schedule={
        "run-due-report-schedules": {
            "task": "app.tasks.report_tasks.run_due_report_schedules",
            "schedule": crontab(minute="*/15"),
        },
    },
)

celery_app.autodiscover_tasks(['app'])
