"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from briefrec.config import get_settings

settings = get_settings()

celery_app = Celery(
    "briefrec",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "briefrec.tasks.profile_tasks",
    ],
)

# No time limits: a recalculation runs to completion once started.
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "recalculate-all-profiles": {
        "task": "briefrec.tasks.profile_tasks.recalculate_all_profiles",
        "schedule": crontab(minute=0, hour=settings.profile_recalc_hour),
    },
}
