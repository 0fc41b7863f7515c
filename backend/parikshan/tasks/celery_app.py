from celery import Celery
from ..platform.config import settings

celery_app = Celery(
    "parikshan",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    beat_schedule={
        "generate-questions-for-pending-every-10-minutes": {
            "task": "parikshan.tasks.question_tasks.generate_questions_for_pending",
            "schedule": 600.0,
        },
    },
)

celery_app.autodiscover_tasks(["parikshan.tasks"], related_name="question_tasks")
