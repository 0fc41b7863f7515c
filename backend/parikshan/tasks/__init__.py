from .celery_app import celery_app
from .question_tasks import generate_questions, generate_questions_for_pending

__all__ = [
    "celery_app",
    "generate_questions",
    "generate_questions_for_pending",
]
