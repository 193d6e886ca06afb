"""Celery application configuration."""

from celery import Celery

from src.config import get_settings

settings = get_settings()

app = Celery(
    "cupboard",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.receipt_purchases"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,  # 2 minutes max per task
    task_soft_time_limit=90,
    task_acks_late=True,  # Receipts commit atomically and completed ones are skipped on redelivery
)
