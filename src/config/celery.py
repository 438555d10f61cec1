"""Celery configuration."""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

app = Celery("m7")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
app.conf.beat_schedule = {
    "check-negative-stock": {
        "task": "catalog.tasks.check_negative_stock",
        "schedule": crontab(minute=0, hour="*/2"),  # Every 2 hours
    },
}
