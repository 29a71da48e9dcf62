import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("excursion_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Списание холдированных средств по завершённым экскурсиям - каждый час
    "capture-finished-holds": {
        "task": "orders.capture_finished_holds",
        "schedule": crontab(minute=30),
    },
    # Списание холдов, у которых начался минимальный срок бронирования - каждые 15 минут
    "capture-lead-time-holds": {
        "task": "orders.capture_lead_time_holds",
        "schedule": crontab(minute="*/15"),
    },
}

app.conf.timezone = "Europe/Moscow"
