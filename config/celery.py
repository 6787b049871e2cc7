import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("court_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cancel holds that were never paid - every minute
    "expire-stale-holds": {
        "task": "bookings.expire_stale_holds",
        "schedule": 60.0,
        "options": {"expires": 50},
    },
    # Confirmed bookings whose hour has passed become finished - hourly
    "finish-elapsed-bookings": {
        "task": "bookings.finish_elapsed_bookings",
        "schedule": crontab(minute=5),
    },
    # Compare the schedule projection with the bookings behind it - nightly
    "audit-schedule-projection": {
        "task": "scheduling.audit_schedule_projection",
        "schedule": crontab(minute=30, hour=2),
    },
}
