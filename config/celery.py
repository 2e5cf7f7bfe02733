import os

from celery import Celery
from celery.schedules import crontab
from django.conf import settings

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# Read every CELERY_* entry from the Django settings.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks(lambda: settings.INSTALLED_APPS)

app.conf.beat_schedule.update({
    "verify-pending-domains": {
        "task": "domains.tasks.verify_pending_domains",
        "schedule": crontab(minute="*/15"),
    },
})
