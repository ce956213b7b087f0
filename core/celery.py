from __future__ import annotations

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")

app = Celery("mutuals")
app.config_from_object("django.conf:settings", namespace="CELERY")
# picks up apps.mutuals.tasks for the expired cache cleanup schedule
app.autodiscover_tasks()
