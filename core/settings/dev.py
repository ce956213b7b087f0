from .base import *  # noqa

DEBUG = True
ALLOWED_HOSTS = ["*"]
CELERY_TASK_ALWAYS_EAGER = True
RATE_LIMITS_ENABLED = False
LOGGING["loggers"]["apps"]["handlers"] = ["console"]  # type: ignore[index]  # noqa: F405
