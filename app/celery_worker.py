# app/celery_worker.py
from celery import Celery
from celery.signals import worker_ready

from app.utils.settings import (
    CART_CLEANUP_INTERVAL_SECONDS,
    CART_WARNING_INTERVAL_SECONDS,
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
)

EXPIRE_CARTS_TASK = "app.tasks.expire.expire_carts_task"
SEND_EXPIRY_WARNINGS_TASK = "app.tasks.expiry_warning.send_expiry_warnings_task"

celery_app = Celery(
    "cart",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# import tasks explicitly so the worker registers them
celery_app.conf.imports = (
    "app.tasks.expire",
    "app.tasks.expiry_warning",
)

# a tick that was not picked up before the next one is dropped, not caught up
celery_app.conf.beat_schedule = {
    "expire-carts-every-5-minutes": {
        "task": EXPIRE_CARTS_TASK,
        "schedule": float(CART_CLEANUP_INTERVAL_SECONDS),
        "options": {"expires": CART_CLEANUP_INTERVAL_SECONDS},
    },
    "send-expiry-warnings-every-minute": {
        "task": SEND_EXPIRY_WARNINGS_TASK,
        "schedule": float(CART_WARNING_INTERVAL_SECONDS),
        "options": {"expires": CART_WARNING_INTERVAL_SECONDS},
    },
}

celery_app.conf.timezone = "UTC"


@worker_ready.connect
def run_sweeps_on_startup(sender=None, **kwargs):
    # beat waits a full interval before the first tick
    celery_app.send_task(EXPIRE_CARTS_TASK)
    celery_app.send_task(SEND_EXPIRY_WARNINGS_TASK)
