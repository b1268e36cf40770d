# storefront/celery_worker.py
from celery import Celery
from celery.schedules import crontab

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks have to be imported explicitly so the worker registers them
celery_app.conf.imports = ("storefront.tasks.purge",)

celery_app.conf.beat_schedule = {
    "purge-guest-carts-daily": {
        "task": "storefront.tasks.purge.purge_guest_carts_task",
        "schedule": crontab(hour=3, minute=0),
    },
}

celery_app.conf.timezone = "UTC"
