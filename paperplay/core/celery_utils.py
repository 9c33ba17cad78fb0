from celery import current_app as current_celery_app

# registers the asset tasks with the app, the worker imports this module
import paperplay.celery_tasks.assets  # noqa: F401

from .celery_config import settings as celery_settings
from paperplay.core.config import settings as app_settings


def create_celery():
    celery_app = current_celery_app
    celery_app.config_from_object(celery_settings)
    celery_app.conf.update(task_track_started=True)
    celery_app.conf.update(task_serializer='json')
    celery_app.conf.update(result_serializer='json')
    celery_app.conf.update(accept_content=['json'])
    celery_app.conf.update(result_expires=200)
    celery_app.conf.update(worker_send_task_events=True)
    celery_app.conf.update(worker_prefetch_multiplier=10)
    celery_app.conf.update(task_always_eager=app_settings.CELERY_TASK_ALWAYS_EAGER)
    celery_app.conf.update(worker_max_tasks_per_child=100)

    celery_app.conf.timezone = 'UTC'

    return celery_app
