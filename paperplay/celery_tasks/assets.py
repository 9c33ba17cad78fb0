import logging
from typing import Iterable

from botocore.exceptions import BotoCoreError, ClientError
from celery import shared_task
from celery.utils.log import get_task_logger
from kombu.exceptions import OperationalError

from paperplay.core.config import settings
from paperplay.utils.filestorage import remove_stored_asset

logger = get_task_logger(__name__)
app_logger = logging.getLogger(__name__)


@shared_task(name="assets:remove_asset",
             autoretry_for=(OSError, BotoCoreError, ClientError),
             retry_backoff=settings.ASSET_REMOVAL_RETRY_BACKOFF,
             retry_backoff_max=settings.ASSET_REMOVAL_RETRY_BACKOFF_MAX,
             max_retries=settings.ASSET_REMOVAL_MAX_RETRIES)
def remove_asset(storage_key: str):
    logger.info(f"remove_asset: {storage_key}")
    remove_stored_asset(storage_key)
    return storage_key


def schedule_removal(storage_keys: Iterable[str]) -> None:
    """Queue removal of assets that no ticket references anymore."""
    for key in storage_keys:
        try:
            remove_asset.delay(key)
        except OperationalError as e:
            # the ticket change is committed already, the file stays behind
            app_logger.error(f"Could not queue removal of asset {key} - {e}")
