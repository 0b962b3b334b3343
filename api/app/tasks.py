import logging

from celery import shared_task
from django.core.cache import cache

from .revalidation import page_cache_key

logger = logging.getLogger(__name__)


@shared_task
def invalidate_paths(paths: list[str]) -> int:
    """Drop cached renders for ``paths``. Returns the number of keys cleared."""
    keys = [page_cache_key(p) for p in paths]
    try:
        cache.delete_many(keys)
    except Exception:
        logger.warning('[revalidate] cache delete failed for %s', paths, exc_info=True)
        return 0
    logger.info('[revalidate] invalidated %d path(s): %s', len(keys), ', '.join(paths))
    return len(keys)
