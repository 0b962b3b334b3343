"""Stale-page notifications after block mutations and publishing.

Mutating services call ``notify_stale(*paths)``; the signal is sent once the
surrounding transaction commits so readers never see an invalidation for data
that was rolled back. The default receiver drops cached renders for those paths,
through Celery when ``REVALIDATE_ASYNC`` is on. Invalidation is best-effort and
never fails the mutation that triggered it.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# sender: the module that changed data; kwargs: paths (tuple[str, ...])
paths_invalidated = Signal()


def builder_path(workspace_id, proposal_id) -> str:
    return f'/workspace/{workspace_id}/proposals/{proposal_id}/builder'


def public_path(slug: str) -> str:
    return f'/p/{slug}'


def page_cache_key(path: str) -> str:
    return f'page:{path}'


def notify_stale(*paths: str, sender=None) -> None:
    unique = tuple(dict.fromkeys(p for p in paths if p))
    if not unique:
        return

    def _send():
        try:
            paths_invalidated.send(sender=sender or __name__, paths=unique)
        except Exception:
            logger.warning('[revalidate] signal dispatch failed for %s', unique, exc_info=True)

    transaction.on_commit(_send)


@receiver(paths_invalidated)
def _dispatch_invalidation(sender, paths, **kwargs):
    from .tasks import invalidate_paths

    if getattr(settings, 'REVALIDATE_ASYNC', False) and getattr(settings, 'CELERY_BROKER_URL', ''):
        try:
            invalidate_paths.delay(list(paths))
            return
        except Exception:
            # Fall through to inline invalidation if enqueue fails
            logger.warning('[revalidate] enqueue failed, invalidating inline', exc_info=True)
    invalidate_paths(list(paths))
