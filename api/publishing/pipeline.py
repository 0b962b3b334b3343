"""Publish a proposal into an immutable, slug-addressed snapshot.

The whole publish (link, brand, resolved blocks, snapshot) runs in one
transaction under the proposal's row lock, so a failing first publish leaves
no link behind and concurrent publishes of one proposal queue up. The unique
constraint on ``PublicLink.slug`` is the authority on slug collisions between
proposals; the probe only picks a likely-free candidate. "Latest" means the
highest per-link ``sequence``, numbered under the same lock, never the clock.
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Max, Q
from django.utils import timezone

from app.common.checksum import json_checksum, to_json_safe
from app.common.keys import t
from app.errors import NotFound, ServiceError, service_result
from app.revalidation import builder_path, notify_stale, page_cache_key, public_path
from brand.services import get_brand_settings
from proposals.blocks import load_proposal
from proposals.models import Proposal, ProposalBlock

from .models import ProposalSnapshot, PublicLink
from .resolver import resolve_block_references
from .slugs import first_free_slug, generate_slug

logger = logging.getLogger(__name__)


def _taken_slugs(base: str) -> set[str]:
    return set(PublicLink.objects.filter(Q(slug=base) | Q(slug__startswith=f'{base}-')).values_list('slug', flat=True))


def _ensure_link(user, proposal: Proposal) -> PublicLink:
    """The proposal's link, reactivated if needed, or a new one with a fresh slug."""
    link = PublicLink.objects.filter(proposal=proposal).first()
    if link is not None:
        if not link.is_active:
            link.is_active = True
            link.save(update_fields=['is_active'])
            logger.info('[publish.link] reactivated proposal=%s slug=%s', proposal.id, link.slug)
        return link

    base = generate_slug(proposal.title)
    attempts = max(1, int(getattr(settings, 'PUBLISH_SLUG_MAX_ATTEMPTS', 5)))
    for attempt in range(1, attempts + 1):
        slug = first_free_slug(base, _taken_slugs(base).__contains__)
        try:
            with transaction.atomic():
                link = PublicLink.objects.create(proposal=proposal, slug=slug, created_by=user)
            logger.info('[publish.link] created proposal=%s slug=%s', proposal.id, slug)
            return link
        except IntegrityError:
            # Either another proposal took the slug or a concurrent publish created our link
            existing = PublicLink.objects.filter(proposal=proposal).first()
            if existing is not None:
                return existing
            logger.info('[publish.link] slug conflict on %s (attempt %s/%s)', slug, attempt, attempts)
    raise ServiceError(t('errors.publish.slug_exhausted', slug=base))


def _block_document(block: ProposalBlock) -> dict[str, Any]:
    return {
        'id': str(block.id),
        'type': block.type,
        'order_index': block.order_index,
        'props': block.props,
        'style_overrides': block.style_overrides or {},
    }


def snapshot_payload(snapshot: ProposalSnapshot, slug: str) -> dict[str, Any]:
    return {
        'slug': slug,
        'snapshot_id': str(snapshot.id),
        'brand': snapshot.brand,
        'blocks': snapshot.blocks,
        'meta': snapshot.meta,
    }


@service_result('publish.publish')
def publish_proposal(user, proposal_id) -> dict[str, str]:
    """Publish the proposal's current blocks; returns ``{slug, snapshot_id}``.

    Republishing keeps the slug and appends a new snapshot.
    """
    with transaction.atomic():
        proposal = load_proposal(user, proposal_id, lock=True)
        link = _ensure_link(user, proposal)
        brand = get_brand_settings(proposal.workspace_id)
        documents = [_block_document(b) for b in proposal.blocks.order_by('order_index', 'created_at')]
        blocks = to_json_safe(resolve_block_references(documents, proposal.workspace_id))
        brand = to_json_safe(brand) if brand is not None else None
        last = link.snapshots.aggregate(last=Max('sequence'))['last'] or 0
        snapshot = ProposalSnapshot.objects.create(
            public_link=link,
            proposal=proposal,
            brand=brand,
            blocks=blocks,
            sequence=last + 1,
            meta={
                'version': getattr(settings, 'PUBLISH_SNAPSHOT_VERSION', '1.0'),
                'published_at': timezone.now().isoformat(),
                'published_by': user.pk,
                'checksum': json_checksum({'brand': brand, 'blocks': blocks}),
            },
        )
        notify_stale(builder_path(proposal.workspace_id, proposal.id), public_path(link.slug), sender=__name__)
    logger.info('[publish.publish] proposal=%s slug=%s snapshot=%s blocks=%s', proposal.id, link.slug, snapshot.id, len(blocks))
    return {'slug': link.slug, 'snapshot_id': str(snapshot.id)}


@service_result('publish.unpublish')
def unpublish_proposal(user, proposal_id) -> None:
    """Hide the public page. The slug is kept for a later republish."""
    with transaction.atomic():
        proposal = load_proposal(user, proposal_id, lock=True)
        link = PublicLink.objects.filter(proposal=proposal).first()
        if link is None:
            raise NotFound(t('errors.publish.not_published'), resource='public_link')
        if link.is_active:
            link.is_active = False
            link.save(update_fields=['is_active'])
            notify_stale(builder_path(proposal.workspace_id, proposal.id), public_path(link.slug), sender=__name__)
            logger.info('[publish.unpublish] proposal=%s slug=%s', proposal.id, link.slug)
    return None


@service_result('publish.public')
def get_public_snapshot(slug: str) -> dict[str, Any]:
    """Latest snapshot behind an active link; anonymous, cached per slug."""
    key = page_cache_key(public_path(slug))
    cached = cache.get(key)
    if cached is not None:
        return cached
    link = PublicLink.objects.filter(slug=slug, is_active=True).first()
    if link is None:
        raise NotFound(t('errors.publish.link_not_found'), resource='public_link')
    snapshot = link.snapshots.order_by('-sequence').first()
    if snapshot is None:
        raise NotFound(t('errors.publish.no_snapshot'), resource='snapshot')
    payload = snapshot_payload(snapshot, link.slug)
    cache.set(key, payload, getattr(settings, 'PUBLIC_SNAPSHOT_CACHE_SECONDS', 300))
    return payload


@service_result('publish.snapshots')
def list_snapshots(user, proposal_id) -> list[ProposalSnapshot]:
    proposal = load_proposal(user, proposal_id)
    return list(ProposalSnapshot.objects.filter(proposal=proposal).select_related('public_link').order_by('-sequence'))
