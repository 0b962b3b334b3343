"""Block store and ordering engine.

Every public function returns an ``app.errors.Result``. Position-changing
operations run in one transaction holding a row lock on the proposal, then
renumber the full sibling set with a single ``bulk_update`` so the order
indexes stay exactly 0..N-1.
"""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Iterable, Optional

from django.db import transaction

from app.common.keys import t
from app.errors import NotFound, ValidationFailed, service_result
from app.revalidation import builder_path, notify_stale
from workspaces.access import require_identity, require_member

from .block_types import get_default_props, get_definition, validate_block_props, validate_style_overrides
from .models import Proposal, ProposalBlock

logger = logging.getLogger(__name__)


def _parse_uuid(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def load_proposal(user, proposal_id, *, lock: bool = False) -> Proposal:
    """Fetch a proposal the user may edit; ``lock`` takes the per-proposal row lock."""
    require_identity(user)
    pid = _parse_uuid(proposal_id)
    qs = Proposal.objects.select_for_update() if lock else Proposal.objects.all()
    proposal = qs.filter(pk=pid).first() if pid else None
    if proposal is None:
        raise NotFound(t('errors.proposal.not_found'), resource='proposal')
    require_member(user, proposal.workspace_id)
    return proposal


def _load_block(user, block_id) -> ProposalBlock:
    require_identity(user)
    bid = _parse_uuid(block_id)
    block = ProposalBlock.objects.select_related('proposal').filter(pk=bid).first() if bid else None
    if block is None:
        raise NotFound(t('errors.block.not_found'), resource='block')
    require_member(user, block.proposal.workspace_id)
    return block


def _ordered_siblings(proposal_id) -> list[ProposalBlock]:
    return list(ProposalBlock.objects.filter(proposal_id=proposal_id).order_by('order_index', 'created_at', 'id'))


def renumber(blocks: Iterable[ProposalBlock]) -> int:
    """Assign order_index = position to ``blocks`` in one batched write.

    Only rows whose index actually changes are written. Returns that count.
    """
    changed = []
    for position, block in enumerate(blocks):
        if block.order_index != position:
            block.order_index = position
            changed.append(block)
    if changed:
        ProposalBlock.objects.bulk_update(changed, ['order_index'])
    return len(changed)


def _touch(proposal: Proposal) -> None:
    notify_stale(builder_path(proposal.workspace_id, proposal.id), sender=__name__)


def _check_order_index(order_index: Any) -> Optional[int]:
    if order_index is None:
        return None
    if isinstance(order_index, bool) or not isinstance(order_index, int):
        raise ValidationFailed(
            t('errors.block.invalid_order_index'), field_errors={'order_index': [t('errors.block.order_index_integer')]}
        )
    if order_index < 0:
        raise ValidationFailed(
            t('errors.block.invalid_order_index'), field_errors={'order_index': [t('errors.block.order_index_negative')]}
        )
    return order_index


@service_result('blocks.list')
def list_blocks(user, proposal_id) -> list[ProposalBlock]:
    proposal = load_proposal(user, proposal_id)
    return _ordered_siblings(proposal.id)


@service_result('blocks.get')
def get_block(user, block_id) -> ProposalBlock:
    return _load_block(user, block_id)


@service_result('blocks.create')
def create_block(
    user,
    proposal_id,
    block_type,
    props: Optional[dict] = None,
    order_index: Optional[int] = None,
    style_overrides: Optional[dict] = None,
) -> ProposalBlock:
    """Create a block.

    Omitted ``props`` fall back to the registry defaults. Omitted
    ``order_index`` appends; an explicit one inserts at that position (clamped
    to the current block count) and shifts the following blocks down.
    """
    require_identity(user)
    get_definition(block_type)
    position = _check_order_index(order_index)
    clean_props = validate_block_props(block_type, get_default_props(block_type) if props is None else props)
    clean_style = validate_style_overrides(style_overrides) if style_overrides is not None else {}

    with transaction.atomic():
        proposal = load_proposal(user, proposal_id, lock=True)
        siblings = _ordered_siblings(proposal.id)
        append_at = max((b.order_index for b in siblings), default=-1) + 1
        block = ProposalBlock.objects.create(
            proposal=proposal,
            type=block_type,
            order_index=append_at if position is None else min(position, len(siblings)),
            props=clean_props,
            style_overrides=clean_style,
        )
        if position is not None:
            siblings.insert(min(position, len(siblings)), block)
            renumber(siblings)
        _touch(proposal)
    logger.info('[blocks.create] proposal=%s block=%s type=%s index=%s', proposal.id, block.id, block_type, block.order_index)
    return block


def add_block(user, proposal_id, block_type):
    """Picker entry point: append a block of ``block_type`` with its default props."""
    return create_block(user, proposal_id, block_type)


@service_result('blocks.update')
def update_block(user, block_id, props: Optional[dict] = None, style_overrides: Optional[dict] = None) -> ProposalBlock:
    """Replace ``props`` and/or ``style_overrides``; an omitted field is left untouched."""
    block = _load_block(user, block_id)
    fields = []
    if props is not None:
        block.props = validate_block_props(block.type, props)
        fields.append('props')
    if style_overrides is not None:
        block.style_overrides = validate_style_overrides(style_overrides)
        fields.append('style_overrides')
    if not fields:
        return block
    with transaction.atomic():
        if ProposalBlock.objects.select_for_update().filter(pk=block.pk).first() is None:
            raise NotFound(t('errors.block.not_found'), resource='block')
        block.save(update_fields=fields + ['updated_at'])
        _touch(block.proposal)
    logger.info('[blocks.update] block=%s fields=%s', block.id, ','.join(fields))
    return block


@service_result('blocks.delete')
def delete_block(user, block_id) -> None:
    """Delete a block and close the gap it leaves."""
    block = _load_block(user, block_id)
    with transaction.atomic():
        proposal = load_proposal(user, block.proposal_id, lock=True)
        deleted, _ = ProposalBlock.objects.filter(pk=block.pk, proposal_id=proposal.id).delete()
        if not deleted:
            raise NotFound(t('errors.block.not_found'), resource='block')
        renumber(_ordered_siblings(proposal.id))
        _touch(proposal)
    logger.info('[blocks.delete] proposal=%s block=%s', proposal.id, block.id)
    return None


@service_result('blocks.reorder')
def reorder_blocks(user, proposal_id, ordered_ids: Any) -> list[ProposalBlock]:
    """Apply a new order given as the complete list of the proposal's block ids.

    Anything other than an exact permutation of the current ids is rejected
    without touching stored order.
    """
    require_identity(user)
    if not isinstance(ordered_ids, (list, tuple)):
        raise ValidationFailed(t('errors.reorder.not_a_list'), field_errors={'ordered_ids': [t('errors.reorder.not_a_list')]})
    parsed = [_parse_uuid(raw) for raw in ordered_ids]
    if any(p is None for p in parsed):
        raise ValidationFailed(t('errors.reorder.malformed_id'), field_errors={'ordered_ids': [t('errors.reorder.malformed_id')]})

    with transaction.atomic():
        proposal = load_proposal(user, proposal_id, lock=True)
        siblings = _ordered_siblings(proposal.id)
        by_id = {b.id: b for b in siblings}
        if len(parsed) != len(siblings) or len(set(parsed)) != len(parsed) or set(parsed) != set(by_id):
            message = t('errors.reorder.mismatch', expected=len(siblings), received=len(parsed))
            raise ValidationFailed(message, field_errors={'ordered_ids': [message]})
        ordered = [by_id[p] for p in parsed]
        changed = renumber(ordered)
        _touch(proposal)
    logger.info('[blocks.reorder] proposal=%s blocks=%s changed=%s', proposal.id, len(ordered), changed)
    return ordered


@service_result('blocks.duplicate')
def duplicate_block(user, block_id) -> ProposalBlock:
    """Copy a block into a new id placed directly after the source."""
    source = _load_block(user, block_id)
    with transaction.atomic():
        proposal = load_proposal(user, source.proposal_id, lock=True)
        siblings = _ordered_siblings(proposal.id)
        position = next((i for i, b in enumerate(siblings) if b.id == source.id), None)
        if position is None:
            raise NotFound(t('errors.block.not_found'), resource='block')
        current = siblings[position]
        clone = ProposalBlock.objects.create(
            proposal=proposal,
            type=current.type,
            order_index=current.order_index + 1,
            props=copy.deepcopy(current.props),
            style_overrides=copy.deepcopy(current.style_overrides or {}),
        )
        siblings.insert(position + 1, clone)
        renumber(siblings)
        _touch(proposal)
    logger.info('[blocks.duplicate] proposal=%s source=%s copy=%s', proposal.id, source.id, clone.id)
    return clone


def compact_proposal(proposal_id) -> int:
    """Close gaps and duplicates in one proposal's order. Caller holds the lock."""
    return renumber(_ordered_siblings(proposal_id))


@service_result('blocks.compact')
def compact_order(user, proposal_id) -> list[ProposalBlock]:
    with transaction.atomic():
        proposal = load_proposal(user, proposal_id, lock=True)
        changed = compact_proposal(proposal.id)
        if changed:
            _touch(proposal)
    logger.info('[blocks.compact] proposal=%s changed=%s', proposal.id, changed)
    return _ordered_siblings(proposal.id)
