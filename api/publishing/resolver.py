"""Inline the library records that block props reference by id.

Runs once per publish. Each referenced collection is fetched with a single
query covering every block, so the cost does not grow with the block count.
"""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Callable, Iterable

from library.queries import cases_by_id, faq_items_by_id
from proposals.block_types import get_definition, is_valid_block_type

logger = logging.getLogger(__name__)

FETCHERS: dict[str, Callable[[Iterable, Any], dict[str, dict[str, Any]]]] = {
    'cases': cases_by_id,
    'faq_items': faq_items_by_id,
}


def _references(block: dict[str, Any]):
    if not is_valid_block_type(block.get('type')):
        return ()
    return get_definition(block['type']).references


def _ids(props: dict[str, Any], key: str) -> list[str]:
    value = props.get(key) or []
    if not isinstance(value, list):
        return []
    ids = []
    for raw in value:
        try:
            ids.append(str(uuid.UUID(str(raw))))
        except ValueError:
            continue
    return ids


def resolve_block_references(blocks: list[dict[str, Any]], workspace_id) -> list[dict[str, Any]]:
    """Return copies of ``blocks`` with referenced records inlined.

    For every reference a block type declares, ``props[target_key]`` receives
    the records for ``props[ids_key]`` in the order the ids were listed. Ids
    that no longer resolve, or that belong to another workspace, are skipped.
    Blocks without references come back as plain copies. ``blocks`` itself is
    never modified.
    """
    wanted: dict[str, set[str]] = {name: set() for name in FETCHERS}
    for block in blocks:
        for ref in _references(block):
            wanted[ref.collection].update(_ids(block.get('props') or {}, ref.ids_key))

    records = {name: FETCHERS[name](ids, workspace_id) if ids else {} for name, ids in wanted.items()}

    resolved = []
    for block in blocks:
        out = copy.deepcopy(block)
        refs = _references(block)
        if refs:
            props = out.setdefault('props', {})
            for ref in refs:
                ids = _ids(props, ref.ids_key)
                found = records[ref.collection]
                props[ref.target_key] = [found[i] for i in ids if i in found]
                missing = len(ids) - len(props[ref.target_key])
                if missing:
                    logger.info('[publish.resolve] block=%s %s unresolved=%s', block.get('id'), ref.collection, missing)
        resolved.append(out)
    return resolved
