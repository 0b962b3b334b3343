"""Batch lookups of library records by id, used when freezing references."""

from __future__ import annotations

import uuid
from typing import Any, Iterable

from app.common.checksum import to_json_safe

from .models import Case, FAQItem
from .serializers import CaseSerializer, FAQItemSerializer


def _valid_ids(ids: Iterable) -> set[str]:
    valid = set()
    for raw in ids:
        try:
            valid.add(str(uuid.UUID(str(raw))))
        except (TypeError, ValueError):
            continue  # malformed ids cannot match any row
    return valid


def _by_id(qs, serializer_class, ids: Iterable) -> dict[str, dict[str, Any]]:
    wanted = _valid_ids(ids)
    if not wanted:
        return {}
    records = qs.filter(id__in=wanted)
    return {str(obj.id): to_json_safe(serializer_class(obj).data) for obj in records}


def cases_by_id(ids: Iterable, workspace_id) -> dict[str, dict[str, Any]]:
    """One query for all requested cases of ``workspace_id``, keyed by str(id)."""
    return _by_id(Case.objects.filter(workspace_id=workspace_id), CaseSerializer, ids)


def faq_items_by_id(ids: Iterable, workspace_id) -> dict[str, dict[str, Any]]:
    return _by_id(FAQItem.objects.filter(workspace_id=workspace_id), FAQItemSerializer, ids)
