"""Workspace membership gate used before any proposal/block/publish operation.

Row-level enforcement belongs to the database; these checks decide which error
kind the caller sees (authentication vs authorization) before touching data.
"""

from __future__ import annotations

import uuid
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError

from app.common.keys import t
from app.errors import AccessDenied, AuthenticationRequired

from .models import WorkspaceMember


def require_identity(user) -> None:
    if user is None or not getattr(user, 'is_authenticated', False):
        raise AuthenticationRequired()


def get_membership(user, workspace_id) -> Optional[WorkspaceMember]:
    if user is None or not getattr(user, 'is_authenticated', False) or not workspace_id:
        return None
    try:
        return WorkspaceMember.objects.filter(workspace_id=workspace_id, user_id=user.id).first()
    except (ValueError, DjangoValidationError):  # malformed uuid
        return None


def is_member(user, workspace_id) -> bool:
    return get_membership(user, workspace_id) is not None


def member_workspace_ids(user) -> list:
    if user is None or not getattr(user, 'is_authenticated', False):
        return []
    return list(WorkspaceMember.objects.filter(user_id=user.id).values_list('workspace_id', flat=True))


def _parse_workspace_id(value) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        return None


def scope_to_member_workspaces(queryset, user, header=None):
    """Rows of the user's workspaces, narrowed to ``header`` when one is sent.

    A malformed or foreign X-Workspace-ID yields an empty queryset.
    """
    allowed = set(member_workspace_ids(user))
    if header:
        wanted = _parse_workspace_id(header)
        if wanted is None or wanted not in allowed:
            return queryset.none()
        return queryset.filter(workspace_id=wanted)
    return queryset.filter(workspace_id__in=allowed)


def require_member(user, workspace_id) -> WorkspaceMember:
    require_identity(user)
    membership = get_membership(user, workspace_id)
    if membership is None:
        raise AccessDenied(t('errors.workspace.forbidden'), resource='workspace')
    return membership


def require_owner(user, workspace_id) -> WorkspaceMember:
    """Owner-or-admin gate for workspace-wide settings."""
    membership = require_member(user, workspace_id)
    if membership.role not in WorkspaceMember.MANAGER_ROLES:
        raise AccessDenied(t('errors.workspace.owner_only'), resource='workspace')
    return membership
