"""Brand settings provider consumed by the publishing pipeline."""

from __future__ import annotations

from typing import Any, Optional

from .models import WorkspaceBrandSettings


def brand_payload(settings_obj: WorkspaceBrandSettings) -> dict[str, Any]:
    return {
        'logo_url': settings_obj.logo_url or None,
        'colors': settings_obj.colors or {},
        'typography': settings_obj.typography or {},
        'components': settings_obj.components or {},
        'seo': settings_obj.seo or {},
    }


def get_brand_settings(workspace_id) -> Optional[dict[str, Any]]:
    """Brand settings for a workspace, or None when it was never customised."""
    settings_obj = WorkspaceBrandSettings.objects.filter(workspace_id=workspace_id).first()
    if settings_obj is None:
        return None
    return brand_payload(settings_obj)
