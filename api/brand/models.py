from django.db import models


class WorkspaceBrandSettings(models.Model):
    """Per-workspace visual identity copied into every published snapshot."""

    workspace = models.OneToOneField('workspaces.Workspace', on_delete=models.CASCADE, related_name='brand_settings')
    logo_url = models.URLField(max_length=800, blank=True, default='')
    # {primary, secondary, background, text} hex colors
    colors = models.JSONField(default=dict)
    # {font_family, heading_font, body_font}
    typography = models.JSONField(default=dict)
    # {card_radius, shadow_size}
    components = models.JSONField(default=dict)
    # {title, description, og_image}
    seo = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"BrandSettings {self.workspace_id}"
