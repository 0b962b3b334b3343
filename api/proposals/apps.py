from django.apps import AppConfig


class ProposalsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'proposals'

    def ready(self):  # type: ignore[override]
        # Registry exhaustiveness is checked at import time
        from . import block_types  # noqa: F401
