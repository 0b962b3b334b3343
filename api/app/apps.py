from django.apps import AppConfig


class AppUtilitiesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'app'
    verbose_name = 'App Utilities'

    def ready(self):  # type: ignore[override]
        from .common import keys
        from . import revalidation  # noqa: F401  connects the default invalidation receiver

        keys.ready()
