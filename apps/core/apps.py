from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Shared Services'

    def ready(self):
        from .cache import ResponseCache

        # One cache per process, handed to views and services by reference
        self.response_cache = ResponseCache(ttl_seconds=settings.RESPONSE_CACHE_TTL)
