from django.apps import AppConfig


class ToclinkerConfig(AppConfig):
    """Configuration for the toclinker Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'toclinker'
    verbose_name = 'TOC linker'
