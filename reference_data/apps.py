from django.apps import AppConfig


class ReferenceDataConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'reference_data'
    verbose_name = 'Reference data'
