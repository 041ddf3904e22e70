from django.apps import AppConfig


class ExchangeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.exchange'
    label = 'exchange'
    verbose_name = 'Currency Exchange'
