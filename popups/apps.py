from django.apps import AppConfig


class PopupsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "popups"
