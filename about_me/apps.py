from django.apps import AppConfig


class AboutMeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "about_me"
    verbose_name = "About me"
