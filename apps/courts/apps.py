from django.apps import AppConfig


class CourtsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.courts"
    label = "courts"
