from django.apps import AppConfig


class SchedulingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.scheduling"
    label = "scheduling"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from . import feed, signals  # noqa: F401

        feed.register_handlers()
