from django.apps import AppConfig


class CheckinConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "checkin"
    verbose_name = "Ticket check-in"

    def ready(self) -> None:
        from checkin import signals  # noqa: F401
