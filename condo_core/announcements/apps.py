from django.apps import AppConfig


class AnnouncementsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "condo_core.announcements"

    def ready(self) -> None:
        # registers the assembly.created handler
        from condo_core.announcements import subscribers  # noqa: F401
