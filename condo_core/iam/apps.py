from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "condo_core.iam"

    def ready(self) -> None:
        # registers the auth scheme with drf-spectacular
        from condo_core.iam import openapi  # noqa: F401
