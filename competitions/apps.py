from django.apps import AppConfig


class CompetitionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "competitions"
    verbose_name = "Team Competitions"

    def ready(self) -> None:
        from competitions import signals  # noqa: F401
