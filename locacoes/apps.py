from django.apps import AppConfig


class LocacoesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "locacoes"
    verbose_name = "Locações"
