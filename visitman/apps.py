from django.apps import AppConfig


class VisitmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "visitman"
    verbose_name = "Visitman - Loyalty Visit Ledger"
