"""Django app configuration for Shipman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ShipmanConfig(AppConfig):
    """Configuration for Shipman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "shipman"
    verbose_name = _("Contêineres de Exportação")

    def ready(self):
        from shipman import handlers  # noqa: F401
