from django.apps import AppConfig


class CapacitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.capacities"
    label = "capacities"
