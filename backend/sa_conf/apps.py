from django.apps import AppConfig


class SaConfConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sa_conf"
    verbose_name = "Site configuration"
