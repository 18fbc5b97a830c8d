from django.apps import AppConfig


class FranchisesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'falbites.franchises'
