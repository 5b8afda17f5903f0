from django.apps import AppConfig


class TeachingSessionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.teaching_sessions'
    label = 'teaching_sessions'
    verbose_name = 'Déclarations de séances'
