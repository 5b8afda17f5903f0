from django.contrib import admin
from .models import LogAudit


@admin.register(LogAudit)
class LogAuditAdmin(admin.ModelAdmin):
    list_display = ('id_utilisateur', 'action', 'niveau', 'objet_type', 'objet_id', 'date_action', 'adresse_ip')
    list_filter = ('niveau', 'objet_type', 'date_action')
    search_fields = ('action', 'id_utilisateur__nom', 'id_utilisateur__prenom')

    # Un log d'audit ne doit jamais être modifié
    readonly_fields = ('id_utilisateur', 'action', 'date_action', 'adresse_ip', 'niveau', 'objet_type', 'objet_id')

    def has_delete_permission(self, request, obj=None):
        return False
