from django.contrib import admin

from .models import Session


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    """
    Consultation des déclarations, en lecture seule : création, retouche,
    correction du type et suppression passent par l'API, qui applique le
    cycle de vie et le verrou de version.
    """
    list_display = ('id', 'date', 'time_slot', 'type', 'teacher_name', 'status', 'in_pacte', 'version')
    list_filter = ('status', 'type', 'in_pacte', 'date')
    search_fields = ('teacher_name', 'class_name', 'replaced_teacher_last_name', 'description')
    date_hierarchy = 'date'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
