from django.contrib import admin

from .models import SystemSettings


@admin.register(SystemSettings)
class SystemSettingsAdmin(admin.ModelAdmin):
    list_display = ('session_edit_window_minutes', 'require_verified_attachments', 'last_modified', 'modified_by')
    readonly_fields = ('last_modified', 'modified_by')

    def has_add_permission(self, request):
        return not SystemSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
