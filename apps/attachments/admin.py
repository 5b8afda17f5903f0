from django.contrib import admin

from .models import Attachment


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ('original_name', 'session', 'mime_type', 'file_size', 'is_verified', 'is_archived', 'created_at')
    list_filter = ('is_verified', 'is_archived', 'mime_type')
    search_fields = ('original_name',)
    raw_id_fields = ('session', 'uploaded_by', 'verified_by', 'archived_by')
    readonly_fields = ('file_size', 'mime_type', 'created_at')
