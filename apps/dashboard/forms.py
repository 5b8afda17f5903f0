from django import forms

from .models import SystemSettings


class SystemSettingsForm(forms.ModelForm):
    class Meta:
        model = SystemSettings
        fields = ['session_edit_window_minutes', 'require_verified_attachments']
        labels = {
            'session_edit_window_minutes': 'Délai de modification (minutes)',
            'require_verified_attachments': 'Pièce jointe vérifiée obligatoire avant validation',
        }
