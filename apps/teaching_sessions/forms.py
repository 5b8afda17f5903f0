import copy

from django import forms
from django.forms.models import model_to_dict

from .models import Session

SESSION_FIELDS = [
    'type',
    'date',
    'time_slot',
    'replaced_teacher_prefix',
    'replaced_teacher_last_name',
    'replaced_teacher_first_name',
    'class_name',
    'subject',
    'student_count',
    'grade_level',
    'description',
    'comment',
]

# Champs de données conservés selon le type saisi à la création
FIELDS_BY_TYPE = {
    Session.Type.RCD: {
        'replaced_teacher_prefix',
        'replaced_teacher_last_name',
        'replaced_teacher_first_name',
        'class_name',
        'subject',
    },
    Session.Type.DEVOIRS_FAITS: {'student_count', 'grade_level'},
    Session.Type.HSE: {'description'},
    Session.Type.AUTRE: {'description'},
}

PAYLOAD_FIELDS = set().union(*FIELDS_BY_TYPE.values())


class SessionForm(forms.ModelForm):
    """
    Saisie d'une déclaration. À la création, les champs qui ne concernent
    pas le type choisi sont vidés.
    """

    class Meta:
        model = Session
        fields = SESSION_FIELDS

    def clean_student_count(self):
        value = self.cleaned_data.get('student_count')
        if value is not None and value < 1:
            raise forms.ValidationError("Le nombre d'élèves doit être au moins 1.")
        return value

    def clean(self):
        cleaned = super().clean()
        session_type = cleaned.get('type')
        if self.instance.pk is None and session_type:
            for name in PAYLOAD_FIELDS - FIELDS_BY_TYPE[session_type]:
                cleaned[name] = None if name == 'student_count' else ''
        return cleaned


def edit_form(session, data):
    """
    Formulaire de retouche : les champs absents gardent leur valeur actuelle.
    Le formulaire travaille sur une copie pour que `session` reste intacte.
    """
    initial = model_to_dict(session, fields=SESSION_FIELDS)
    initial.update({key: value for key, value in data.items() if key in SESSION_FIELDS})
    return SessionForm(data=initial, instance=copy.copy(session))


def changed_values(form, session):
    """Valeurs réellement modifiées par rapport à la séance en base."""
    return {
        name: form.cleaned_data[name]
        for name in SESSION_FIELDS
        if form.cleaned_data.get(name) != getattr(session, name)
    }
