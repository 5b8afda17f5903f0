from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.http import require_GET
from openpyxl import Workbook
from openpyxl.styles import Font

from apps.audits.utils import log_action
from apps.teaching_sessions.lifecycle import normalize_status
from apps.teaching_sessions.models import Session

from .decorators import api_view, staff_required

EXPORT_COLUMNS = [
    'ID', 'Date', 'Créneau', 'Type', 'Type d\'origine', 'Enseignant', 'PACTE',
    'Statut', 'Classe', 'Enseignant remplacé', 'Élèves', 'Niveau', 'Description',
    'Motif du refus', 'Créée le', 'Validée le',
]


# Texte libre saisi par les enseignants : jamais interprété comme formule.
FREE_TEXT_COLUMNS = (
    EXPORT_COLUMNS.index('Enseignant'),
    EXPORT_COLUMNS.index('Classe'),
    EXPORT_COLUMNS.index('Enseignant remplacé'),
    EXPORT_COLUMNS.index('Niveau'),
    EXPORT_COLUMNS.index('Description'),
    EXPORT_COLUMNS.index('Motif du refus'),
)


def _local(value):
    """openpyxl refuse les datetimes avec fuseau horaire."""
    if value is None:
        return None
    return timezone.localtime(value).replace(tzinfo=None)


def build_sessions_workbook(sessions):
    wb = Workbook()
    ws = wb.active
    ws.title = "Déclarations"
    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for session in sessions:
        ws.append([
            session.pk,
            session.date,
            session.time_slot,
            session.get_type_display(),
            session.get_original_type_display(),
            session.display_teacher_name,
            'Oui' if session.in_pacte else 'Non',
            session.get_status_display(),
            session.class_name,
            session.replaced_teacher_name,
            session.student_count,
            session.grade_level,
            session.description,
            session.rejection_reason,
            _local(session.created_at),
            _local(session.validated_at),
        ])
        row = ws[ws.max_row]
        for index in FREE_TEXT_COLUMNS:
            if row[index].data_type == 'f':
                row[index].data_type = 's'
    return wb


@require_GET
@api_view
@staff_required
def export_sessions_excel(request):
    """
    Export Excel des déclarations (?status=VALIDATED par exemple pour la
    mise en paiement).
    """
    sessions = Session.objects.select_related('teacher').order_by('date', 'time_slot', 'id')
    status = request.GET.get('status')
    if status:
        status = normalize_status(status).value
        sessions = sessions.filter(status=status)

    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    suffix = f"_{status.lower()}" if status else ''
    response['Content-Disposition'] = f'attachment; filename="declarations{suffix}.xlsx"'

    wb = build_sessions_workbook(sessions)

    log_action(
        request.user,
        f"Export Excel des déclarations{f' (statut {status})' if status else ''}",
        request,
        niveau='INFO',
        objet_type='EXPORT',
        objet_id=None
    )

    wb.save(response)
    return response
