"""
Statistiques des déclarations pour le secrétariat et la direction.
"""
import datetime

from django.db.models import Count, Q
from django.utils import timezone

from apps.accounts.models import User
from apps.teaching_sessions.models import Session

PAYABLE_STATUSES = (
    Session.Status.VALIDATED,
    Session.Status.READY_FOR_PAYMENT,
    Session.Status.PAID,
)


def school_year_bounds(today=None):
    """
    Année scolaire contenant `today` : du 1er septembre au 31 août.
    Renvoie (début, fin, libellé 'AAAA-AAAA').
    """
    today = today or timezone.localdate()
    start_year = today.year if today.month >= 9 else today.year - 1
    start = datetime.date(start_year, 9, 1)
    end = datetime.date(start_year + 1, 8, 31)
    return start, end, f"{start_year}-{start_year + 1}"


def status_summary(queryset=None):
    """Nombre de séances par statut et par type (zéro compris)."""
    qs = queryset if queryset is not None else Session.objects.all()

    by_status = {status: 0 for status in Session.Status.values}
    for row in qs.order_by().values('status').annotate(total=Count('id')):
        by_status[row['status']] = row['total']

    by_type = {session_type: 0 for session_type in Session.Type.values}
    for row in qs.order_by().values('type').annotate(total=Count('id')):
        by_type[row['type']] = row['total']

    return {
        'total': sum(by_status.values()),
        'by_status': by_status,
        'by_type': by_type,
    }


def teacher_stats(today=None, in_pacte=None):
    """
    Statistiques par enseignant (vue PACTE) : total toutes années, puis pour
    l'année scolaire en cours le détail par type et les séances validées.
    """
    start, end, _ = school_year_bounds(today)
    teachers = User.objects.teachers()
    if in_pacte is not None:
        teachers = teachers.filter(in_pacte=in_pacte)

    this_year = Q(teaching_sessions__date__gte=start, teaching_sessions__date__lte=end)
    teachers = teachers.annotate(
        total=Count('teaching_sessions'),
        current_year=Count('teaching_sessions', filter=this_year),
        rcd=Count('teaching_sessions', filter=this_year & Q(teaching_sessions__type=Session.Type.RCD)),
        devoirs_faits=Count(
            'teaching_sessions',
            filter=this_year & Q(teaching_sessions__type=Session.Type.DEVOIRS_FAITS),
        ),
        hse=Count('teaching_sessions', filter=this_year & Q(teaching_sessions__type=Session.Type.HSE)),
        autre=Count('teaching_sessions', filter=this_year & Q(teaching_sessions__type=Session.Type.AUTRE)),
        validated=Count(
            'teaching_sessions',
            filter=this_year & Q(teaching_sessions__status__in=PAYABLE_STATUSES),
        ),
    )

    return [
        {
            'teacher_id': teacher.pk,
            'name': teacher.get_full_name(),
            'initials': teacher.initials,
            'in_pacte': teacher.in_pacte,
            'total': teacher.total,
            'current_year': teacher.current_year,
            'rcd': teacher.rcd,
            'devoirs_faits': teacher.devoirs_faits,
            'hse': teacher.hse,
            'autre': teacher.autre,
            'validated': teacher.validated,
        }
        for teacher in teachers
    ]
