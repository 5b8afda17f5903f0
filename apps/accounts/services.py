import logging

from django.db import transaction

from apps.audits.utils import log_action
from apps.dashboard.services import school_year_bounds

from .models import PacteHistory, User

logger = logging.getLogger(__name__)


class NotATeacher(ValueError):
    """Seuls les enseignants ont un statut PACTE."""


def set_pacte_status(teacher, in_pacte, actor, reason='', school_year=None, request=None):
    """
    Change l'engagement PACTE d'un enseignant et en garde la trace.

    Les séances déjà déclarées conservent la valeur copiée à leur création.
    Renvoie l'entrée d'historique, ou None si le statut ne change pas.
    """
    if teacher.role != User.Role.TEACHER:
        raise NotATeacher("Seuls les enseignants peuvent avoir un statut PACTE.")
    if teacher.in_pacte == in_pacte:
        return None

    school_year = school_year or school_year_bounds()[2]
    previous = teacher.in_pacte

    with transaction.atomic():
        teacher.in_pacte = in_pacte
        teacher.save(update_fields=['in_pacte'])
        entry = PacteHistory.objects.create(
            teacher=teacher,
            teacher_name=teacher.get_full_name(),
            previous_status=previous,
            new_status=in_pacte,
            reason=reason,
            school_year=school_year,
            changed_by=actor,
        )

    log_action(
        actor,
        f"Statut PACTE de {teacher.get_full_name()} : "
        f"{'PACTE' if previous else 'hors PACTE'} → {'PACTE' if in_pacte else 'hors PACTE'} ({school_year})",
        request,
        objet_type='USER',
        objet_id=teacher.pk
    )
    logger.info("PACTE status of teacher %s set to %s by %s", teacher.pk, in_pacte, actor.pk)
    return entry
