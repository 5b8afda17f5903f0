"""
Règles pures consultées par le cycle de vie : délai de modification et
complétude des données d'une séance.
"""
from datetime import timedelta

from .models import Session

DEFAULT_EDIT_WINDOW_MINUTES = 60

EDITABLE_STATUSES = frozenset({Session.Status.SUBMITTED, Session.Status.INCOMPLETE})


def within_edit_window(created_at, now, window_minutes: int) -> bool:
    return now - created_at <= timedelta(minutes=window_minutes)


def is_editable(session, now, window_minutes: int = DEFAULT_EDIT_WINDOW_MINUTES) -> bool:
    """
    Vrai si l'enseignant peut encore modifier sa déclaration : statut
    SUBMITTED ou INCOMPLETE et délai depuis la création non dépassé.
    """
    if session.status not in EDITABLE_STATUSES:
        return False
    return within_edit_window(session.created_at, now, window_minutes)


def elapsed_minutes(session, now) -> int:
    return max(0, int((now - session.created_at).total_seconds() // 60))


def edit_window_status(session, now, window_minutes: int = DEFAULT_EDIT_WINDOW_MINUTES) -> dict:
    elapsed = elapsed_minutes(session, now)
    return {
        'is_editable': is_editable(session, now, window_minutes),
        'edit_window': window_minutes,
        'elapsed': elapsed,
        'remaining': max(0, window_minutes - elapsed),
    }


def missing_fields(session) -> list[str]:
    return session.payload.missing_fields()


def is_complete(session) -> bool:
    """Les données exigées par le type d'origine sont-elles renseignées ?"""
    return not missing_fields(session)
