"""
Services de gestion des déclarations : création, changement de statut,
retouche par l'enseignant, correction du type et suppression.

Chaque écriture passe par SessionRepository (verrou optimiste). En cas de
conflit de version, la séance est relue et la demande revalidée, dans la
limite de SESSION_TRANSITION_MAX_ATTEMPTS tentatives.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.attachments.store import AttachmentStore
from apps.audits.utils import log_action
from apps.dashboard.models import SystemSettings

from . import lifecycle
from .exceptions import ConcurrentModification, EditWindowExpired, IllegalTransition
from .models import Session
from .policies import edit_window_status, within_edit_window, elapsed_minutes
from .repository import SessionRepository
from .signals import session_status_changed

logger = logging.getLogger(__name__)

Status = Session.Status

PROTECTED_FROM_DELETION = frozenset({Status.VALIDATED, Status.READY_FOR_PAYMENT, Status.PAID})


def sessions_for(user):
    """Séances visibles par l'utilisateur : les siennes pour un enseignant."""
    qs = Session.objects.select_related('teacher')
    if not user.is_school_staff:
        qs = qs.filter(teacher=user)
    return qs


def can_view(user, session) -> bool:
    return user.is_school_staff or session.teacher_id == user.pk


def create_session(teacher, data, created_by, request=None) -> Session:
    """
    Enregistre une nouvelle déclaration au statut SUBMITTED.
    Le type d'origine et le nom de l'enseignant sont figés à la création.
    """
    session = Session(
        teacher=teacher,
        teacher_name=teacher.get_full_name(),
        in_pacte=teacher.in_pacte,
        original_type=data['type'],
        status=Status.SUBMITTED,
        updated_by=created_by,
        **data
    )
    session.save()

    log_action(
        created_by,
        f"Déclaration créée : {session.get_type_display()} du {session.date:%d/%m/%Y} "
        f"({session.time_slot}) pour {session.teacher_name}",
        request,
        objet_type='SESSION',
        objet_id=session.pk
    )
    logger.info("Session %s created for teacher %s", session.pk, teacher.pk)
    return session


def _publish(event, session):
    if event is None:
        return
    responses = session_status_changed.send_robust(sender=Session, event=event, session=session)
    for receiver, result in responses:
        if isinstance(result, Exception):
            logger.error(
                "Receiver %r failed for session %s (%s -> %s)",
                receiver, event.session_id, event.from_status, event.to_status,
                exc_info=result,
            )


def _apply(session_id, compute, repository):
    """Calcule puis enregistre un changement, en rejouant sur conflit de version."""
    attempts = max(1, settings.SESSION_TRANSITION_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        session = repository.load(session_id)
        outcome = compute(session)
        try:
            return repository.save(session.pk, outcome.expected_version, outcome.changes), outcome
        except ConcurrentModification:
            logger.warning(
                "Version conflict on session %s (attempt %s/%s)", session_id, attempt, attempts
            )
            if attempt == attempts:
                raise


def change_status(session_id, requested_status, user, comment=None, *, changes=None,
                  request=None, repository=None, store=None) -> Session:
    """
    Applique une transition demandée par `user`, journalise l'action et
    prévient l'enseignant concerné.

    Lève une LifecycleError si la demande est refusée.
    """
    repository = repository or SessionRepository()
    store = store or AttachmentStore()
    actor = lifecycle.Actor.from_user(user)
    config = SystemSettings.get_settings()

    def compute(session):
        has_verified = None
        if config.require_verified_attachments:
            has_verified = store.has_verified_attachments(session.pk)
        return lifecycle.transition(
            session,
            requested_status,
            actor,
            comment,
            edit_window_minutes=config.session_edit_window_minutes,
            changes=changes,
            has_verified_attachments=has_verified,
            require_verified_attachments=config.require_verified_attachments,
        )

    updated, outcome = _apply(session_id, compute, repository)

    event = outcome.event
    if event is not None:
        action = f"Séance {updated.pk} : {event.from_status} → {event.to_status}"
        if event.comment:
            action += f" ({event.comment})"
    else:
        action = f"Séance {updated.pk} modifiée par l'enseignant ({', '.join(sorted(changes or {}))})"
    log_action(
        user,
        action,
        request,
        niveau='WARNING' if updated.status == Status.REJECTED else 'INFO',
        objet_type='SESSION',
        objet_id=updated.pk
    )

    _publish(event, updated)
    return updated


def update_session(session_id, changes, user, request=None, **kwargs) -> Session:
    """Retouche d'une déclaration par son auteur (retour au statut SUBMITTED)."""
    return change_status(
        session_id, Status.SUBMITTED, user, changes=changes, request=request, **kwargs
    )


def correct_type(session_id, new_type, user, request=None, repository=None) -> Session:
    repository = repository or SessionRepository()
    actor = lifecycle.Actor.from_user(user)
    original = {}

    def compute(session):
        original['type'] = session.type
        return lifecycle.correct_type(session, new_type, actor)

    updated, _ = _apply(session_id, compute, repository)
    log_action(
        user,
        f"Type de la séance {updated.pk} corrigé : {original['type']} → {updated.type}",
        request,
        objet_type='SESSION',
        objet_id=updated.pk
    )
    return updated


def _delete_stored_files(stored_files):
    for storage, name in stored_files:
        storage.delete(name)


def delete_session(session_id, user, request=None, repository=None):
    """
    Suppression d'une déclaration.

    - Enseignant : sa propre séance, au statut SUBMITTED, dans le délai.
    - Direction / administration : toute séance non encore validée.
    """
    repository = repository or SessionRepository()
    session = repository.load(session_id)
    now = timezone.now()

    if user.role == user.Role.TEACHER:
        if session.teacher_id != user.pk:
            raise IllegalTransition("Un enseignant ne peut supprimer que ses propres séances.")
        if session.status != Status.SUBMITTED:
            raise IllegalTransition("Seule une déclaration en attente de vérification peut être supprimée.")
        window = SystemSettings.get_settings().session_edit_window_minutes
        if not within_edit_window(session.created_at, now, window):
            raise EditWindowExpired(
                edit_window=window,
                elapsed=elapsed_minutes(session, now),
                remaining=0,
            )
    elif user.role in (user.Role.PRINCIPAL, user.Role.ADMIN):
        if session.status in PROTECTED_FROM_DELETION:
            raise IllegalTransition("Une séance validée, prête pour paiement ou payée ne peut pas être supprimée.")
    else:
        raise IllegalTransition("Suppression non autorisée pour ce rôle.")

    stored_files = [
        (attachment.file.storage, attachment.file.name)
        for attachment in session.attachments.all()
        if attachment.file
    ]
    repository.delete(session.pk, session.version)
    # Les fichiers ne sont retirés du stockage qu'une fois la ligne supprimée.
    transaction.on_commit(lambda: _delete_stored_files(stored_files))

    log_action(
        user,
        f"Déclaration supprimée : séance {session_id} ({session.type}, {session.teacher_name}, {session.status})",
        request,
        niveau='WARNING',
        objet_type='SESSION',
        objet_id=session_id
    )


def edit_status(session, now=None) -> dict:
    window = SystemSettings.get_settings().session_edit_window_minutes
    return edit_window_status(session, now or timezone.now(), window)


def next_statuses(session, user, now=None) -> list:
    window = SystemSettings.get_settings().session_edit_window_minutes
    return lifecycle.allowed_next_statuses(
        session, lifecycle.Actor.from_user(user), now=now, edit_window_minutes=window
    )
