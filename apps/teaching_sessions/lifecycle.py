"""
Cycle de vie d'une séance déclarée.

    SUBMITTED ──► REVIEWED ──► VALIDATED ──► READY_FOR_PAYMENT ──► PAID
        │  ▲          │            ▲
        │  └──────────┘ (retrait par l'enseignant, dans le délai)
        ├──► PENDING_DOCUMENTS ──► REVIEWED / SUBMITTED (enseignant)
        ├──► INCOMPLETE ──► SUBMITTED (enseignant)
        ├──► VALIDATED (validation directe, direction)
        └──► REJECTED (tout statut non terminal, direction)

Ce module ne fait aucune entrée/sortie : transition() lit la séance fournie,
vérifie la demande et renvoie les champs à écrire ainsi que l'événement à
diffuser. L'écriture (avec verrou optimiste) revient à SessionRepository.

La table TRANSITIONS est l'unique source des droits : l'API l'expose aux
écrans via allowed_next_statuses() et l'applique ici.
"""
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from django.utils import timezone

from apps.accounts.models import User

from .exceptions import (
    DocumentsRequired,
    EditWindowExpired,
    IllegalTransition,
    IncompletePayload,
    MissingRequiredComment,
    SessionNotFound,
    TypeCorrectionLocked,
)
from .models import Session
from .policies import DEFAULT_EDIT_WINDOW_MINUTES, elapsed_minutes, within_edit_window

Status = Session.Status
Role = User.Role

TERMINAL_STATUSES = frozenset({Status.PAID, Status.REJECTED})
NON_TERMINAL_STATUSES = frozenset(set(Status) - TERMINAL_STATUSES)

# Statuts avant engagement de la direction : le type peut encore être corrigé
EARLY_STATUSES = frozenset({
    Status.SUBMITTED,
    Status.INCOMPLETE,
    Status.PENDING_DOCUMENTS,
    Status.REVIEWED,
})

COMMENT_REQUIRED_STATUSES = frozenset({Status.REJECTED, Status.PENDING_DOCUMENTS})

# Retouche par l'enseignant, soumise au délai de modification
SELF_EDIT_EDGES = frozenset({
    (Status.SUBMITTED, Status.SUBMITTED),
    (Status.REVIEWED, Status.SUBMITTED),
})

# Champs qu'un enseignant peut retoucher sur sa propre déclaration
TEACHER_EDITABLE_FIELDS = frozenset({
    'date',
    'time_slot',
    'type',
    'replaced_teacher_prefix',
    'replaced_teacher_last_name',
    'replaced_teacher_first_name',
    'class_name',
    'subject',
    'student_count',
    'grade_level',
    'description',
    'comment',
})


def _build_transitions():
    secretary = {
        Status.SUBMITTED: {
            Status.REVIEWED,
            Status.PENDING_DOCUMENTS,
            Status.INCOMPLETE,
            Status.REJECTED,
        },
        Status.PENDING_DOCUMENTS: {Status.REVIEWED},
        Status.VALIDATED: {Status.READY_FOR_PAYMENT},
        Status.READY_FOR_PAYMENT: {Status.PAID},
    }

    # Direction : tout ce que fait le secrétariat, plus la validation et le refus
    principal = {status: set(targets) for status, targets in secretary.items()}
    principal.setdefault(Status.SUBMITTED, set()).add(Status.VALIDATED)
    principal.setdefault(Status.REVIEWED, set()).update({Status.VALIDATED, Status.REJECTED})
    for status in NON_TERMINAL_STATUSES:
        principal.setdefault(status, set()).add(Status.REJECTED)

    admin = {status: set(targets) for status, targets in principal.items()}

    teacher = {
        Status.SUBMITTED: {Status.SUBMITTED},
        Status.REVIEWED: {Status.SUBMITTED},
        Status.PENDING_DOCUMENTS: {Status.SUBMITTED},
        Status.INCOMPLETE: {Status.SUBMITTED},
    }

    table = {}
    for role, edges in (
        (Role.TEACHER, teacher),
        (Role.SECRETARY, secretary),
        (Role.PRINCIPAL, principal),
        (Role.ADMIN, admin),
    ):
        for status, targets in edges.items():
            table[(status, role)] = frozenset(targets)
    return MappingProxyType(table)


TRANSITIONS = _build_transitions()


@dataclass(frozen=True)
class Actor:
    """Auteur d'une demande de transition."""
    user_id: int | None
    role: str
    name: str = ''

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.pk, role=user.role, name=user.get_full_name())


@dataclass(frozen=True)
class LifecycleEvent:
    session_id: int | None
    teacher_id: int | None
    from_status: str
    to_status: str
    actor_role: str
    actor_id: int | None
    comment: str
    occurred_at: datetime


@dataclass(frozen=True)
class TransitionOutcome:
    """Résultat d'une transition acceptée : rien n'est encore écrit."""
    session_id: int | None
    expected_version: int | None
    changes: dict = field(default_factory=dict)
    event: LifecycleEvent | None = None

    @property
    def status(self):
        return self.changes.get('status')


def normalize_status(value):
    """Accepte aussi les anciens noms (PENDING_REVIEW, PENDING_VALIDATION)."""
    if value in Session.STATUS_ALIASES:
        return Session.STATUS_ALIASES[value]
    try:
        return Status(value)
    except ValueError:
        raise IllegalTransition(f"Statut inconnu : {value}.") from None


def allowed_transitions(status, role) -> frozenset:
    return TRANSITIONS.get((normalize_status(status), role), frozenset())


def is_terminal(status) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


def can_transition(session, requested_status, actor, comment=None, **options) -> bool:
    try:
        transition(session, requested_status, actor, comment, **options)
    except (IllegalTransition, MissingRequiredComment, EditWindowExpired,
            IncompletePayload, DocumentsRequired, TypeCorrectionLocked):
        return False
    return True


def allowed_next_statuses(session, actor, now=None,
                          edit_window_minutes=DEFAULT_EDIT_WINDOW_MINUTES) -> list:
    """
    Statuts proposés à l'écran pour cet utilisateur. La retouche sans
    changement de statut n'y figure pas (elle passe par la modification).
    """
    now = now or timezone.now()
    current = normalize_status(session.status)
    if actor.role == Role.TEACHER and session.teacher_id != actor.user_id:
        return []
    result = []
    for target in allowed_transitions(current, actor.role):
        if target == current:
            continue
        if actor.role == Role.TEACHER and (current, target) in SELF_EDIT_EDGES:
            if not within_edit_window(session.created_at, now, edit_window_minutes):
                continue
        result.append(target)
    return sorted(result, key=list(Status).index)


def _field_changes(session, changes):
    if not changes:
        return {}
    unknown = sorted(set(changes) - TEACHER_EDITABLE_FIELDS)
    if unknown:
        raise IllegalTransition(f"Champ non modifiable : {', '.join(unknown)}.")
    return {
        name: value
        for name, value in changes.items()
        if getattr(session, name) != value
    }


def transition(session, requested_status, actor, comment=None, *, now=None,
               edit_window_minutes=DEFAULT_EDIT_WINDOW_MINUTES, changes=None,
               has_verified_attachments=None, require_verified_attachments=False):
    """
    Valide une demande de changement de statut et calcule son effet.

    Ordre des contrôles : statut identique, arête absente pour ce rôle (ou
    séance d'un autre enseignant), commentaire manquant, délai de retouche
    dépassé, données incomplètes ou pièces jointes non vérifiées.

    Lève une LifecycleError ; ne modifie jamais `session`.
    """
    if session is None:
        raise SessionNotFound()

    now = now or timezone.now()
    current = normalize_status(session.status)
    requested = normalize_status(requested_status)
    comment = (comment or '').strip()
    is_teacher = actor.role == Role.TEACHER

    if changes and not is_teacher:
        raise IllegalTransition("Seul l'enseignant peut modifier le contenu de sa déclaration.")
    field_changes = _field_changes(session, changes)
    self_edit = is_teacher and (current, requested) in SELF_EDIT_EDGES

    # 1. statut identique : seule une vraie retouche de l'enseignant passe
    if requested == current and not (self_edit and field_changes):
        raise IllegalTransition(f"La séance est déjà au statut {current.label}.")

    # 2. arête autorisée pour ce rôle
    if requested not in allowed_transitions(current, actor.role):
        raise IllegalTransition(f"Transition non autorisée : {current} → {requested}.")
    if is_teacher and session.teacher_id != actor.user_id:
        raise IllegalTransition("Un enseignant ne peut agir que sur ses propres séances.")

    # 3. commentaire obligatoire
    if requested in COMMENT_REQUIRED_STATUSES and not comment:
        raise MissingRequiredComment()

    # 4. délai de retouche
    if self_edit and not within_edit_window(session.created_at, now, edit_window_minutes):
        raise EditWindowExpired(
            edit_window=edit_window_minutes,
            elapsed=elapsed_minutes(session, now),
            remaining=0,
        )

    # 5. complétude et pièces jointes
    if requested in (Status.REVIEWED, Status.VALIDATED) and current in (Status.SUBMITTED, Status.PENDING_DOCUMENTS):
        missing = session.payload.missing_fields()
        if missing:
            raise IncompletePayload(missing_fields=missing)
    if requested == Status.VALIDATED and require_verified_attachments and not has_verified_attachments:
        raise DocumentsRequired()

    if 'type' in field_changes and current not in EARLY_STATUSES:
        raise TypeCorrectionLocked()

    updates = dict(field_changes)
    updates.update(status=requested, updated_at=now, updated_by_id=actor.user_id)
    if comment:
        updates['review_comment'] = comment
    if requested == Status.REVIEWED:
        updates.update(reviewed_by_id=actor.user_id, reviewed_at=now)
    elif requested == Status.VALIDATED:
        updates.update(validated_by_id=actor.user_id, validated_at=now)
    elif requested == Status.REJECTED:
        updates['rejection_reason'] = comment
    elif current == Status.REVIEWED and requested == Status.SUBMITTED:
        updates.update(reviewed_by_id=None, reviewed_at=None)

    event = None
    if requested != current:
        event = LifecycleEvent(
            session_id=session.pk,
            teacher_id=session.teacher_id,
            from_status=current,
            to_status=requested,
            actor_role=actor.role,
            actor_id=actor.user_id,
            comment=comment,
            occurred_at=now,
        )

    return TransitionOutcome(
        session_id=session.pk,
        expected_version=session.version,
        changes=updates,
        event=event,
    )


def correct_type(session, new_type, actor, now=None):
    """
    Correction du type par le secrétariat ou la direction (ex. HSE saisi en
    AUTRE). Le type d'origine reste inchangé.
    """
    if session is None:
        raise SessionNotFound()
    if actor.role not in User.STAFF_ROLES:
        raise IllegalTransition("Seuls le secrétariat et la direction peuvent corriger le type.")
    if new_type not in Session.Type.values:
        raise IllegalTransition(f"Type inconnu : {new_type}.")
    if normalize_status(session.status) not in EARLY_STATUSES:
        raise TypeCorrectionLocked()
    if session.type == new_type:
        raise IllegalTransition(f"La séance est déjà de type {new_type}.")

    now = now or timezone.now()
    return TransitionOutcome(
        session_id=session.pk,
        expected_version=session.version,
        changes={'type': new_type, 'updated_at': now, 'updated_by_id': actor.user_id},
    )
