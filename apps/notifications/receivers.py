"""
Notifications envoyées à l'enseignant quand sa déclaration change de statut.

Appelé via session_status_changed.send_robust : une exception levée ici est
journalisée par l'émetteur et n'annule pas la transition.
"""
import logging

from django.dispatch import receiver

from apps.teaching_sessions.models import Session
from apps.teaching_sessions.signals import session_status_changed

from .models import Notification

logger = logging.getLogger(__name__)

Status = Session.Status

TITLES = {
    Status.PENDING_DOCUMENTS: "Pièces jointes requises",
    Status.INCOMPLETE: "Déclaration incomplète",
    Status.REJECTED: "Déclaration rejetée",
    Status.REVIEWED: "Déclaration transmise",
    Status.VALIDATED: "Déclaration validée",
    Status.READY_FOR_PAYMENT: "Prêt pour paiement",
    Status.PAID: "Déclaration payée",
}

MESSAGES = {
    Status.PENDING_DOCUMENTS: "nécessite des pièces jointes supplémentaires.",
    Status.INCOMPLETE: "est incomplète. Merci de la compléter.",
    Status.REJECTED: "a été rejetée.",
    Status.REVIEWED: "a été transmise à la direction pour validation.",
    Status.VALIDATED: "a été validée par la direction.",
    Status.READY_FOR_PAYMENT: "est prête pour le paiement.",
    Status.PAID: "a été mise en paiement.",
}


def build_message(session, status, comment=''):
    message = f"Votre déclaration du {session.date:%d/%m/%Y} ({session.type}) {MESSAGES[status]}"
    if comment:
        if status == Status.REJECTED:
            message += f"\n\nMotif : {comment}"
        else:
            message += f"\n\nMessage du secrétariat : {comment}"
    return message


def notify_status_change(event, session):
    """Crée la notification de l'enseignant ; rien si le statut n'en prévoit pas."""
    if event.to_status not in TITLES:
        return None
    if event.actor_id == event.teacher_id:
        return None

    notification = Notification.objects.create(
        id_utilisateur_id=event.teacher_id,
        session=session,
        type=event.to_status,
        titre=TITLES[event.to_status],
        message=build_message(session, event.to_status, event.comment),
    )
    logger.info(
        "Notification %s created for teacher %s (%s)",
        notification.pk, event.teacher_id, event.to_status,
    )
    return notification


@receiver(session_status_changed, dispatch_uid='notifications.session_status_changed')
def on_session_status_changed(sender, event, session, **kwargs):
    return notify_status_change(event, session)
