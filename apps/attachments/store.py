"""
Opérations sur les pièces jointes d'une séance.

Une séance payée est figée : on peut encore vérifier ou archiver ses pièces
jointes, mais ni en déposer ni en supprimer.
"""
import logging

from django.core.files.base import File
from django.db.models import Count, Q
from django.utils import timezone

from apps.teaching_sessions.exceptions import LifecycleError
from apps.teaching_sessions.models import Session

from .models import Attachment
from .validators import random_storage_name, validate_attachment

logger = logging.getLogger(__name__)


class AttachmentLocked(LifecycleError):
    code = 'attachment_locked'
    status_code = 409
    default_message = "La séance est payée : ses pièces jointes ne peuvent plus être modifiées."


class AttachmentStore:

    def has_verified_attachments(self, session_id) -> bool:
        """Vrai si au moins une pièce jointe de la séance a été vérifiée."""
        return Attachment.objects.filter(session_id=session_id, is_verified=True).exists()

    def counts(self, session_id) -> dict:
        return Attachment.objects.filter(session_id=session_id).aggregate(
            total=Count('id'),
            verified=Count('id', filter=Q(is_verified=True)),
            archived=Count('id', filter=Q(is_archived=True)),
        )

    def for_session(self, session_id, include_archived=False):
        qs = Attachment.objects.filter(session_id=session_id)
        if not include_archived:
            qs = qs.filter(is_archived=False)
        return qs

    def add(self, session, uploaded_file, user) -> Attachment:
        if session.status == Session.Status.PAID:
            raise AttachmentLocked()
        meta = validate_attachment(uploaded_file)
        attachment = Attachment(
            session=session,
            original_name=meta['filename'],
            mime_type=meta['mime_type'],
            file_size=meta['size'],
            uploaded_by=user,
        )
        attachment.file.save(random_storage_name(meta['extension']), File(uploaded_file), save=False)
        attachment.save()
        logger.info("Attachment %s added to session %s by user %s", attachment.pk, session.pk, user.pk)
        return attachment

    def verify(self, attachment, user) -> Attachment:
        attachment.is_verified = True
        attachment.verified_by = user
        attachment.verified_at = timezone.now()
        attachment.save(update_fields=['is_verified', 'verified_by', 'verified_at'])
        return attachment

    def archive(self, attachment, user) -> Attachment:
        attachment.is_archived = True
        attachment.archived_by = user
        attachment.archived_at = timezone.now()
        attachment.save(update_fields=['is_archived', 'archived_by', 'archived_at'])
        return attachment

    def delete(self, attachment):
        if attachment.session.status == Session.Status.PAID:
            raise AttachmentLocked()
        attachment.file.delete(save=False)
        attachment.delete()
