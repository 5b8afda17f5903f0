from django.conf import settings
from django.db import models
from django.utils import timezone


def attachment_upload_to(instance, filename):
    """Les fichiers sont rangés par séance sous un nom aléatoire."""
    return f"attachments/{instance.session_id}/{filename}"


class Attachment(models.Model):
    """
    Pièce jointe d'une déclaration (feuille d'émargement, justificatif...).

    Une pièce vérifiée par le secrétariat peut être exigée avant la validation
    (voir SystemSettings.require_verified_attachments).
    """
    session = models.ForeignKey(
        'teaching_sessions.Session',
        models.CASCADE,
        related_name='attachments',
        verbose_name="Séance"
    )
    file = models.FileField(upload_to=attachment_upload_to, verbose_name="Fichier")
    original_name = models.CharField(max_length=255, verbose_name="Nom d'origine")
    mime_type = models.CharField(max_length=100, verbose_name="Type MIME")
    file_size = models.PositiveIntegerField(verbose_name="Taille (octets)")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        related_name='+',
        verbose_name="Déposée par"
    )
    created_at = models.DateTimeField(default=timezone.now, verbose_name="Déposée le")

    is_verified = models.BooleanField(default=False, db_index=True, verbose_name="Vérifiée")
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name="Vérifiée par"
    )
    verified_at = models.DateTimeField(null=True, blank=True, verbose_name="Vérifiée le")

    is_archived = models.BooleanField(default=False, db_index=True, verbose_name="Archivée")
    archived_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name="Archivée par"
    )
    archived_at = models.DateTimeField(null=True, blank=True, verbose_name="Archivée le")

    class Meta:
        db_table = 'attachments'
        app_label = 'attachments'
        verbose_name = "Pièce jointe"
        verbose_name_plural = "Pièces jointes"
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['session', 'is_verified'], name='attachments_session_verif_idx'),
        ]

    def __str__(self):
        return f"{self.original_name} (séance {self.session_id})"

    def to_dict(self):
        return {
            'id': self.pk,
            'session_id': self.session_id,
            'original_name': self.original_name,
            'mime_type': self.mime_type,
            'file_size': self.file_size,
            'uploaded_by': self.uploaded_by_id,
            'created_at': self.created_at.isoformat(),
            'is_verified': self.is_verified,
            'verified_by': self.verified_by_id,
            'verified_at': self.verified_at.isoformat() if self.verified_at else None,
            'is_archived': self.is_archived,
            'archived_at': self.archived_at.isoformat() if self.archived_at else None,
        }
