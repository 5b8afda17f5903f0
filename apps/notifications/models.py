from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    Notification interne envoyée à un utilisateur, le plus souvent à
    l'enseignant dont une déclaration vient de changer de statut.
    """
    id_notification = models.AutoField(primary_key=True, db_column='id_notification')
    id_utilisateur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.CASCADE,  # Supprimer les notifications si l'utilisateur est supprimé
        db_column='id_utilisateur',
        verbose_name="Utilisateur",
        related_name='notifications'
    )
    session = models.ForeignKey(
        'teaching_sessions.Session',
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications',
        verbose_name="Séance"
    )
    type = models.CharField(
        max_length=20,
        blank=True,
        default='',
        db_column='type',
        verbose_name="Type",
        db_index=True,
        help_text="Statut de la séance ayant déclenché la notification"
    )
    titre = models.CharField(max_length=150, verbose_name="Titre")
    message = models.TextField(
        db_column='message',
        verbose_name="Message",
        help_text="Contenu de la notification"
    )
    lue = models.BooleanField(
        default=False,
        db_column='lue',
        verbose_name="Lu",
        db_index=True,
        help_text="Indique si la notification a été lue"
    )
    date_envoi = models.DateTimeField(
        auto_now_add=True,
        db_column='date_envoi',
        verbose_name="Date d'envoi",
        db_index=True
    )

    class Meta:
        db_table = 'notification'
        app_label = 'notifications'
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ['-date_envoi', '-id_notification']
        indexes = [
            models.Index(fields=['id_utilisateur', 'lue', 'date_envoi'], name='notification_user_lue_idx'),
        ]

    def __str__(self):
        return f"Notification pour {self.id_utilisateur} - {self.date_envoi}"

    def to_dict(self):
        return {
            'id': self.id_notification,
            'session_id': self.session_id,
            'type': self.type,
            'title': self.titre,
            'message': self.message,
            'read': self.lue,
            'date': self.date_envoi.isoformat() if self.date_envoi else None,
        }
