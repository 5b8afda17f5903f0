from django.db import models
from django.conf import settings


class LogAudit(models.Model):
    """
    Journal d'audit des actions sensibles (transitions de séances, pièces
    jointes, paramètres, PACTE). Les entrées ne sont jamais modifiées.
    """
    NIVEAU_CHOICES = [
        ('INFO', 'Information'),
        ('WARNING', 'Avertissement'),
        ('CRITIQUE', 'Critique'),
    ]

    OBJET_TYPE_CHOICES = [
        ('USER', 'Utilisateur'),
        ('SESSION', 'Séance'),
        ('ATTACHMENT', 'Pièce jointe'),
        ('SETTINGS', 'Paramètres'),
        ('EXPORT', 'Export'),
        ('SYSTEM', 'Système'),
        ('AUTRE', 'Autre'),
    ]

    id_log = models.AutoField(primary_key=True, db_column='id_log')

    id_utilisateur = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.PROTECT,  # Empêche la suppression d'un utilisateur avec des logs d'audit
        db_column='id_utilisateur',
        verbose_name="Utilisateur",
        related_name='audit_logs'
    )
    action = models.TextField(
        verbose_name="Action effectuée",
        help_text="Description détaillée de l'action"
    )
    date_action = models.DateTimeField(
        auto_now_add=True,
        db_column='date_action',
        verbose_name="Date et heure",
        db_index=True
    )
    adresse_ip = models.GenericIPAddressField(
        db_column='adresse_ip',
        verbose_name="Adresse IP",
        help_text="Adresse IP de l'utilisateur ayant effectué l'action"
    )
    niveau = models.CharField(
        max_length=20,
        choices=NIVEAU_CHOICES,
        default='INFO',
        verbose_name="Niveau",
        db_index=True,
        help_text="Niveau de criticité de l'action"
    )
    objet_type = models.CharField(
        max_length=50,
        choices=OBJET_TYPE_CHOICES,
        null=True,
        blank=True,
        verbose_name="Type d'objet",
        db_index=True,
        help_text="Type d'objet affecté par l'action"
    )
    objet_id = models.IntegerField(
        null=True,
        blank=True,
        verbose_name="ID de l'objet",
        db_index=True,
        help_text="Identifiant de l'objet affecté"
    )

    class Meta:
        db_table = 'log_audit'
        app_label = 'audits'
        verbose_name = "Journal d'audit"
        verbose_name_plural = "Journaux d'audit"
        ordering = ['-date_action', '-id_log']
        indexes = [
            models.Index(fields=['objet_type', 'objet_id'], name='log_audit_objet_idx'),
            models.Index(fields=['id_utilisateur', 'date_action'], name='log_audit_user_date_idx'),
            models.Index(fields=['niveau', 'date_action'], name='log_audit_niveau_date_idx'),
        ]

    def __str__(self):
        return f"{self.date_action} - {self.id_utilisateur} : {self.action[:50]}"

    def to_dict(self):
        return {
            'id': self.id_log,
            'user_id': self.id_utilisateur_id,
            'user': self.id_utilisateur.get_full_name(),
            'action': self.action,
            'date': self.date_action.isoformat() if self.date_action else None,
            'ip': self.adresse_ip,
            'niveau': self.niveau,
            'objet_type': self.objet_type,
            'objet_id': self.objet_id,
        }
