from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .payloads import DescriptionPayload, DevoirsFaitsPayload, RcdPayload


class Session(models.Model):
    """
    Déclaration d'une séance rémunérée (RCD, Devoirs Faits, HSE, Autre).

    Le statut n'est modifié que par apps.teaching_sessions.lifecycle ; les
    écritures passent par SessionRepository (verrou optimiste sur version).
    """

    class Type(models.TextChoices):
        RCD = 'RCD', _('Remplacement courte durée')
        DEVOIRS_FAITS = 'DEVOIRS_FAITS', _('Devoirs Faits')
        HSE = 'HSE', _('Heures supplémentaires effectives')
        AUTRE = 'AUTRE', _('Activité spécifique')

    class Status(models.TextChoices):
        SUBMITTED = 'SUBMITTED', _('En attente de vérification')
        INCOMPLETE = 'INCOMPLETE', _('Incomplète')
        PENDING_DOCUMENTS = 'PENDING_DOCUMENTS', _('Pièces jointes requises')
        REVIEWED = 'REVIEWED', _('À valider par la direction')
        VALIDATED = 'VALIDATED', _('Validée')
        READY_FOR_PAYMENT = 'READY_FOR_PAYMENT', _('Prête pour paiement')
        PAID = 'PAID', _('Payée')
        REJECTED = 'REJECTED', _('Refusée')

    class TimeSlot(models.TextChoices):
        M1 = 'M1', _('M1 (8h - 9h)')
        M2 = 'M2', _('M2 (9h - 10h)')
        M3 = 'M3', _('M3 (10h15 - 11h15)')
        M4 = 'M4', _('M4 (11h15 - 12h15)')
        S1 = 'S1', _('S1 (13h30 - 14h30)')
        S2 = 'S2', _('S2 (14h30 - 15h30)')
        S3 = 'S3', _('S3 (15h45 - 16h45)')
        S4 = 'S4', _('S4 (16h45 - 17h45)')

    class Prefix(models.TextChoices):
        M = 'M.', 'M.'
        MME = 'Mme', 'Mme'

    GRADE_LEVELS = [('6e', '6e'), ('5e', '5e'), ('4e', '4e'), ('3e', '3e')]

    # Anciennes valeurs encore envoyées par certains clients
    STATUS_ALIASES = {
        'PENDING_REVIEW': Status.SUBMITTED,
        'PENDING_VALIDATION': Status.REVIEWED,
    }

    # --- Classification ---
    type = models.CharField(
        max_length=20,
        choices=Type.choices,
        verbose_name=_('Type'),
        db_index=True
    )
    original_type = models.CharField(
        max_length=20,
        choices=Type.choices,
        editable=False,
        verbose_name=_('Type d\'origine'),
        help_text=_('Type saisi à la création, jamais modifié')
    )

    # --- Planification ---
    date = models.DateField(verbose_name=_('Date'), db_index=True)
    time_slot = models.CharField(
        max_length=2,
        choices=TimeSlot.choices,
        verbose_name=_('Créneau')
    )

    # --- Enseignant ---
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.PROTECT,
        related_name='teaching_sessions',
        verbose_name=_('Enseignant')
    )
    teacher_name = models.CharField(
        max_length=201,
        verbose_name=_('Nom de l\'enseignant'),
        help_text=_('Copie du nom à la création')
    )
    in_pacte = models.BooleanField(default=False, verbose_name=_('PACTE'))

    # --- Statut ---
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SUBMITTED,
        verbose_name=_('Statut'),
        db_index=True
    )
    version = models.PositiveIntegerField(default=1, verbose_name=_('Version'))

    # --- Audit ---
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_('Créée le'))
    updated_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Modifiée le'))
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Modifiée par')
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Vérifiée par')
    )
    reviewed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Vérifiée le'))
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Validée par')
    )
    validated_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Validée le'))
    rejection_reason = models.TextField(blank=True, default='', verbose_name=_('Motif du refus'))
    review_comment = models.TextField(
        blank=True,
        default='',
        verbose_name=_('Commentaire de traitement'),
        help_text=_('Dernier commentaire saisi lors d\'un changement de statut')
    )

    # --- RCD ---
    replaced_teacher_prefix = models.CharField(max_length=5, choices=Prefix.choices, blank=True, default='')
    replaced_teacher_last_name = models.CharField(max_length=100, blank=True, default='')
    replaced_teacher_first_name = models.CharField(max_length=100, blank=True, default='')
    class_name = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Classe'))
    subject = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Matière'))

    # --- Devoirs Faits ---
    student_count = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Nombre d\'élèves'))
    grade_level = models.CharField(
        max_length=2,
        choices=GRADE_LEVELS,
        blank=True,
        default='',
        verbose_name=_('Niveau')
    )

    # --- HSE / Autre ---
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))

    comment = models.TextField(blank=True, default='', verbose_name=_('Commentaire de l\'enseignant'))

    class Meta:
        db_table = 'sessions'
        app_label = 'teaching_sessions'
        verbose_name = _('Séance')
        verbose_name_plural = _('Séances')
        ordering = ['-date', 'time_slot', '-id']
        indexes = [
            models.Index(fields=['teacher', 'date'], name='sessions_teacher_date_idx'),
            models.Index(fields=['status', 'date'], name='sessions_status_date_idx'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} - {self.teacher_name} - {self.date} {self.time_slot}"

    @property
    def replaced_teacher_name(self):
        parts = [self.replaced_teacher_prefix, self.replaced_teacher_first_name, self.replaced_teacher_last_name]
        return ' '.join(part for part in parts if part)

    @property
    def payload(self):
        """Données propres au type d'origine de la séance."""
        if self.original_type == self.Type.RCD:
            return RcdPayload(
                prefix=self.replaced_teacher_prefix,
                last_name=self.replaced_teacher_last_name,
                first_name=self.replaced_teacher_first_name,
                class_name=self.class_name,
                subject=self.subject,
            )
        if self.original_type == self.Type.DEVOIRS_FAITS:
            return DevoirsFaitsPayload(
                student_count=self.student_count,
                grade_level=self.grade_level,
            )
        return DescriptionPayload(description=self.description)

    @property
    def display_teacher_name(self):
        """Nom à jour de l'enseignant ; la copie stockée sert de repli."""
        if self.teacher_id and self.teacher:
            return self.teacher.get_full_name()
        return self.teacher_name
