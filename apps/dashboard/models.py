from django.conf import settings
from django.core.cache import cache
from django.db import models
from django.utils.translation import gettext_lazy as _

SYSTEM_SETTINGS_CACHE_KEY = 'system_settings_singleton'
SYSTEM_SETTINGS_CACHE_TIMEOUT = 300  # 5 minutes

EDIT_WINDOW_MIN = 1
EDIT_WINDOW_MAX = 10080  # une semaine


class SystemSettings(models.Model):
    """
    Paramètres globaux gérés par les administrateurs.
    Une seule instance (singleton, id=1).
    """

    id = models.AutoField(primary_key=True)

    # Règles de déclaration
    session_edit_window_minutes = models.IntegerField(
        default=60,
        verbose_name="Délai de modification (minutes)",
        help_text="Durée pendant laquelle un enseignant peut modifier sa déclaration"
    )
    require_verified_attachments = models.BooleanField(
        default=False,
        verbose_name="Pièce jointe vérifiée obligatoire",
        help_text="Exiger une pièce jointe vérifiée avant la validation par la direction"
    )

    # Metadata
    last_modified = models.DateTimeField(
        auto_now=True,
        verbose_name="Dernière modification"
    )
    modified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_settings',
        verbose_name="Modifié par"
    )

    class Meta:
        db_table = 'system_settings'
        app_label = 'dashboard'
        verbose_name = "Paramètres système"
        verbose_name_plural = "Paramètres système"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(id=1),
                name='system_settings_singleton_id_1',
            ),
            models.CheckConstraint(
                condition=
                    models.Q(session_edit_window_minutes__gte=EDIT_WINDOW_MIN)
                    & models.Q(session_edit_window_minutes__lte=EDIT_WINDOW_MAX),
                name='system_settings_edit_window_range',
            ),
        ]

    def __str__(self):
        return "Paramètres système"

    @classmethod
    def get_settings(cls):
        """Récupère le singleton depuis le cache, ou depuis la DB en fallback."""
        obj = cache.get(SYSTEM_SETTINGS_CACHE_KEY)
        if obj is None:
            obj, _ = cls.objects.get_or_create(
                id=1,
                defaults={
                    'session_edit_window_minutes': settings.SESSION_EDIT_WINDOW_DEFAULT,
                }
            )
            cache.set(SYSTEM_SETTINGS_CACHE_KEY, obj, SYSTEM_SETTINGS_CACHE_TIMEOUT)
        return obj

    def save(self, *args, **kwargs):
        """Singleton + invalidation du cache à chaque modification admin."""
        self.id = 1
        self.full_clean()
        super().save(*args, **kwargs)
        cache.delete(SYSTEM_SETTINGS_CACHE_KEY)

    def clean(self):
        from django.core.exceptions import ValidationError

        window = self.session_edit_window_minutes
        if window is None or window < EDIT_WINDOW_MIN or window > EDIT_WINDOW_MAX:
            raise ValidationError({
                'session_edit_window_minutes':
                    f'Le délai doit être compris entre {EDIT_WINDOW_MIN} et {EDIT_WINDOW_MAX} minutes.'
            })

    def to_dict(self):
        return {
            'session_edit_window_minutes': self.session_edit_window_minutes,
            'require_verified_attachments': self.require_verified_attachments,
            'last_modified': self.last_modified.isoformat() if self.last_modified else None,
            'modified_by': self.modified_by.get_full_name() if self.modified_by_id else None,
        }
