from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Manager personnalisé pour le modèle User"""

    def create_user(self, email, nom, prenom, password=None, **extra_fields):
        """Crée et sauvegarde un utilisateur normal"""
        if not email:
            raise ValueError(_('L\'adresse email est obligatoire'))
        if not nom:
            raise ValueError(_('Le nom est obligatoire'))
        if not prenom:
            raise ValueError(_('Le prénom est obligatoire'))

        email = self.normalize_email(email)
        extra_fields.setdefault('initials', f"{prenom[:1]}{nom[:1]}".upper())
        user = self.model(email=email, nom=nom, prenom=prenom, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, nom, prenom, password=None, **extra_fields):
        """Crée et sauvegarde un superutilisateur (admin)"""
        extra_fields.setdefault('role', User.Role.ADMIN)
        extra_fields.setdefault('actif', True)

        return self.create_user(email, nom, prenom, password, **extra_fields)

    def teachers(self):
        return self.filter(role=User.Role.TEACHER, actif=True)


class User(AbstractBaseUser):
    """
    Utilisateur de l'application (enseignant, secrétariat, direction, admin).

    Le workflow des séances ne lit que le rôle et l'identifiant ; le nom
    complet sert de projection dénormalisée sur les séances.
    """

    class Role(models.TextChoices):
        TEACHER = 'TEACHER', _('Enseignant')
        SECRETARY = 'SECRETARY', _('Secrétariat')
        PRINCIPAL = 'PRINCIPAL', _('Direction')
        ADMIN = 'ADMIN', _('Administrateur')

    STAFF_ROLES = (Role.SECRETARY, Role.PRINCIPAL, Role.ADMIN)

    nom = models.CharField(max_length=100, verbose_name=_('Nom'))
    prenom = models.CharField(max_length=100, verbose_name=_('Prénom'))
    email = models.EmailField(
        max_length=255,
        unique=True,
        verbose_name=_('Adresse email')
    )
    initials = models.CharField(
        max_length=10,
        blank=True,
        default='',
        verbose_name=_('Initiales')
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.TEACHER,
        verbose_name=_('Rôle'),
        db_index=True
    )
    actif = models.BooleanField(
        default=True,
        verbose_name=_('Actif'),
        db_index=True,
        help_text=_('Désactiver un compte le masque sans le supprimer')
    )
    in_pacte = models.BooleanField(
        default=False,
        verbose_name=_('Engagé dans le PACTE'),
        db_index=True,
        help_text=_('Influe sur le décompte des heures, pas sur le workflow')
    )
    date_creation = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Date de création')
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['nom', 'prenom']

    objects = UserManager()

    class Meta:
        db_table = 'utilisateur'
        app_label = 'accounts'
        verbose_name = _('Utilisateur')
        verbose_name_plural = _('Utilisateurs')
        ordering = ['nom', 'prenom']

    def __str__(self):
        return f"{self.prenom} {self.nom} ({self.email})"

    @property
    def is_staff(self):
        """Accès à l'admin Django : administrateurs uniquement"""
        return self.role == self.Role.ADMIN

    @property
    def is_superuser(self):
        return self.role == self.Role.ADMIN

    @property
    def is_active(self):
        return self.actif

    @is_active.setter
    def is_active(self, value):
        self.actif = value

    @property
    def is_school_staff(self):
        """Secrétariat, direction ou administration"""
        return self.role in self.STAFF_ROLES

    def get_full_name(self):
        return f"{self.prenom} {self.nom}"

    def get_short_name(self):
        return self.prenom

    def has_perm(self, perm, obj=None):
        return self.is_superuser

    def has_module_perms(self, app_label):
        return self.is_superuser


class PacteHistory(models.Model):
    """
    Historique des changements de statut PACTE d'un enseignant.
    Une ligne par bascule, jamais modifiée ensuite.
    """
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.CASCADE,
        related_name='pacte_history',
        verbose_name=_('Enseignant')
    )
    teacher_name = models.CharField(max_length=201, verbose_name=_('Nom de l\'enseignant'))
    previous_status = models.BooleanField(verbose_name=_('Statut précédent'))
    new_status = models.BooleanField(verbose_name=_('Nouveau statut'))
    reason = models.TextField(blank=True, default='', verbose_name=_('Motif'))
    school_year = models.CharField(
        max_length=9,
        verbose_name=_('Année scolaire'),
        help_text=_('Format AAAA-AAAA')
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        models.PROTECT,
        related_name='pacte_changes',
        verbose_name=_('Modifié par')
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Date'))

    class Meta:
        db_table = 'pacte_history'
        app_label = 'accounts'
        verbose_name = _('Historique PACTE')
        verbose_name_plural = _('Historiques PACTE')
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.teacher_name} : {self.previous_status} -> {self.new_status} ({self.school_year})"
