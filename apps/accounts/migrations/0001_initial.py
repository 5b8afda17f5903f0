import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("nom", models.CharField(max_length=100, verbose_name="Nom")),
                ("prenom", models.CharField(max_length=100, verbose_name="Prénom")),
                ("email", models.EmailField(max_length=255, unique=True, verbose_name="Adresse email")),
                ("initials", models.CharField(blank=True, default="", max_length=10, verbose_name="Initiales")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("TEACHER", "Enseignant"),
                            ("SECRETARY", "Secrétariat"),
                            ("PRINCIPAL", "Direction"),
                            ("ADMIN", "Administrateur"),
                        ],
                        db_index=True,
                        default="TEACHER",
                        max_length=20,
                        verbose_name="Rôle",
                    ),
                ),
                (
                    "actif",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Désactiver un compte le masque sans le supprimer",
                        verbose_name="Actif",
                    ),
                ),
                (
                    "in_pacte",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Influe sur le décompte des heures, pas sur le workflow",
                        verbose_name="Engagé dans le PACTE",
                    ),
                ),
                ("date_creation", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Date de création")),
            ],
            options={
                "verbose_name": "Utilisateur",
                "verbose_name_plural": "Utilisateurs",
                "db_table": "utilisateur",
                "ordering": ["nom", "prenom"],
            },
        ),
        migrations.CreateModel(
            name="PacteHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("teacher_name", models.CharField(max_length=201, verbose_name="Nom de l'enseignant")),
                ("previous_status", models.BooleanField(verbose_name="Statut précédent")),
                ("new_status", models.BooleanField(verbose_name="Nouveau statut")),
                ("reason", models.TextField(blank=True, default="", verbose_name="Motif")),
                ("school_year", models.CharField(help_text="Format AAAA-AAAA", max_length=9, verbose_name="Année scolaire")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Date")),
                (
                    "changed_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pacte_changes",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Modifié par",
                    ),
                ),
                (
                    "teacher",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pacte_history",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Enseignant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Historique PACTE",
                "verbose_name_plural": "Historiques PACTE",
                "db_table": "pacte_history",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
