import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

SESSION_TYPES = [
    ("RCD", "Remplacement courte durée"),
    ("DEVOIRS_FAITS", "Devoirs Faits"),
    ("HSE", "Heures supplémentaires effectives"),
    ("AUTRE", "Activité spécifique"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=SESSION_TYPES, db_index=True, max_length=20, verbose_name="Type")),
                (
                    "original_type",
                    models.CharField(
                        choices=SESSION_TYPES,
                        editable=False,
                        help_text="Type saisi à la création, jamais modifié",
                        max_length=20,
                        verbose_name="Type d'origine",
                    ),
                ),
                ("date", models.DateField(db_index=True, verbose_name="Date")),
                (
                    "time_slot",
                    models.CharField(
                        choices=[
                            ("M1", "M1 (8h - 9h)"),
                            ("M2", "M2 (9h - 10h)"),
                            ("M3", "M3 (10h15 - 11h15)"),
                            ("M4", "M4 (11h15 - 12h15)"),
                            ("S1", "S1 (13h30 - 14h30)"),
                            ("S2", "S2 (14h30 - 15h30)"),
                            ("S3", "S3 (15h45 - 16h45)"),
                            ("S4", "S4 (16h45 - 17h45)"),
                        ],
                        max_length=2,
                        verbose_name="Créneau",
                    ),
                ),
                (
                    "teacher_name",
                    models.CharField(help_text="Copie du nom à la création", max_length=201, verbose_name="Nom de l'enseignant"),
                ),
                ("in_pacte", models.BooleanField(default=False, verbose_name="PACTE")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("SUBMITTED", "En attente de vérification"),
                            ("INCOMPLETE", "Incomplète"),
                            ("PENDING_DOCUMENTS", "Pièces jointes requises"),
                            ("REVIEWED", "À valider par la direction"),
                            ("VALIDATED", "Validée"),
                            ("READY_FOR_PAYMENT", "Prête pour paiement"),
                            ("PAID", "Payée"),
                            ("REJECTED", "Refusée"),
                        ],
                        db_index=True,
                        default="SUBMITTED",
                        max_length=20,
                        verbose_name="Statut",
                    ),
                ),
                ("version", models.PositiveIntegerField(default=1, verbose_name="Version")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Créée le")),
                ("updated_at", models.DateTimeField(blank=True, null=True, verbose_name="Modifiée le")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="Vérifiée le")),
                ("validated_at", models.DateTimeField(blank=True, null=True, verbose_name="Validée le")),
                ("rejection_reason", models.TextField(blank=True, default="", verbose_name="Motif du refus")),
                (
                    "review_comment",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Dernier commentaire saisi lors d'un changement de statut",
                        verbose_name="Commentaire de traitement",
                    ),
                ),
                (
                    "replaced_teacher_prefix",
                    models.CharField(blank=True, choices=[("M.", "M."), ("Mme", "Mme")], default="", max_length=5),
                ),
                ("replaced_teacher_last_name", models.CharField(blank=True, default="", max_length=100)),
                ("replaced_teacher_first_name", models.CharField(blank=True, default="", max_length=100)),
                ("class_name", models.CharField(blank=True, default="", max_length=50, verbose_name="Classe")),
                ("subject", models.CharField(blank=True, default="", max_length=100, verbose_name="Matière")),
                ("student_count", models.PositiveIntegerField(blank=True, null=True, verbose_name="Nombre d'élèves")),
                (
                    "grade_level",
                    models.CharField(
                        blank=True,
                        choices=[("6e", "6e"), ("5e", "5e"), ("4e", "4e"), ("3e", "3e")],
                        default="",
                        max_length=2,
                        verbose_name="Niveau",
                    ),
                ),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("comment", models.TextField(blank=True, default="", verbose_name="Commentaire de l'enseignant")),
                (
                    "teacher",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="teaching_sessions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Enseignant",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Modifiée par",
                    ),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Vérifiée par",
                    ),
                ),
                (
                    "validated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Validée par",
                    ),
                ),
            ],
            options={
                "verbose_name": "Séance",
                "verbose_name_plural": "Séances",
                "db_table": "sessions",
                "ordering": ["-date", "time_slot", "-id"],
                "indexes": [
                    models.Index(fields=["teacher", "date"], name="sessions_teacher_date_idx"),
                    models.Index(fields=["status", "date"], name="sessions_status_date_idx"),
                ],
            },
        ),
    ]
