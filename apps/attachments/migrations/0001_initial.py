import apps.attachments.models
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("teaching_sessions", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Attachment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.FileField(upload_to=apps.attachments.models.attachment_upload_to, verbose_name="Fichier")),
                ("original_name", models.CharField(max_length=255, verbose_name="Nom d'origine")),
                ("mime_type", models.CharField(max_length=100, verbose_name="Type MIME")),
                ("file_size", models.PositiveIntegerField(verbose_name="Taille (octets)")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Déposée le")),
                ("is_verified", models.BooleanField(db_index=True, default=False, verbose_name="Vérifiée")),
                ("verified_at", models.DateTimeField(blank=True, null=True, verbose_name="Vérifiée le")),
                ("is_archived", models.BooleanField(db_index=True, default=False, verbose_name="Archivée")),
                ("archived_at", models.DateTimeField(blank=True, null=True, verbose_name="Archivée le")),
                (
                    "archived_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Archivée par",
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attachments",
                        to="teaching_sessions.session",
                        verbose_name="Séance",
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Déposée par",
                    ),
                ),
                (
                    "verified_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Vérifiée par",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pièce jointe",
                "verbose_name_plural": "Pièces jointes",
                "db_table": "attachments",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["session", "is_verified"], name="attachments_session_verif_idx"),
                ],
            },
        ),
    ]
