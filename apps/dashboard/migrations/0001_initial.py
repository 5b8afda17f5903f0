import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SystemSettings",
            fields=[
                ("id", models.AutoField(primary_key=True, serialize=False)),
                (
                    "session_edit_window_minutes",
                    models.IntegerField(
                        default=60,
                        help_text="Durée pendant laquelle un enseignant peut modifier sa déclaration",
                        verbose_name="Délai de modification (minutes)",
                    ),
                ),
                (
                    "require_verified_attachments",
                    models.BooleanField(
                        default=False,
                        help_text="Exiger une pièce jointe vérifiée avant la validation par la direction",
                        verbose_name="Pièce jointe vérifiée obligatoire",
                    ),
                ),
                ("last_modified", models.DateTimeField(auto_now=True, verbose_name="Dernière modification")),
                (
                    "modified_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="modified_settings",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Modifié par",
                    ),
                ),
            ],
            options={
                "verbose_name": "Paramètres système",
                "verbose_name_plural": "Paramètres système",
                "db_table": "system_settings",
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("id", 1)), name="system_settings_singleton_id_1"),
                    models.CheckConstraint(
                        condition=models.Q(("session_edit_window_minutes__gte", 1), ("session_edit_window_minutes__lte", 10080)),
                        name="system_settings_edit_window_range",
                    ),
                ],
            },
        ),
    ]
