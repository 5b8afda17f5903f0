import django.db.models.deletion
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
            name="Notification",
            fields=[
                ("id_notification", models.AutoField(db_column="id_notification", primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        blank=True,
                        db_column="type",
                        db_index=True,
                        default="",
                        help_text="Statut de la séance ayant déclenché la notification",
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("titre", models.CharField(max_length=150, verbose_name="Titre")),
                ("message", models.TextField(db_column="message", help_text="Contenu de la notification", verbose_name="Message")),
                (
                    "lue",
                    models.BooleanField(
                        db_column="lue",
                        db_index=True,
                        default=False,
                        help_text="Indique si la notification a été lue",
                        verbose_name="Lu",
                    ),
                ),
                ("date_envoi", models.DateTimeField(auto_now_add=True, db_column="date_envoi", db_index=True, verbose_name="Date d'envoi")),
                (
                    "id_utilisateur",
                    models.ForeignKey(
                        db_column="id_utilisateur",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Utilisateur",
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notifications",
                        to="teaching_sessions.session",
                        verbose_name="Séance",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "db_table": "notification",
                "ordering": ["-date_envoi", "-id_notification"],
                "indexes": [
                    models.Index(fields=["id_utilisateur", "lue", "date_envoi"], name="notification_user_lue_idx"),
                ],
            },
        ),
    ]
