# Generated manually (initial migration).
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("rooms", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Reservation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "contact_id",
                    models.PositiveBigIntegerField(
                        blank=True,
                        help_text="Optional reference to the contact this reservation is for.",
                        null=True,
                        verbose_name="Contact",
                    ),
                ),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("start_time", models.DateTimeField(verbose_name="Starts at")),
                ("end_time", models.DateTimeField(verbose_name="Ends at")),
                (
                    "recurring_type",
                    models.CharField(
                        choices=[
                            ("none", "Does not repeat"),
                            ("daily", "Daily"),
                            ("weekly", "Weekly"),
                            ("monthly", "Monthly"),
                        ],
                        default="none",
                        max_length=10,
                        verbose_name="Repeats",
                    ),
                ),
                ("recurring_end_date", models.DateField(blank=True, null=True, verbose_name="Repeats until")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="rooms.room",
                        verbose_name="Room",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Owner",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reservation",
                "verbose_name_plural": "Reservations",
                "ordering": ["-start_time"],
            },
        ),
        migrations.AddIndex(
            model_name="reservation",
            index=models.Index(fields=["room", "start_time", "end_time"], name="idx_res_room_interval"),
        ),
        migrations.AddIndex(
            model_name="reservation",
            index=models.Index(fields=["start_time"], name="idx_res_start"),
        ),
        migrations.AddIndex(
            model_name="reservation",
            index=models.Index(fields=["user", "start_time"], name="idx_res_user_start"),
        ),
        migrations.AddConstraint(
            model_name="reservation",
            constraint=models.CheckConstraint(
                condition=models.Q(("end_time__gt", models.F("start_time"))),
                name="reservation_end_after_start",
            ),
        ),
        migrations.AddConstraint(
            model_name="reservation",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(("recurring_type", "none"), _negated=True),
                    ("recurring_end_date__isnull", True),
                    _connector="OR",
                ),
                name="reservation_recurring_end_only_when_recurring",
            ),
        ),
    ]
