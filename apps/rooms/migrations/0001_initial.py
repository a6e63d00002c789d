# Generated manually (initial migration).
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=255, unique=True, verbose_name="Name")),
                ("capacity", models.PositiveIntegerField(verbose_name="Capacity")),
                ("location", models.CharField(blank=True, max_length=255, verbose_name="Location")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("availability_start", models.TimeField(blank=True, null=True, verbose_name="Opens at")),
                ("availability_end", models.TimeField(blank=True, null=True, verbose_name="Closes at")),
                (
                    "is_available",
                    models.BooleanField(
                        default=True,
                        help_text="Disabled rooms reject every reservation.",
                        verbose_name="Bookable",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["is_available", "capacity"], name="idx_room_enabled_capacity"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("capacity__gt", 0)),
                        name="room_capacity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("availability_start__isnull", True), ("availability_end__isnull", True)),
                            models.Q(
                                ("availability_start__isnull", False),
                                ("availability_end__isnull", False),
                                ("availability_end__gt", models.F("availability_start")),
                            ),
                            _connector="OR",
                        ),
                        name="room_operating_hours_pair",
                    ),
                ],
            },
        ),
    ]
