from __future__ import annotations

from datetime import time

from django.core.management.base import BaseCommand  # type: ignore
from django.db import transaction  # type: ignore

from apps.rooms.models import Room

DEFAULT_ROOMS = [
    ("Main Sanctuary", 200, "Main Building", "The main church sanctuary for worship services", time(8), time(21)),
    ("Fellowship Hall", 100, "Basement", "Large open space for events and gatherings", time(8), time(22)),
    ("Classroom A", 30, "Education Wing", "Classroom with tables and chairs", time(8), time(21)),
    ("Classroom B", 30, "Education Wing", "Classroom with tables and chairs", time(8), time(21)),
    ("Conference Room", 15, "Office Area", "Conference room with large table", time(8), time(20)),
    ("Youth Room", 50, "West Wing", "Activity space designed for youth ministry", time(8), time(22)),
    ("Prayer Chapel", 20, "East Wing", "Small chapel for prayer gatherings", time(7), time(23)),
    ("Kitchen", 10, "Near Fellowship Hall", "Fully equipped kitchen for event preparation", time(8), time(21)),
    ("Nursery", 15, "Near Main Sanctuary", "Childcare area for infants and toddlers", time(8), time(13)),
    ("Choir Room", 35, "Near Main Sanctuary", "Practice space for the choir", time(16), time(21)),
]


class Command(BaseCommand):
    help = "Creates the default rooms when the catalog is empty"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument(
            "--force",
            action="store_true",
            help="Add missing default rooms even if the catalog already has rooms",
        )

    def handle(self, *args, **options):  # type: ignore
        if Room.objects.exists() and not options["force"]:
            self.stdout.write("Catalog already has rooms, nothing to do.")
            return

        created = 0
        with transaction.atomic():
            for name, capacity, location, description, opens, closes in DEFAULT_ROOMS:
                _, was_created = Room.objects.get_or_create(
                    name=name,
                    defaults={
                        "capacity": capacity,
                        "location": location,
                        "description": description,
                        "availability_start": opens,
                        "availability_end": closes,
                    },
                )
                created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Created {created} room(s)."))
