"""Database-level guard against overlapping reservations on one room.

On PostgreSQL an EXCLUDE USING gist constraint rejects any two rows with
the same room whose ``[start_time, end_time)`` ranges intersect.
``tstzrange(..., '[)')`` gives the same half-open semantics as the
application check, so back-to-back reservations are allowed. Other
backends rely on the row lock taken by the booking coordinator alone.

Only first occurrences are covered; recurring occurrences are checked
by the application.
"""

from django.db import migrations

CONSTRAINT_NAME = "reservation_no_room_overlap"


def add_exclusion_constraint(apps, schema_editor):  # type: ignore
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"""
        ALTER TABLE reservations_reservation
        ADD CONSTRAINT {CONSTRAINT_NAME}
        EXCLUDE USING gist (
            room_id WITH =,
            tstzrange(start_time, end_time, '[)') WITH &&
        )
        """
    )


def drop_exclusion_constraint(apps, schema_editor):  # type: ignore
    if schema_editor.connection.vendor != "postgresql":
        return
    # btree_gist is kept: other indexes may depend on it
    schema_editor.execute(
        f"ALTER TABLE reservations_reservation DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}"
    )


class Migration(migrations.Migration):
    dependencies = [
        ("reservations", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
