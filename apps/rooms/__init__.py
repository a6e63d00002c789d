"""Rooms app package.

The resource catalog: bookable rooms with a capacity, an optional
operating-hours window and an enabled flag. Catalog mutations are
restricted to administrators and go through ``apps.rooms.services``.
"""
