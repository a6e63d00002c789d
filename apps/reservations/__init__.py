"""Reservations app package.

Holds the reservation ledger, the availability oracle and the booking
coordinator. Commits on one room are serialized by locking the room
row inside the transaction that checks and appends, and PostgreSQL
deployments add an exclusion constraint over ``(room, [start, end))``
as a last line of defense against overlapping reservations.
"""
