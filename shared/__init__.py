"""
Shared Kernel

Base classes and utilities shared by the room catalog and the
reservation ledger: time intervals, domain events, the error taxonomy
and the resource-scoped unit of work.
"""
