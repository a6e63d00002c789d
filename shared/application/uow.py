"""
Unit of Work Pattern

Manages database transactions for the check-then-commit sequence and
ensures that domain events are published only after a successful commit.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional
import logging

from django.db import (
    DatabaseError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    transaction,
)
from django.db.models import ProtectedError, RestrictedError
from django.db.utils import NotSupportedError

from shared.domain.base import DomainEvent
from shared.domain.errors import (
    Conflict,
    Fatal,
    InUse,
    ReservationSystemError,
    Transient,
)

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def record(self, event: DomainEvent):
        """Queue an event for publishing after commit"""
        pass


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(queryset.db).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps ``transaction.atomic()``. Rows loaded through ``lock()`` stay
    locked (SELECT ... FOR UPDATE) until the transaction ends, which is
    what serializes two check-then-commit sequences on the same room.
    On SQLite, which has no row locks, the project runs transactions in
    IMMEDIATE mode so the database write lock is taken at BEGIN instead.

    Usage:
        with DjangoUnitOfWork() as uow:
            room = uow.lock(Room.objects.filter(pk=room_id))[0]
            ...check the ledger, append...
            uow.record(ReservationCommitted(...))
            # Transaction commits here
        # Events are published after commit
    """

    def __init__(self, using: Optional[str] = None):
        self._events: List[DomainEvent] = []
        self._transaction = None
        self._using = using

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def lock(self, queryset) -> list:
        """
        Load and lock the rows of ``queryset``

        Rows are locked in primary key order so two units locking the
        same set of rows cannot deadlock each other.
        """
        return list(lock_queryset_if_possible(queryset.order_by("pk")))

    def commit(self):
        """
        Commit changes and publish events

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)

    def rollback(self):
        """Rollback changes and discard events"""
        if self._events:
            logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def record(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        from shared.application.message_bus import message_bus

        logger.debug(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate database failures raised inside ``operation`` into the
    error taxonomy

    Domain errors pass through untouched. The original database error
    is logged and chained, never put into the user-visible message.
    """
    try:
        yield
    except ReservationSystemError:
        raise
    except (ProtectedError, RestrictedError) as exc:
        logger.info(f"{operation}: blocked by dependent records")
        raise InUse(f"Cannot {operation}: it is referenced by existing records") from exc
    except IntegrityError as exc:
        logger.warning(f"{operation}: integrity violation: {exc}")
        raise Conflict(f"Cannot {operation}: it conflicts with existing data") from exc
    except (OperationalError, InterfaceError) as exc:
        logger.error(f"{operation}: storage unavailable: {exc}", exc_info=True)
        raise Transient(f"Temporary storage failure, could not {operation}; retry the request") from exc
    except DatabaseError as exc:
        logger.error(f"{operation}: storage failure: {exc}", exc_info=True)
        raise Fatal(f"Storage failure, could not {operation}") from exc
