"""Tests for the in-process message bus and unit of work publishing."""

from dataclasses import dataclass

import pytest
from django.db import connection

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class RoomTouched(DomainEvent):
    room_id: int


class TestMessageBus:
    def test_delivers_to_every_handler_once(self) -> None:
        bus = MessageBus()
        first: list = []
        second: list = []
        bus.register_event_handler(RoomTouched, first.append)
        bus.register_event_handler(RoomTouched, first.append)
        bus.register_event_handler(RoomTouched, second.append)

        event = RoomTouched(room_id=1)
        bus.publish(event)

        assert first == [event]
        assert second == [event]

    def test_failing_handler_does_not_block_others(self) -> None:
        bus = MessageBus()
        seen: list = []

        def explode(event: DomainEvent) -> None:
            raise RuntimeError("handler failed")

        bus.register_event_handler(RoomTouched, explode)
        bus.register_event_handler(RoomTouched, seen.append)

        bus.publish(RoomTouched(room_id=2))

        assert len(seen) == 1

    def test_unregister(self) -> None:
        bus = MessageBus()
        seen: list = []
        bus.register_event_handler(RoomTouched, seen.append)
        bus.unregister_event_handler(RoomTouched, seen.append)

        bus.publish(RoomTouched(room_id=3))

        assert seen == []

    def test_event_to_dict(self) -> None:
        payload = RoomTouched(room_id=4, aggregate_id=4).to_dict()
        assert payload["event_type"] == "RoomTouched"
        assert payload["aggregate_id"] == 4


@pytest.mark.django_db
class TestDjangoUnitOfWork:
    def test_events_published_after_commit(self, monkeypatch, django_capture_on_commit_callbacks) -> None:  # type: ignore
        bus = MessageBus()
        seen: list = []
        bus.register_event_handler(RoomTouched, seen.append)
        monkeypatch.setattr("shared.application.message_bus.message_bus", bus)

        with django_capture_on_commit_callbacks(execute=True):
            with DjangoUnitOfWork() as uow:
                uow.record(RoomTouched(room_id=5))
                assert seen == []

        assert [e.room_id for e in seen] == [5]

    def test_events_discarded_on_rollback(self, monkeypatch, django_capture_on_commit_callbacks) -> None:  # type: ignore
        bus = MessageBus()
        seen: list = []
        bus.register_event_handler(RoomTouched, seen.append)
        monkeypatch.setattr("shared.application.message_bus.message_bus", bus)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(ValueError):
                with DjangoUnitOfWork() as uow:
                    uow.record(RoomTouched(room_id=6))
                    raise ValueError("abort")

        assert callbacks == []
        assert seen == []

    def test_runs_inside_a_transaction(self) -> None:
        with DjangoUnitOfWork():
            assert connection.in_atomic_block
