"""Tests for the message bus, the unit of work and the API error mapping."""

from dataclasses import dataclass

import pytest
from rest_framework import status

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain import errors
from shared.domain.base import DomainEvent
from shared.infrastructure.api import domain_exception_handler, status_for


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    label: str = ""


@dataclass
class DoSomething:
    value: int


def test_command_has_exactly_one_handler():
    bus = MessageBus()
    bus.register_command_handler(DoSomething, lambda command: command.value * 2)

    assert bus.handle_command(DoSomething(21)) == 42
    with pytest.raises(ValueError):
        bus.register_command_handler(DoSomething, lambda command: None)


def test_unregistered_command_raises_lookup_error():
    with pytest.raises(LookupError):
        MessageBus().handle_command(DoSomething(1))


def test_domain_errors_propagate_from_command_handlers():
    bus = MessageBus()

    def handler(command):
        raise errors.SlotConflict("taken")

    bus.register_command_handler(DoSomething, handler)

    with pytest.raises(errors.SlotConflict):
        bus.handle_command(DoSomething(1))


def test_failing_event_handler_does_not_stop_the_others():
    bus = MessageBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.label))
    bus.register_event_handler(SomethingHappened, broken)

    bus.publish(SomethingHappened(label="x"))

    assert seen == ["x"]


@pytest.mark.django_db
def test_events_are_published_only_after_commit(monkeypatch, django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.label))
    monkeypatch.setattr("shared.application.message_bus.message_bus", bus)

    with django_capture_on_commit_callbacks(execute=True):
        with DjangoUnitOfWork() as uow:
            uow.record(SomethingHappened(label="committed"))
            assert seen == []

    assert seen == ["committed"]


@pytest.mark.django_db
def test_rolled_back_events_are_dropped(monkeypatch, django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.label))
    monkeypatch.setattr("shared.application.message_bus.message_bus", bus)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(errors.InvalidTransition):
            with DjangoUnitOfWork() as uow:
                uow.record(SomethingHappened(label="lost"))
                raise errors.InvalidTransition("nope")

    assert callbacks == []
    assert seen == []


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (errors.ValidationError(), status.HTTP_400_BAD_REQUEST),
        (errors.PaymentRequired(), status.HTTP_402_PAYMENT_REQUIRED),
        (errors.PermissionDenied(), status.HTTP_403_FORBIDDEN),
        (errors.NotFound(), status.HTTP_404_NOT_FOUND),
        (errors.SlotConflict(), status.HTTP_409_CONFLICT),
        (errors.InvalidTransition(), status.HTTP_409_CONFLICT),
    ],
)
def test_domain_errors_map_to_http_status(error, expected):
    assert status_for(error) == expected


def test_exception_handler_renders_code_and_context():
    response = domain_exception_handler(errors.SlotConflict("Slot taken", court_id=3), {"view": None})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data == {"code": "slot_conflict", "detail": "Slot taken", "context": {"court_id": "3"}}
