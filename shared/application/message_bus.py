"""
Message Bus

Central hub routing commands to their single handler and events to any
number of subscribers. Booking lifecycle commands are registered by
``apps.bookings``; notification and cache handlers subscribe to events
from their own ``AppConfig.ready``.
"""

from typing import Dict, List, Callable, Type, Any
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class MessageBus:
    """
    Message bus for commands and events

    Commands: One handler per command (1:1)
    Events: Multiple handlers per event (1:N)
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._command_handlers: Dict[Type, Callable] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ):
        """Register an event handler; registering the same handler twice is a no-op"""
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug("Registered event handler %s for %s", _name(handler), event_type.__name__)

    def subscribe(self, *event_types: Type[DomainEvent]):
        """Decorator form of ``register_event_handler``"""
        def decorator(handler):
            for event_type in event_types:
                self.register_event_handler(event_type, handler)
            return handler
        return decorator

    def register_command_handler(
        self,
        command_type: Type,
        handler: Callable[[Any], Any],
        *,
        replace: bool = False,
    ):
        """
        Register a command handler

        Only one handler can be registered per command type.
        """
        if command_type in self._command_handlers and not replace:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug("Registered command handler for %s", command_type.__name__)

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Handle a command

        Returns the result from the command handler. Domain errors propagate
        to the caller unchanged.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)

        if not handler:
            raise LookupError(
                f"No handler registered for command {command_type.__name__}"
            )

        logger.info("Handling command: %s", command_type.__name__)
        try:
            result = handler(command)
        except Exception as e:
            logger.warning("Command %s failed: %s", command_type.__name__, e)
            raise
        logger.debug("Command %s handled successfully", command_type.__name__)
        return result

    def publish_events(self, events: List[DomainEvent]):
        """
        Publish domain events

        All registered handlers for each event type will be called.
        Errors in handlers are logged but don't stop other handlers.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.debug("No handlers registered for event %s", event_type.__name__)
                continue

            logger.info("Publishing event: %s (ID: %s)", event_type.__name__, event.event_id)

            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Error in event handler %s for event %s",
                        _name(handler), event_type.__name__,
                    )

    def publish(self, event: DomainEvent):
        self.publish_events([event])


def _name(handler: Callable) -> str:
    return getattr(handler, '__name__', handler.__class__.__name__)


# Global message bus instance
message_bus = MessageBus()
