"""
Message Bus

Routes commands to their single handler and domain events to every
subscribed handler. Views talk to the booking engine only through here.
"""

from typing import Any, Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class MessageBus:
    """
    Commands: one handler per command type, result returned to the caller.
    Events: any number of handlers per event type, failures isolated.
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._command_handlers: Dict[Type, Callable] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ):
        self._event_handlers.setdefault(event_type, []).append(handler)
        logger.debug("Registered event handler %s for %s", handler.__name__, event_type.__name__)

    def register_command_handler(
        self,
        command_type: Type,
        handler: Callable[[Any], Any],
        replace: bool = False,
    ):
        """
        Register a command handler

        Registering a second handler for the same command is an error unless
        ``replace`` is set, which tests use to swap in a handler bound to
        different collaborators.
        """
        if command_type in self._command_handlers and not replace:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug("Registered command handler for %s", command_type.__name__)

    def handle_command(self, command: Any) -> Any:
        """
        Dispatch a command and return its handler's result

        Handler exceptions propagate unchanged to the caller.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)

        if not handler:
            raise ValueError(
                f"No handler registered for command {command_type.__name__}"
            )

        logger.info("Handling command: %s", command_type.__name__)
        try:
            return handler(command)
        except Exception as e:
            logger.info("Command %s failed: %s", command_type.__name__, e)
            raise

    def publish_events(self, events: List[DomainEvent]):
        """
        Deliver events to their handlers

        A failing handler is logged and skipped so the others still run;
        the state that produced the event is already committed.
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
                    logger.error(
                        "Error in event handler %s for event %s",
                        handler.__name__,
                        event_type.__name__,
                        exc_info=True,
                    )


# Global message bus instance, wired in BookingsConfig.ready()
message_bus = MessageBus()
