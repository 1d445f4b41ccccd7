"""
Message Bus

Routes commands to their single handler and committed domain events to
every subscribed handler. Each Django app builds its own bus in its
composition root, so nothing here is global.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Any], Any]
EventHandler = Callable[[DomainEvent], None]


def _handler_name(handler) -> str:
    return getattr(handler, '__qualname__', None) or type(handler).__name__


class MessageBus:
    """
    Commands are 1:1 and their errors reach the caller.
    Events are 1:N and a failing handler never affects the others.
    """

    def __init__(self):
        self._command_handlers: Dict[Type, CommandHandler] = {}
        self._event_handlers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def register_command_handler(self, command_type: Type, handler: CommandHandler):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler
        logger.debug(f"{command_type.__name__} -> {_handler_name(handler)}")

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        self._event_handlers[event_type].append(handler)
        logger.debug(f"{event_type.__name__} -> {_handler_name(handler)}")

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Run the command's handler and return its result

        Raises LookupError for an unknown command type. Domain errors are
        expected outcomes (conflicts, missing rows) and are logged at INFO;
        anything else is logged as an error. Both are re-raised.
        """
        name = type(command).__name__
        try:
            handler = self._command_handlers[type(command)]
        except KeyError:
            raise LookupError(f"No handler registered for {name}")

        try:
            return handler(command)
        except DomainError as e:
            logger.info(f"{name} rejected with {e.code}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"{name} failed: {e}")
            raise

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            handlers = self._event_handlers.get(type(event), [])
            if not handlers:
                logger.debug(f"Nobody listens to {event.name}")
                continue

            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"{_handler_name(handler)} failed on {event.name} {event.event_id}: {e}",
                        exc_info=True,
                    )
