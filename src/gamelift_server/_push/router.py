# Area: Push
"""
gamelift_server._push.router — Push Router
==========================================

Maps agent push event names to their handlers.
"""

import logging
from typing import Dict, List, Optional

from .events import PushEvent
from .handler_base import BasePushHandler

logger = logging.getLogger("gamelift_server.push.router")


class PushRouter:
    """
    Routes agent pushes to handlers.

    Usage:
        router = PushRouter()
        router.register_handler(SessionStartHandler(machine, session, executor))
        router.route(event)
    """

    def __init__(self):
        """Initialize router with empty handler registry."""
        self._handlers: Dict[str, BasePushHandler] = {}

    @property
    def event_names(self) -> List[str]:
        return list(self._handlers)

    def register_handler(self, handler: BasePushHandler) -> None:
        """
        Register a handler under its event name.

        Args:
            handler: The handler instance
        """
        self._handlers[handler.event_name] = handler
        logger.debug(f"Registered handler for {handler.event_name}")

    def get_handler(self, event_name: str) -> Optional[BasePushHandler]:
        """
        Get the handler for an event name.

        Returns:
            The handler if registered, None otherwise
        """
        return self._handlers.get(event_name)

    def route(self, event: PushEvent) -> None:
        """
        Route a decoded event to its handler.

        Args:
            event: A typed push event
        """
        handler = self._handlers.get(event.event_name)
        if handler is None:
            logger.warning(f"No handler for push: {event.event_name}")
            return
        handler.handle(event)
