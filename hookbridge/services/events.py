"""
Integration lifecycle events.

An EventEmitter holds the subscribers of one Integration (shared with its
WebhookManager). Subscriber failures are logged and never reach the
operation that emitted the event.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from hookbridge.models.contracts.integrations import IntegrationContext
from hookbridge.models.enums import IntegrationEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[
    [IntegrationEvent, Any, IntegrationContext],
    Union[Awaitable[None], None],
]


class EventEmitter:
    """Per-instance mapping of lifecycle event -> ordered subscriber list."""

    def __init__(self) -> None:
        self._handlers: dict[IntegrationEvent, list[EventHandler]] = {}

    def on(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        self._handlers.setdefault(IntegrationEvent(event), []).append(handler)

    def off(self, event: IntegrationEvent | str, handler: EventHandler) -> None:
        handlers = self._handlers.get(IntegrationEvent(event))
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handlers(self, event: IntegrationEvent | str) -> list[EventHandler]:
        return list(self._handlers.get(IntegrationEvent(event), []))

    def clear(self) -> None:
        self._handlers.clear()

    async def emit(
        self,
        event: IntegrationEvent,
        data: Any,
        context: IntegrationContext,
    ) -> None:
        """
        Call every subscriber of an event concurrently.

        Never raises because of a subscriber.
        """
        handlers = self.handlers(event)
        if not handlers:
            return

        await asyncio.gather(
            *(self._call(handler, event, data, context) for handler in handlers)
        )

    async def _call(
        self,
        handler: EventHandler,
        event: IntegrationEvent,
        data: Any,
        context: IntegrationContext,
    ) -> None:
        try:
            result = handler(event, data, context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                f"Error in event handler for {event.value}: {e}",
                exc_info=True,
            )
