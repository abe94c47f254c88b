"""In-process event bus contracts.

Services publish domain events after a state change has been written;
handlers run synchronously in the publishing thread.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Reacts to one kind of domain event."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Routes published events to the handlers subscribed to their class."""

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None:
        """Register ``handler``; registering the same handler twice is a no-op."""
        ...

    def unsubscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None:
        """Detach ``handler``; unknown handlers are ignored."""
        ...
