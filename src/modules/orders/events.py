"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderApproved(DomainEvent):
    """Raised when an order is approved (payload carries failed items)."""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""


@dataclass(frozen=True)
class OrderApprovalRolledBack(DomainEvent):
    """Raised when a strict-mode approval was compensated."""
