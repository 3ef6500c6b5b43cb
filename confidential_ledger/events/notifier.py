"""
Event Notifier

DESIGN DECISION: Every ledger command that changes or exposes encrypted
state emits exactly one value-free event. This provides:
1. A complete trail of who touched which handle
2. The handles clients need to request decryption
3. Debugging capability without ever logging a value

The notifier:
- Stamps each event with a monotonically increasing sequence number
- Always logs locally through structlog
- Persists to storage when a backend is configured
- Reports storage failures loudly (error log + False) without undoing
  the ledger command that produced the event
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from confidential_ledger.models.ciphertext import CiphertextHandle
from confidential_ledger.models.events import LedgerEvent, LedgerEventBuilder
from confidential_ledger.services.storage import (
    EventStorageError,
    EventStorageInterface,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route ledger logs through the stdlib root logger at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class EventNotifier:
    """
    Central event emission service.

    Emits events both to:
    1. Structured local log
    2. Event storage (when configured)
    """

    def __init__(
        self,
        storage: Optional[EventStorageInterface] = None,
    ):
        """
        Initialize the notifier.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._sequence = 0
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[EventStorageInterface]:
        return self._storage

    @property
    def last_sequence(self) -> int:
        return self._sequence

    def emit(self, event: LedgerEvent) -> bool:
        """
        Emit an event.

        Always logs locally. Persists to storage if available.

        Returns True if the storage write succeeded (or no storage configured).
        """
        self._sequence += 1
        event.sequence = self._sequence

        self._logger.info("ledger_event", **event.to_log_dict())

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except EventStorageError as e:
                self._logger.error(
                    "event_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                    sequence=event.sequence,
                )
                return False

        return True

    def limit_updated(
        self,
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Emit LimitUpdated."""
        return self.emit(LedgerEventBuilder.limit_updated(handle, correlation_id))

    def expense_recorded(
        self,
        principal: str,
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Emit ExpenseRecorded."""
        return self.emit(
            LedgerEventBuilder.expense_recorded(principal, handle, correlation_id)
        )

    def expenses_checked(
        self,
        principal: str,
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Emit ExpensesChecked."""
        return self.emit(
            LedgerEventBuilder.expenses_checked(principal, handle, correlation_id)
        )

    def expenses_reset(
        self,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Emit ExpensesReset."""
        return self.emit(LedgerEventBuilder.expenses_reset(principal, correlation_id))

    def ownership_transferred(
        self,
        previous_owner: str,
        new_owner: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Emit OwnershipTransferred."""
        return self.emit(
            LedgerEventBuilder.ownership_transferred(
                previous_owner, new_owner, correlation_id
            )
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a client-side flow (e.g., submit then check)
    and pass it to every ledger command of that flow.
    """
    return uuid4()
