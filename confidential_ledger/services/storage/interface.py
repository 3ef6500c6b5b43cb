"""
Abstract Event Storage Interface

DESIGN DECISION: We define an abstract interface for event persistence.
This allows us to:
1. Keep events in memory for tests and short-lived processes
2. Append them to a JSON-lines file for local audit trails
3. Swap in a database or message bus later
4. Keep the notifier decoupled from where events end up

Event logs are append-only - we never delete or modify them.
"""

from abc import ABC, abstractmethod

from confidential_ledger.models.events import LedgerEvent


class EventStorageInterface(ABC):
    """
    Abstract interface for ledger event storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def append_event(self, event: LedgerEvent) -> bool:
        """
        Append an event to the log.

        Args:
            event: The ledger event to store

        Returns:
            True if stored successfully

        Raises:
            EventStorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_events_by_principal(self, principal: str) -> list[LedgerEvent]:
        """
        Get all events about one principal.

        Returns:
            List of events in emission order
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[LedgerEvent]:
        """
        Get the most recent events.

        Returns:
            List of recent events (newest first)
        """
        pass


class EventStorageError(Exception):
    """Base exception for event storage operations."""
    pass
