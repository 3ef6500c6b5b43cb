"""
Event Storage Package

Provides the abstract interface and concrete implementations for
persisting ledger events.
"""

from confidential_ledger.services.storage.interface import (
    EventStorageError,
    EventStorageInterface,
)
from confidential_ledger.services.storage.backends import (
    InMemoryEventStorage,
    JsonLinesEventStorage,
)

__all__ = [
    # Interface
    "EventStorageInterface",
    # Exceptions
    "EventStorageError",
    # Implementations
    "InMemoryEventStorage",
    "JsonLinesEventStorage",
]
