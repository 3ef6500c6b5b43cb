"""
Reentrancy Lock

A single free/busy flag shared by every guarded ledger command.

A command acquires the lock on entry and releases it on exit, whether it
returns or raises. Any guarded command invoked while the lock is busy
(directly, or from inside a service callback) is rejected.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from confidential_ledger.errors import ReentrancyDetectedError


class ReentrancyLock:
    """Non-reentrant guard for ledger commands."""

    def __init__(self):
        self._active: Optional[str] = None

    @property
    def locked(self) -> bool:
        return self._active is not None

    @property
    def active_operation(self) -> Optional[str]:
        return self._active

    @contextmanager
    def guard(self, operation: str) -> Iterator[None]:
        """
        Hold the lock for the duration of the block.

        Raises:
            ReentrancyDetectedError: If another operation holds the lock
        """
        if self._active is not None:
            raise ReentrancyDetectedError(self._active, operation)
        self._active = operation
        try:
            yield
        finally:
            self._active = None
