"""Authorization and reentrancy control package."""

from confidential_ledger.access.controller import AccessController
from confidential_ledger.access.guard import ReentrancyLock

__all__ = ["AccessController", "ReentrancyLock"]
