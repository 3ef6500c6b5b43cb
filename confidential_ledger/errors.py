"""
Ledger Error Taxonomy

Every failure of a ledger command is one of four distinct conditions.
All of them are terminal for the current command:
- the command is aborted
- no state is written
- nothing is retried internally

Callers inspect the error class and its attributes to decide what to do
(e.g., resubmit with a fresh proof).
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for ledger commands."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)


class UnauthorizedError(LedgerError):
    """Caller lacks the owner identity required by the command."""

    def __init__(self, caller: Optional[str], operation: str):
        self.caller = caller
        super().__init__(
            f"{caller} is not authorized to call {operation}",
            operation=operation,
        )


class InvalidArgumentError(LedgerError):
    """Malformed argument, e.g. a null ownership transfer target."""

    def __init__(self, argument: str, value: Any, operation: Optional[str] = None):
        self.argument = argument
        self.value = value
        super().__init__(
            f"Invalid value for '{argument}': {value!r}",
            operation=operation,
        )


class InvalidProofError(LedgerError):
    """External ciphertext failed verification or is not bound to the submitter."""

    def __init__(
        self,
        submitter: Optional[str],
        reason: str,
        operation: Optional[str] = None,
    ):
        self.submitter = submitter
        self.reason = reason
        super().__init__(
            f"Proof rejected for submitter {submitter}: {reason}",
            operation=operation,
        )


class ReentrancyDetectedError(LedgerError):
    """A guarded command was invoked while another one was still running."""

    def __init__(self, active_operation: Optional[str], operation: str):
        self.active_operation = active_operation
        super().__init__(
            f"Reentrant call to {operation} while {active_operation} is in progress",
            operation=operation,
        )
