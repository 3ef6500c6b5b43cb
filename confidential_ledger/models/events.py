"""
Ledger Event Models

Every command that changes or exposes encrypted state emits one event.

DESIGN DECISION: Events are value-free. They carry principals and
ciphertext handles, never amounts, limits or comparison outcomes.
Anyone reading the event stream learns WHO did WHAT to WHICH handle,
and nothing more.

Events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from confidential_ledger.models.ciphertext import CiphertextHandle


class LedgerEventType(str, Enum):
    """Types of events the ledger emits."""
    LIMIT_UPDATED = "limit_updated"
    EXPENSE_RECORDED = "expense_recorded"
    EXPENSES_CHECKED = "expenses_checked"
    EXPENSES_RESET = "expenses_reset"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    """
    A single ledger notification.

    The notifier stamps the sequence number when the event is emitted.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    sequence: int = Field(
        default=0,
        ge=0,
        description="Position in the ledger's event stream (assigned on emit)"
    )

    # Classification
    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )

    # Subject
    principal: Optional[str] = Field(
        default=None,
        description="Principal the event is about, where relevant"
    )
    handle: Optional[str] = Field(
        default=None,
        description="Hex handle of the ciphertext the event exposes"
    )

    # Correlation - for tracking one client-side flow
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description (never contains values)"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """Dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "principal": self.principal,
            "handle": self.handle,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }

    def to_json_line(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json_line(cls, line: str) -> "LedgerEvent":
        return cls.model_validate_json(line)


class LedgerEventBuilder:
    """
    Helper class to build ledger events.

    Usage:
        event = LedgerEventBuilder.limit_updated(handle)
        event = LedgerEventBuilder.expense_recorded(principal, handle)
    """

    @staticmethod
    def limit_updated(
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LIMIT_UPDATED,
            handle=handle.hex(),
            correlation_id=correlation_id,
            description="Spending limit replaced",
        )

    @staticmethod
    def expense_recorded(
        principal: str,
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPENSE_RECORDED,
            principal=principal,
            handle=handle.hex(),
            correlation_id=correlation_id,
            description=f"Expense recorded for {principal}",
        )

    @staticmethod
    def expenses_checked(
        principal: str,
        handle: CiphertextHandle,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPENSES_CHECKED,
            principal=principal,
            handle=handle.hex(),
            correlation_id=correlation_id,
            description=f"Expenses of {principal} compared against the limit",
        )

    @staticmethod
    def expenses_reset(
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPENSES_RESET,
            principal=principal,
            correlation_id=correlation_id,
            description=f"Expenses of {principal} reset",
        )

    @staticmethod
    def ownership_transferred(
        previous_owner: str,
        new_owner: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.OWNERSHIP_TRANSFERRED,
            principal=new_owner,
            correlation_id=correlation_id,
            description="Ledger ownership transferred",
            details={
                "previous_owner": previous_owner,
                "new_owner": new_owner,
            },
        )
