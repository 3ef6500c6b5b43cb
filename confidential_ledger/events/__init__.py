"""Ledger event notification package."""

from confidential_ledger.events.notifier import (
    EventNotifier,
    configure_logging,
    create_correlation_id,
)

__all__ = ["EventNotifier", "configure_logging", "create_correlation_id"]
