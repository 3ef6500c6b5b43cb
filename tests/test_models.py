"""
Tests for ciphertext and event models.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from confidential_ledger.models import (
    NULL_PRINCIPAL,
    AccessTag,
    AccessTagSet,
    Ciphertext,
    CiphertextHandle,
    CiphertextType,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
    Proof,
    is_null_principal,
    is_reserved_principal,
    normalize_principal,
)


HANDLE = CiphertextHandle(value=bytes(range(32)))


class TestPrincipals:
    """Tests for principal normalization."""

    def test_hex_addresses_lowercased(self):
        assert normalize_principal("0xABCDEF" + "0" * 34) == "0xabcdef" + "0" * 34

    def test_whitespace_stripped(self):
        assert normalize_principal("  alice  ") == "alice"

    @pytest.mark.parametrize("value", [None, "", "   ", NULL_PRINCIPAL, "0X" + "0" * 40])
    def test_null_principals(self, value):
        assert normalize_principal(value) is None
        assert is_null_principal(value) is True

    def test_non_hex_principal_kept_verbatim(self):
        assert normalize_principal("Alice") == "Alice"

    @pytest.mark.parametrize("value", ["public", "store", " Public ", "STORE"])
    def test_tag_names_reserved(self, value):
        assert is_reserved_principal(value) is True

    @pytest.mark.parametrize("value", [None, "", "publicity", "0x" + "b" * 40])
    def test_ordinary_names_not_reserved(self, value):
        assert is_reserved_principal(value) is False


class TestCiphertextModels:
    """Tests for handles, ciphertexts and proofs."""

    def test_handle_hex_round_trip(self):
        assert CiphertextHandle.from_hex(HANDLE.hex()) == HANDLE
        assert str(HANDLE).startswith("0x")
        assert len(HANDLE.hex()) == 2 + 64

    def test_handle_rejects_wrong_size(self):
        with pytest.raises(ValidationError):
            CiphertextHandle(value=b"\x01" * 31)

    def test_ciphertext_is_frozen(self):
        ct = Ciphertext(handle=HANDLE)
        with pytest.raises(ValidationError):
            ct.ciphertext_type = CiphertextType.EBOOL

    def test_ciphertext_exposes_no_value(self):
        ct = Ciphertext(handle=HANDLE)
        assert set(ct.model_dump()) == {"handle", "ciphertext_type"}

    def test_proof_rejects_empty(self):
        with pytest.raises(ValidationError):
            Proof(data=b"")

    def test_proof_rejects_zero_bytes(self):
        with pytest.raises(ValidationError):
            Proof(data=b"\x00" * 8)


class TestAccessTagSet:
    """Tests for access tag sets."""

    def test_public_allows_anyone(self):
        tags = AccessTagSet(handle=HANDLE, consumers=frozenset({AccessTag.PUBLIC.value}))
        assert tags.is_public
        assert tags.allows("anyone")

    def test_principal_grant_is_scoped(self):
        tags = AccessTagSet(handle=HANDLE, consumers=frozenset({"alice"}))
        assert tags.allows("alice")
        assert not tags.allows("bob")
        assert not tags.is_public

    def test_internal_flag(self):
        tags = AccessTagSet(handle=HANDLE, consumers=frozenset({AccessTag.STORE.value}))
        assert tags.is_internal
        assert not tags.is_public


class TestLedgerEvents:
    """Tests for event models and the builder."""

    def test_event_defaults(self):
        event = LedgerEvent(
            event_type=LedgerEventType.LIMIT_UPDATED,
            description="Spending limit replaced",
        )
        assert event.sequence == 0
        assert event.principal is None
        assert event.timestamp.tzinfo is not None

    def test_limit_updated_carries_handle_only(self):
        event = LedgerEventBuilder.limit_updated(HANDLE)
        assert event.event_type == LedgerEventType.LIMIT_UPDATED
        assert event.handle == HANDLE.hex()
        assert event.principal is None
        assert event.details == {}

    def test_expense_recorded(self):
        correlation_id = uuid4()
        event = LedgerEventBuilder.expense_recorded("alice", HANDLE, correlation_id)
        assert event.principal == "alice"
        assert event.handle == HANDLE.hex()
        assert event.correlation_id == correlation_id

    def test_expenses_reset_has_no_handle(self):
        event = LedgerEventBuilder.expenses_reset("alice")
        assert event.event_type == LedgerEventType.EXPENSES_RESET
        assert event.handle is None

    def test_ownership_transferred_details(self):
        event = LedgerEventBuilder.ownership_transferred("old", "new")
        assert event.principal == "new"
        assert event.details == {"previous_owner": "old", "new_owner": "new"}

    def test_to_log_dict(self):
        event = LedgerEventBuilder.expenses_checked("alice", HANDLE)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "expenses_checked"
        assert log_dict["handle"] == HANDLE.hex()
        assert "event_id" in log_dict

    def test_json_line_round_trip(self):
        event = LedgerEventBuilder.expense_recorded("alice", HANDLE)
        event.sequence = 7
        restored = LedgerEvent.from_json_line(event.to_json_line())
        assert restored == event


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
