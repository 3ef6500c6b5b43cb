"""Principals and helpers shared by the test modules."""

from confidential_ledger.config import DecryptionSettings
from confidential_ledger.services.fhe import MockFHEBackend


OWNER = "0x" + "a" * 40
ALICE = "0x" + "b" * 40
BOB = "0x" + "c" * 40


def no_wait_settings(max_attempts: int = 5) -> DecryptionSettings:
    return DecryptionSettings(
        max_attempts=max_attempts,
        wait_multiplier=0,
        wait_min_seconds=0,
        wait_max_seconds=0,
    )


def submit(backend: MockFHEBackend, caller: str, amount: int):
    """Encrypt amount on behalf of caller; returns (external, proof)."""
    return backend.encrypt_input(amount, caller)


def reveal(backend: MockFHEBackend, handle):
    """Publicly decrypt one handle."""
    return backend.public_decrypt([handle])[handle.hex()]
