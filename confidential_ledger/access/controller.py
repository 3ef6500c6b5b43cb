"""
Access Controller

Tracks the single owner principal and gates owner-only commands.

There is exactly one owner at any time. The only way to change it is an
explicit transfer by the current owner to a non-null principal.
"""

from typing import Optional

from confidential_ledger.errors import InvalidArgumentError, UnauthorizedError
from confidential_ledger.models.ciphertext import is_reserved_principal, normalize_principal


class AccessController:
    """Owner bookkeeping and authorization checks."""

    def __init__(self, initial_owner: str):
        owner = normalize_principal(initial_owner)
        if owner is None or is_reserved_principal(owner):
            raise InvalidArgumentError("initial_owner", initial_owner)
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, principal: Optional[str]) -> bool:
        return normalize_principal(principal) == self._owner

    def require_owner(self, caller: Optional[str], operation: str) -> None:
        """
        Raises:
            UnauthorizedError: If caller is not the current owner
        """
        if not self.is_owner(caller):
            raise UnauthorizedError(caller, operation)

    def transfer_ownership(self, caller: Optional[str], new_owner: Optional[str]) -> str:
        """
        Hand ownership to new_owner.

        The caller check comes first: a non-owner learns nothing about
        whether its target would have been valid.

        Returns:
            The previous owner

        Raises:
            UnauthorizedError: If caller is not the current owner
            InvalidArgumentError: If new_owner is null or a reserved tag name
        """
        self.require_owner(caller, "transfer_ownership")
        target = normalize_principal(new_owner)
        if target is None or is_reserved_principal(target):
            raise InvalidArgumentError("new_owner", new_owner, operation="transfer_ownership")

        previous = self._owner
        self._owner = target
        return previous
