"""
Account directory port (interface).

This defines the contract for resolving license owners.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional
import uuid

from accounts.domain.account import Account


class AccountDirectory(ABC):
    """
    Abstract read-only directory of accounts.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[Account]:
        """
        Find an account by username.

        Args:
            username: Account username

        Returns:
            Account entity with its license secrets, or None if not found
        """
        pass

    @abstractmethod
    async def find_by_id(self, account_id: uuid.UUID) -> Optional[Account]:
        """
        Find an account by ID.

        Args:
            account_id: Account UUID

        Returns:
            Account entity with its license secrets, or None if not found
        """
        pass
