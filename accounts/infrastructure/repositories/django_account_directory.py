"""
Django implementation of AccountDirectory port.

This adapter converts Django ORM models to domain entities.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from accounts.domain.account import Account
from accounts.infrastructure.models import Account as AccountModel
from accounts.ports.account_directory import AccountDirectory
from core.domain.value_objects import Username


class DjangoAccountDirectory(AccountDirectory):
    """Django ORM implementation of AccountDirectory."""

    def _to_domain(self, model: AccountModel) -> Account:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Account model with product licenses prefetched

        Returns:
            Account domain entity
        """
        return Account(
            id=model.id,
            username=Username(model.username),
            license_secrets={
                record.product_id: record.license_secret
                for record in model.product_licenses.all()
            },
        )

    def _queryset(self):
        return AccountModel.objects.prefetch_related("product_licenses")

    @sync_to_async
    def find_by_username(self, username: str) -> Optional[Account]:
        """
        Find an account by username.

        Args:
            username: Account username

        Returns:
            Account entity or None if not found
        """
        try:
            return self._to_domain(self._queryset().get(username=username))
        except AccountModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_id(self, account_id: uuid.UUID) -> Optional[Account]:
        """
        Find an account by ID.

        Args:
            account_id: Account UUID

        Returns:
            Account entity or None if not found
        """
        try:
            return self._to_domain(self._queryset().get(id=account_id))
        except AccountModel.DoesNotExist:
            return None
