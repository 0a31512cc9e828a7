"""Abstract repository for the Cart entity."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Cart | None:
        """Return the user's cart whatever its status, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""
