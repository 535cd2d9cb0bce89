"""Abstract client-local storage for the cart snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod

from delivery.domain.model.cart import CartItem


class CartStorage(ABC):

    @abstractmethod
    def load(self) -> list[CartItem]:
        """Return the stored lines, or an empty list if nothing usable is stored."""

    @abstractmethod
    def save(self, items: list[CartItem]) -> None:
        """Replace the stored snapshot with *items*."""
