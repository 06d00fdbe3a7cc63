"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
The scheduling engine never touches storage; only the application
service depends on this abstraction.
"""

from abc import ABC, abstractmethod

from .models import Card


class CardStore(ABC):
    """
    Port for loading and persisting cards.

    Implementations:
        - JsonCardStore: Reads and writes a JSON deck file.
    """

    @abstractmethod
    async def get_cards(self) -> list[Card]:
        """
        Fetch every card in the store.

        Returns:
            List of Card objects in store order.
        """
        pass

    @abstractmethod
    async def get_card(self, card_id: str) -> Card | None:
        """
        Fetch a single card by its identifier.

        Returns:
            The Card, or None if no card has that id.
        """
        pass

    @abstractmethod
    async def save_card(self, card: Card) -> None:
        """
        Replace the stored card that has the same id.

        Args:
            card: Card carrying the replacement state and history.
        """
        pass
