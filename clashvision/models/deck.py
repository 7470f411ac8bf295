"""
Deck: an 8-card selection.

A Deck can only be built through create_deck(), which enforces the
selection contract (exactly 8 cards, no repeated card ids). Everything
downstream may assume a valid deck.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from clashvision.config import DECK_SIZE
from clashvision.models.card import Card
from clashvision.models.failure import DeckValidationError, FailureKind


@dataclass(frozen=True)
class Deck:
    """
    An immutable, validated 8-card deck.

    Attributes:
        cards: Cards in selection order
    """

    cards: tuple[Card, ...]

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def card_names(self) -> list[str]:
        """Card names in selection order (evolution marker kept)."""
        return [card.name for card in self.cards]

    @property
    def base_names(self) -> list[str]:
        """Card names in selection order with the evolution marker removed."""
        return [card.base_name for card in self.cards]

    @property
    def has_evolution(self) -> bool:
        """True if any slot holds an evolution variant."""
        return any(card.is_evolution for card in self.cards)


def create_deck(cards: Iterable[Card]) -> Deck:
    """
    Build a Deck, enforcing the selection contract.

    Args:
        cards: Selected cards in order

    Returns:
        Validated Deck

    Raises:
        DeckValidationError: If the deck is not exactly 8 distinct cards
    """
    selected = tuple(cards)

    if len(selected) != DECK_SIZE:
        raise DeckValidationError(
            kind=FailureKind.DECK_SIZE_VIOLATION,
            message=f"Invalid deck. Must contain exactly {DECK_SIZE} cards.",
            detail=f"Received {len(selected)} cards",
        )

    seen: set[int] = set()
    duplicates: list[str] = []
    for card in selected:
        if card.id in seen:
            duplicates.append(card.name)
        seen.add(card.id)

    if duplicates:
        raise DeckValidationError(
            kind=FailureKind.INVALID_INPUT,
            message="Invalid deck. Each card can only be selected once.",
            detail=f"Duplicate cards: {', '.join(duplicates)}",
        )

    return Deck(cards=selected)
