from dataclasses import dataclass, replace

from clashvision.config import EVOLUTION_ID_OFFSET, EVOLUTION_SUFFIX


@dataclass(frozen=True, slots=True)
class Card:
    """
    A playable card from the game catalog.

    Attributes:
        id: Catalog card ID (evolution variants use id + EVOLUTION_ID_OFFSET)
        name: Card name as shown in game (e.g., "Hog Rider")
        elixir_cost: Elixir needed to play the card (0 when unknown)
        rarity: common, rare, epic, legendary, champion
        icon_url: URL of the card artwork
    """

    id: int
    name: str
    elixir_cost: float = 0
    rarity: str = "common"
    icon_url: str = ""

    @property
    def is_evolution(self) -> bool:
        """True for derived evolution variants."""
        return self.name.endswith(EVOLUTION_SUFFIX)

    @property
    def base_name(self) -> str:
        """Card name without the evolution marker."""
        return strip_evolution_suffix(self.name)


def strip_evolution_suffix(name: str) -> str:
    """Remove the " (Evolution)" marker from a card name, if present."""
    if name.endswith(EVOLUTION_SUFFIX):
        return name[: -len(EVOLUTION_SUFFIX)]
    return name


def make_evolution(card: Card, icon_url: str | None = None) -> Card:
    """
    Derive the evolution variant of a base card.

    The variant gets a synthesized id and a name suffix; the base card
    is left untouched.
    """
    if card.is_evolution:
        raise ValueError(f"Card is already an evolution: {card.name}")

    return replace(
        card,
        id=card.id + EVOLUTION_ID_OFFSET,
        name=f"{card.name}{EVOLUTION_SUFFIX}",
        icon_url=icon_url or card.icon_url,
    )
