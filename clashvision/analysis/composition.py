"""
Deck composition and archetype classification.

Pure keyword heuristics over card names and elixir costs. Cards are
sorted into buildings, spells and troops; win conditions are counted
separately, so a card can be both a troop and a win condition.

Archetypes are decided by an ordered rule cascade: the first rule whose
predicate holds names the deck, later rules are not evaluated.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from clashvision.models.card import Card

BUILDING_KEYWORDS = (
    "tower",
    "building",
    "cannon",
    "tesla",
    "mortar",
    "x-bow",
    "hut",
    "furnace",
    "tombstone",
    "goblin cage",
)
BUILDING_NAMES = frozenset({"elixir collector"})
NOT_BUILDING_NAMES = frozenset({"cannon cart"})

SPELL_KEYWORDS = (
    "fireball",
    "snowball",
    "arrow",
    "rocket",
    "lightning",
    "poison",
    "quake",
    "barrel",
)
SPELL_NAMES = frozenset(
    {
        "zap",
        "the log",
        "rage",
        "freeze",
        "tornado",
        "clone",
        "mirror",
        "graveyard",
        "void",
        "royal delivery",
        "goblin curse",
    }
)

WIN_CONDITION_KEYWORDS = (
    "giant",
    "golem",
    "hog",
    "balloon",
    "x-bow",
    "mortar",
    "graveyard",
    "ram",
    "miner",
    "goblin barrel",
    "lava hound",
)
WIN_CONDITION_NAMES = frozenset({"three musketeers", "royal giant", "goblin drill"})
NOT_WIN_CONDITION_NAMES = frozenset({"giant snowball"})

BEATDOWN_KEYWORDS = ("golem", "lava hound")
BEATDOWN_NAMES = frozenset({"giant"})
SIEGE_KEYWORDS = ("x-bow", "mortar")
BRIDGE_SPAM_KEYWORDS = ("battle ram", "bandit", "ram rider", "royal ghost")
BAIT_KEYWORDS = ("goblin", "skeleton", "princess")

CYCLE_MAX_ELIXIR = 2
CYCLE_MIN_CARDS = 4
BAIT_MIN_CARDS = 3
CONTROL_MIN_AVG_ELIXIR = 4.0
TANK_MIN_ELIXIR = 5

DEFAULT_ARCHETYPE = "Midrange"


@dataclass
class DeckComposition:
    """Card role counts for a deck."""

    troops: int = 0
    spells: int = 0
    buildings: int = 0
    win_conditions: int = 0
    supports: int = 0
    avg_elixir: float = 0.0


@dataclass
class DeckAnalysis:
    """Full analysis: composition, archetype and weaknesses."""

    composition: DeckComposition
    archetype: str
    counters: list[str] = field(default_factory=list)

    @property
    def avg_elixir(self) -> float:
        return self.composition.avg_elixir


def calculate_average_elixir(cards: Sequence[Card]) -> float:
    """Mean elixir cost rounded to one decimal (0.0 for no cards)."""
    if not cards:
        return 0.0
    total = sum(card.elixir_cost for card in cards)
    return round(total / len(cards), 1)


def _name(card: Card) -> str:
    return card.base_name.lower()


def _matches(
    name: str,
    keywords: Sequence[str],
    names: frozenset[str] = frozenset(),
    excluded: frozenset[str] = frozenset(),
) -> bool:
    if name in excluded:
        return False
    return name in names or any(keyword in name for keyword in keywords)


def is_building(card: Card) -> bool:
    return _matches(_name(card), BUILDING_KEYWORDS, BUILDING_NAMES, NOT_BUILDING_NAMES)


def is_spell(card: Card) -> bool:
    return _matches(_name(card), SPELL_KEYWORDS, SPELL_NAMES)


def is_win_condition(card: Card) -> bool:
    return _matches(
        _name(card), WIN_CONDITION_KEYWORDS, WIN_CONDITION_NAMES, NOT_WIN_CONDITION_NAMES
    )


def analyze_deck_composition(cards: Sequence[Card]) -> DeckComposition:
    """
    Count card roles in a deck.

    Buildings are checked before spells; anything else is a troop.
    supports = troops - win_conditions, which can go negative when a
    spell or building also counts as a win condition (e.g. Graveyard).
    """
    composition = DeckComposition(avg_elixir=calculate_average_elixir(cards))

    for card in cards:
        if is_building(card):
            composition.buildings += 1
        elif is_spell(card):
            composition.spells += 1
        else:
            composition.troops += 1

        if is_win_condition(card):
            composition.win_conditions += 1

    composition.supports = composition.troops - composition.win_conditions
    return composition


ArchetypeRule = tuple[Callable[[Sequence[Card]], bool], str]


def _has_beatdown_tank(cards: Sequence[Card]) -> bool:
    return any(_matches(_name(c), BEATDOWN_KEYWORDS, BEATDOWN_NAMES) for c in cards)


def _has_siege_building(cards: Sequence[Card]) -> bool:
    return any(_matches(_name(c), SIEGE_KEYWORDS) for c in cards)


def _is_cheap_cycle(cards: Sequence[Card]) -> bool:
    return sum(1 for c in cards if c.elixir_cost <= CYCLE_MAX_ELIXIR) >= CYCLE_MIN_CARDS


def _has_bridge_spam(cards: Sequence[Card]) -> bool:
    return any(_matches(_name(c), BRIDGE_SPAM_KEYWORDS) for c in cards)


def _is_bait(cards: Sequence[Card]) -> bool:
    return sum(1 for c in cards if _matches(_name(c), BAIT_KEYWORDS)) >= BAIT_MIN_CARDS


def _is_heavy(cards: Sequence[Card]) -> bool:
    return calculate_average_elixir(cards) >= CONTROL_MIN_AVG_ELIXIR


# Evaluated top-down, first match wins
ARCHETYPE_RULES: list[ArchetypeRule] = [
    (_has_beatdown_tank, "Beatdown"),
    (_has_siege_building, "Siege"),
    (_is_cheap_cycle, "Cycle"),
    (_has_bridge_spam, "Bridge Spam"),
    (_is_bait, "Bait"),
    (_is_heavy, "Control"),
]


def detect_deck_archetype(cards: Sequence[Card]) -> str:
    """Name the deck's archetype using the first matching rule."""
    for predicate, label in ARCHETYPE_RULES:
        if predicate(cards):
            return label
    return DEFAULT_ARCHETYPE


def get_deck_counters(
    cards: Sequence[Card], composition: DeckComposition | None = None
) -> list[str]:
    """Describe what the deck is weak against."""
    composition = composition or analyze_deck_composition(cards)
    counters: list[str] = []

    if composition.buildings == 0:
        counters.append("Vulnerable to Graveyard")

    if composition.spells < 2:
        counters.append("Weak against swarm cards")

    if cards and all(c.elixir_cost >= 3 for c in cards):
        counters.append("Vulnerable to cycle decks")

    has_tank = any(
        c.elixir_cost >= TANK_MIN_ELIXIR and not is_spell(c) and not is_building(c) for c in cards
    )
    if not has_tank:
        counters.append("No tank - vulnerable to heavy pushes")

    return counters


def analyze_deck(cards: Sequence[Card]) -> DeckAnalysis:
    """Composition, archetype and counters in one pass."""
    composition = analyze_deck_composition(cards)
    return DeckAnalysis(
        composition=composition,
        archetype=detect_deck_archetype(cards),
        counters=get_deck_counters(cards, composition),
    )
