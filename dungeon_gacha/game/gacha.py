"""Gacha pulls against the configured character pool."""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.data import Rarity
from ..core.engine.rng import SeededRNG
from ..core.events import LogMessage
from .content.content_catalog import ContentCatalog
from .content.content_structures import CharacterDefinition

RARITY_ORDER = (Rarity.COMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY)


@dataclass(frozen=True)
class GachaPull:
    character_id: str
    character_name: str
    rarity: Rarity
    rolled_rarity: Rarity
    starlight_value: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "character_name": self.character_name,
            "rarity": self.rarity.value,
            "rolled_rarity": self.rolled_rarity.value,
            "starlight_value": self.starlight_value,
        }


class GachaMachine:
    """Rolls characters from the gacha pool and tracks pity counters.

    A pull first rolls a rarity against the cumulative rates (common up to
    legendary), then picks uniformly among pool characters of that rarity.
    When the pool has no character of the rolled rarity, the whole pool is
    used instead. Pity counters count pulls since each rarity last appeared.
    """

    def __init__(
        self,
        catalog: ContentCatalog,
        pity_counters: Optional[dict[Rarity, int]] = None,
        event_emitter: Optional[Callable] = None,
    ):
        self.catalog = catalog
        self.config = catalog.gacha
        self.emit_event = event_emitter or (lambda e: None)
        self.pity_counters: dict[Rarity, int] = {r: 0 for r in RARITY_ORDER}
        if pity_counters:
            self.pity_counters.update(pity_counters)

        pool_ids = self.config.character_pool or tuple(catalog.characters)
        self.pool: list[CharacterDefinition] = [
            catalog.characters[c] for c in pool_ids if c in catalog.characters
        ]

    def roll_rarity(self, rng: SeededRNG) -> Rarity:
        roll = rng.random()
        cumulative = 0.0
        for rarity in RARITY_ORDER:
            cumulative += self.config.rates.get(rarity, 0.0)
            if roll < cumulative:
                return rarity
        # Rates summing below 1.0 leave a gap; it belongs to the rarest tier
        return next((r for r in reversed(RARITY_ORDER) if self.config.rates.get(r, 0.0) > 0),
                    RARITY_ORDER[-1])

    def pull(self, rng: SeededRNG) -> GachaPull:
        """Pull one character.

        Raises:
            ValueError: If the pool has no characters
        """
        if not self.pool:
            raise ValueError("Gacha pool is empty")

        rolled = self.roll_rarity(rng)
        candidates = [c for c in self.pool if c.rarity is rolled] or self.pool
        character = rng.pick(candidates)

        for rarity in self.pity_counters:
            self.pity_counters[rarity] += 1
        self.pity_counters[character.rarity] = 0

        result = GachaPull(
            character_id=character.id,
            character_name=character.name,
            rarity=character.rarity,
            rolled_rarity=rolled,
            starlight_value=self.config.starlight_values.get(character.rarity, 0),
        )
        self.emit_event(LogMessage(
            turn=0,
            message=f"Pulled {character.name} ({character.rarity.value})",
            category="PROGRESSION",
            source="GachaMachine",
        ))
        return result

    def pull_many(self, count: int, rng: SeededRNG) -> list[GachaPull]:
        return [self.pull(rng) for _ in range(max(0, count))]

    def pity(self, rarity: Rarity) -> int:
        return self.pity_counters.get(rarity, 0)
