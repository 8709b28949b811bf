"""Value types shared by the combat and content layers.

Data Flow:
1. Content documents -> StatBlock / StatOverrides (base numbers)
2. Stat model -> StatBlock (computed combat stats)
3. CombatUnit carries a StatBlock and a Position for one battle

These are plain value objects; nothing here knows about battles or content.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
from numpy.typing import NDArray

GRID_ROWS = 3
GRID_COLS = 3


@dataclass(frozen=True)
class Position:
    """Cell on a team's 3x3 formation grid.

    Row 0 is the front line; each team counts rows from its own front, so two
    front-row units on opposite sides are the closest possible pair.
    """
    row: int
    col: int

    def is_valid(self) -> bool:
        return 0 <= self.row < GRID_ROWS and 0 <= self.col < GRID_COLS

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        return cls(int(data["row"]), int(data["col"]))


@dataclass(frozen=True)
class StatBlock:
    """The four combat stats. ``defense`` is serialized as ``def``."""
    hp: int
    atk: int
    defense: int
    spd: int

    def to_array(self) -> NDArray[np.float64]:
        """Stats as an ``[hp, atk, def, spd]`` vector for weighted sums."""
        return np.array([self.hp, self.atk, self.defense, self.spd], dtype=np.float64)

    def to_dict(self) -> dict[str, int]:
        return {"hp": self.hp, "atk": self.atk, "def": self.defense, "spd": self.spd}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatBlock":
        defense = data["def"] if "def" in data else data["defense"]
        return cls(int(data["hp"]), int(data["atk"]), int(defense), int(data["spd"]))


@dataclass(frozen=True)
class StatOverrides:
    """Per-template multipliers applied on top of the derived stats."""
    hp_mult: float = 1.0
    atk_mult: float = 1.0
    def_mult: float = 1.0
    spd_mult: float = 1.0

    def scaled(self, factor: float) -> "StatOverrides":
        """Return overrides with HP/ATK/DEF multiplied by factor; SPD is left as is."""
        return StatOverrides(
            hp_mult=self.hp_mult * factor,
            atk_mult=self.atk_mult * factor,
            def_mult=self.def_mult * factor,
            spd_mult=self.spd_mult,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "hp_mult": self.hp_mult,
            "atk_mult": self.atk_mult,
            "def_mult": self.def_mult,
            "spd_mult": self.spd_mult,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "StatOverrides":
        if not data:
            return cls()
        return cls(
            hp_mult=float(data.get("hp_mult", 1.0)),
            atk_mult=float(data.get("atk_mult", 1.0)),
            def_mult=float(data.get("def_mult", 1.0)),
            spd_mult=float(data.get("spd_mult", 1.0)),
        )
