"""Unit factories: content definitions to CombatUnits.

Characters, enemy templates and summon templates are turned into battle-ready
CombatUnits here. Stats come from the stat model using the catalog's role and
rarity tables; ability ids are checked against the catalog so the battle
engine only ever sees abilities that exist.
"""

from typing import TYPE_CHECKING, Callable, Mapping, Optional

from ...core.data import (
    DEFAULT_COMBAT_CONSTANTS,
    ROLE_BASE_STATS,
    CombatConstants,
    Rarity,
    Role,
    StatBlock,
    Team,
)
from ...core.events import LogMessage
from ..content.content_structures import CharacterDefinition, EnemyTemplate, SummonTemplate
from .stats import compute_stats
from .unit import CombatUnit, SummonerConfig

if TYPE_CHECKING:
    from ..content.content_catalog import ContentCatalog

EventEmitter = Callable[[object], None]


def _warn(event_emitter: Optional[EventEmitter], message: str) -> None:
    if event_emitter is not None:
        event_emitter(LogMessage(turn=0, message=message, category="CONTENT",
                                 level="WARNING", source="UnitFactory"))


def resolve_ability_ids(
    catalog: "ContentCatalog",
    ability_ids: tuple[str, ...],
    role: Role,
    owner: str,
    event_emitter: Optional[EventEmitter] = None,
) -> list[str]:
    """Keep the ability ids the catalog knows about.

    Unknown ids are dropped. A unit that lists nothing gets its role's
    default ability when the catalog has it; a unit whose every listed id is
    unknown is left with basic attacks only.
    """
    if not ability_ids:
        default = catalog.default_ability_for(role)
        return [default.id] if default is not None else []

    known = []
    for ability_id in ability_ids:
        if ability_id in catalog.abilities:
            known.append(ability_id)
        else:
            _warn(event_emitter, f"{owner}: unknown ability '{ability_id}' ignored")
    return known


def build_summoner_config(
    catalog: "ContentCatalog",
    summon_ids: tuple[str, ...],
    max_summons: int,
    owner: str,
    event_emitter: Optional[EventEmitter] = None,
) -> Optional[SummonerConfig]:
    """Resolve summon ids into templates; None when nothing resolves."""
    templates = []
    for summon_id in summon_ids:
        template = catalog.resolve_summon(summon_id)
        if template is None:
            _warn(event_emitter, f"{owner}: unknown summon template '{summon_id}' ignored")
            continue
        templates.append(template)
    if not templates:
        return None
    return SummonerConfig(templates=tuple(templates), max_summons=max_summons)


def create_character_unit(
    catalog: "ContentCatalog",
    definition: CharacterDefinition,
    level: int = 1,
    ascension: int = 0,
    team: Team = Team.PLAYER,
    unit_id: Optional[str] = None,
    event_emitter: Optional[EventEmitter] = None,
) -> CombatUnit:
    """Create a combat unit for a playable character."""
    stats = compute_stats(
        catalog.base_stats_for(definition.role),
        definition.rarity,
        level,
        ascension,
        constants=catalog.combat,
        rarity_multipliers=catalog.rarity_multipliers,
    )
    return CombatUnit(
        id=unit_id or definition.id,
        name=definition.name,
        role=definition.role,
        team=team,
        stats=stats,
        ability_ids=resolve_ability_ids(
            catalog, definition.ability_ids, definition.role, definition.id, event_emitter
        ),
        summoner=build_summoner_config(
            catalog, definition.summon_ids, definition.max_summons, definition.id, event_emitter
        ),
        level=level,
        ascension=ascension,
    )


def create_enemy_unit(
    catalog: "ContentCatalog",
    template: EnemyTemplate,
    difficulty_mult: float = 1.0,
    team: Team = Team.ENEMY,
    unit_id: Optional[str] = None,
    event_emitter: Optional[EventEmitter] = None,
) -> CombatUnit:
    """Create a combat unit for an enemy template.

    The room difficulty multiplier scales HP, ATK and DEF on top of the
    template's own overrides; SPD is left alone so turn order stays stable
    across rooms.
    """
    overrides = template.stat_overrides.scaled(difficulty_mult)
    stats = compute_stats(
        catalog.base_stats_for(template.role),
        template.rarity,
        template.level,
        template.ascension,
        overrides=overrides,
        constants=catalog.combat,
        rarity_multipliers=catalog.rarity_multipliers,
    )
    return CombatUnit(
        id=unit_id or template.id,
        name=template.name,
        role=template.role,
        team=team,
        stats=stats,
        ability_ids=resolve_ability_ids(
            catalog, template.ability_ids, template.role, template.id, event_emitter
        ),
        is_boss=template.is_boss,
        summoner=build_summoner_config(
            catalog, template.summon_ids, template.max_summons, template.id, event_emitter
        ),
        level=template.level,
        ascension=template.ascension,
    )


def create_summon_unit(
    template: SummonTemplate,
    summoner: CombatUnit,
    unit_id: str,
    known_abilities: Mapping[str, object],
    constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
    role_stats: Mapping[Role, StatBlock] = ROLE_BASE_STATS,
    rarity_multipliers: Optional[Mapping[Rarity, float]] = None,
) -> CombatUnit:
    """Create the unit a summoner brings into battle.

    Missing level/ascension on the template fall back to the summoner's.
    Ability ids missing from ``known_abilities`` are dropped so the summon
    fights with basic attacks.
    """
    level = template.level if template.level is not None else summoner.level
    ascension = template.ascension if template.ascension is not None else summoner.ascension

    stats = compute_stats(
        role_stats.get(template.role, ROLE_BASE_STATS[template.role]),
        template.rarity,
        level,
        ascension,
        overrides=template.stat_overrides,
        constants=constants,
        rarity_multipliers=rarity_multipliers,
    )
    return CombatUnit(
        id=unit_id,
        name=template.name,
        role=template.role,
        team=summoner.team,
        stats=stats,
        ability_ids=[a for a in template.ability_ids if a in known_abilities],
        summoner_id=summoner.id,
        level=level,
        ascension=ascension,
    )
