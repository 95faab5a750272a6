"""Builders for creature instances and the initial battle state."""

from typing import Dict, List, Mapping, Optional, Sequence, Union

from absl import logging

from arena.game.data.game_data import GameData
from arena.game.engine.rng import normalize_seed
from arena.game.exceptions import InvariantViolationError
from arena.game.schema.battle_state import BattleState
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import BattlePhase, BattleResult
from arena.game.schema.player_side import PlayerSide

MAX_KNOWN_MOVES = 4
REQUIRED_STATS = ("hp", "atk", "def", "spd")


def create_creature_instance(
    instance_id: str,
    definition_id: str,
    base_stats: Mapping[str, int],
    known_move_ids: Sequence[str],
) -> CreatureInstance:
    """Create a fresh, healthy creature at full HP.

    Args:
        instance_id: Battle-unique identity for the creature
        definition_id: Catalog species id
        base_stats: Mapping with hp, atk, def and spd
        known_move_ids: Moves the creature can use

    Raises:
        ValueError: If a stat is missing
    """
    missing = [stat for stat in REQUIRED_STATS if stat not in base_stats]
    if missing:
        raise ValueError(f"Missing stats for {instance_id}: {', '.join(missing)}")
    hp = int(base_stats["hp"])
    return CreatureInstance(
        instance_id=instance_id,
        definition_id=definition_id,
        current_hp=hp,
        max_hp=hp,
        atk=int(base_stats["atk"]),
        def_=int(base_stats["def"]),
        spd=int(base_stats["spd"]),
        known_move_ids=tuple(known_move_ids),
    )


def create_creature_from_definition(
    game_data: GameData,
    definition_id: str,
    instance_id: str,
    move_ids: Optional[Sequence[str]] = None,
) -> CreatureInstance:
    """Create a creature from its catalog definition.

    Without `move_ids`, the first four moves of the species' move pool are
    used.

    Raises:
        ValueError: If the definition or one of the moves is unknown
    """
    definition = game_data.get_creature(definition_id)
    if move_ids is None:
        move_ids = definition.move_pool_ids[:MAX_KNOWN_MOVES]
    for move_id in move_ids:
        game_data.get_move(move_id)
    return create_creature_instance(
        instance_id, definition.id, definition.base_stats, move_ids
    )


def _build_side(player_id: str, team: Sequence[CreatureInstance]) -> PlayerSide:
    if not team:
        raise ValueError(f"Team for {player_id} must contain at least one creature")
    return PlayerSide(
        player_id=player_id,
        active=team[0],
        bench=tuple(team[1:]),
        fallen=(),
        lineup=tuple(c.instance_id for c in team),
    )


def create_initial_battle_state(
    battle_id: str,
    seed: Union[int, str],
    side1_id: str,
    side2_id: str,
    side1_team: Sequence[CreatureInstance],
    side2_team: Sequence[CreatureInstance],
) -> BattleState:
    """Create turn 0 of a battle. The first creature of each team starts active.

    Raises:
        ValueError: If either team is empty
        InvariantViolationError: If instance ids repeat anywhere in the battle
            or a creature starts fainted
    """
    player1 = _build_side(side1_id, side1_team)
    player2 = _build_side(side2_id, side2_team)

    seen: Dict[str, str] = {}
    for side in (player1, player2):
        for creature in side.all_creatures():
            if creature.instance_id in seen:
                raise InvariantViolationError(
                    "instance id used more than once", creature.instance_id
                )
            seen[creature.instance_id] = side.player_id

    state = BattleState(
        battle_id=battle_id,
        seed=normalize_seed(seed),
        player1=player1,
        player2=player2,
        turn_number=0,
        phase=BattlePhase.AWAITING_ACTIONS,
        result=BattleResult.ONGOING,
    )
    state.validate()
    logging.debug(
        "Created battle %s: %s (%d creatures) vs %s (%d creatures)",
        battle_id,
        side1_id,
        len(side1_team),
        side2_id,
        len(side2_team),
    )
    return state


def build_team(
    game_data: GameData, player_prefix: str, definition_ids: Sequence[str]
) -> List[CreatureInstance]:
    """Instantiate a team from species ids with ids like `p1-flame_lizard-0`."""
    return [
        create_creature_from_definition(
            game_data, definition_id, f"{player_prefix}-{definition_id}-{index}"
        )
        for index, definition_id in enumerate(definition_ids)
    ]
