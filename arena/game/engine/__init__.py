"""Deterministic battle engine."""

from arena.game.data.type_chart import type_effectiveness
from arena.game.engine.battle_setup import (
    create_creature_from_definition,
    create_creature_instance,
    create_initial_battle_state,
)
from arena.game.engine.config import EngineConfig
from arena.game.engine.rng import SeededRandom
from arena.game.engine.turn_engine import (
    TurnEngine,
    default_action,
    forfeit_battle,
    simulate_turn,
)

__all__ = [
    "EngineConfig",
    "SeededRandom",
    "TurnEngine",
    "create_creature_from_definition",
    "create_creature_instance",
    "create_initial_battle_state",
    "default_action",
    "forfeit_battle",
    "simulate_turn",
    "type_effectiveness",
]
