"""Hit, critical and damage resolution for a single move use."""

import math
from dataclasses import dataclass
from typing import List

from arena.game.data.game_data import GameData
from arena.game.data.move import Move
from arena.game.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from arena.game.engine.rng import SeededRandom
from arena.game.engine.status_effects import effective_speed, get_rule
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import MoveCategory

# Evenly spaced variance rolls used for previews.
PREVIEW_ROLLS = 16


@dataclass(frozen=True)
class MoveEstimate:
    """Expected outcome of a move, computed without touching the stream."""

    min_damage: int
    max_damage: int
    crit_min_damage: int
    crit_max_damage: int
    hit_chance: float
    critical_hit_probability: float
    effectiveness: float
    knockout_probability: float
    status_chance: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class DamageCalculator:
    """Combines stats, move data, status and the random stream.

    Stream consumption for an opponent-targeting move is fixed: one draw for
    the hit roll, then (only on a hit) one for the critical roll, then one
    for the damage variance. Status-chance draws happen in the engine after
    damage.
    """

    def __init__(
        self, game_data: GameData, config: EngineConfig = DEFAULT_ENGINE_CONFIG
    ) -> None:
        self.game_data = game_data
        self.config = config

    def type_multiplier(self, move: Move, defender: CreatureInstance) -> float:
        return self.game_data.get_type_chart().get_effectiveness(
            move.element, self.game_data.element_of(defender.definition_id)
        )

    def hit_chance(
        self, attacker: CreatureInstance, defender: CreatureInstance, move: Move
    ) -> float:
        """Probability that `move` connects.

        Accuracy 0 means the move never misses. Otherwise the move's accuracy
        loses a little for every point of speed the defender has over the
        attacker (and gains when the attacker is faster), is scaled by the
        attacker's status, then clamped to the configured bounds.
        """
        if move.accuracy <= 0:
            return 1.0
        chance = move.accuracy / 100.0
        speed_gap = effective_speed(defender) - effective_speed(attacker)
        chance -= speed_gap / self.config.accuracy_speed_divisor
        chance *= get_rule(attacker.status).accuracy_multiplier
        return _clamp(chance, self.config.accuracy_floor, self.config.accuracy_ceiling)

    def resolve_hit(
        self,
        attacker: CreatureInstance,
        defender: CreatureInstance,
        move: Move,
        rng: SeededRandom,
    ) -> bool:
        return rng.chance(self.hit_chance(attacker, defender, move))

    def critical_chance(self, attacker: CreatureInstance) -> float:
        bonus = (effective_speed(attacker) - 50) / self.config.crit_speed_divisor
        return _clamp(
            self.config.base_crit_rate + bonus,
            self.config.crit_floor,
            self.config.crit_ceiling,
        )

    def resolve_critical(self, attacker: CreatureInstance, rng: SeededRandom) -> bool:
        return rng.chance(self.critical_chance(attacker))

    def compute_damage(
        self,
        attacker: CreatureInstance,
        defender: CreatureInstance,
        move: Move,
        is_critical: bool,
        variance: float,
    ) -> int:
        """Damage for a known variance roll.

        Returns 0 for status moves and for immune defenders; any other hit
        deals at least `min_damage`.
        """
        if not move.is_damaging():
            return 0
        multiplier = self.type_multiplier(move, defender)
        if multiplier == 0:
            return 0

        attack = float(attacker.atk)
        if move.move_category == MoveCategory.PHYSICAL:
            attack *= get_rule(attacker.status).physical_attack_multiplier
        ratio = max(self.config.stat_ratio_floor, attack / max(1, defender.def_))

        damage = move.power * math.sqrt(ratio) * multiplier * variance
        if is_critical:
            damage *= self.config.crit_multiplier
        damage *= get_rule(defender.status).damage_taken_multiplier
        return max(self.config.min_damage, math.floor(damage))

    def resolve_damage(
        self,
        attacker: CreatureInstance,
        defender: CreatureInstance,
        move: Move,
        is_critical: bool,
        rng: SeededRandom,
    ) -> int:
        if not move.is_damaging():
            return 0
        spread = self.config.variance_max - self.config.variance_min
        variance = self.config.variance_min + rng.uniform() * spread
        return self.compute_damage(attacker, defender, move, is_critical, variance)

    def _preview_rolls(self) -> List[float]:
        spread = self.config.variance_max - self.config.variance_min
        rolls = [
            self.config.variance_min + spread * i / (PREVIEW_ROLLS - 1)
            for i in range(PREVIEW_ROLLS - 1)
        ]
        rolls.append(self.config.variance_max)
        return rolls

    def estimate_move_result(
        self, attacker: CreatureInstance, defender: CreatureInstance, move: Move
    ) -> MoveEstimate:
        """Preview a move for UI use. Consumes no randomness.

        Example:
            >>> estimate = calculator.estimate_move_result(lizard, dino, ember)
            >>> estimate.effectiveness
            2.0
        """
        effectiveness = (
            self.type_multiplier(move, defender) if not move.targets_self() else 1.0
        )
        hit = 1.0 if move.targets_self() else self.hit_chance(attacker, defender, move)
        status_chance = move.status_chance if move.status_effect else 0.0
        if effectiveness == 0:
            status_chance = 0.0
        if move.targets_self() or not move.is_damaging():
            return MoveEstimate(
                min_damage=0,
                max_damage=0,
                crit_min_damage=0,
                crit_max_damage=0,
                hit_chance=hit,
                critical_hit_probability=0.0,
                effectiveness=effectiveness,
                knockout_probability=0.0,
                status_chance=status_chance,
            )

        crit = self.critical_chance(attacker)
        normal = [
            self.compute_damage(attacker, defender, move, False, v)
            for v in self._preview_rolls()
        ]
        critical = [
            self.compute_damage(attacker, defender, move, True, v)
            for v in self._preview_rolls()
        ]

        def ko_share(rolls: List[int]) -> float:
            return sum(1 for d in rolls if d >= defender.current_hp) / len(rolls)

        knockout = hit * ((1 - crit) * ko_share(normal) + crit * ko_share(critical))
        return MoveEstimate(
            min_damage=min(normal),
            max_damage=max(normal),
            crit_min_damage=min(critical),
            crit_max_damage=max(critical),
            hit_chance=hit,
            critical_hit_probability=crit,
            effectiveness=effectiveness,
            knockout_probability=knockout if effectiveness > 0 else 0.0,
            status_chance=status_chance,
        )
