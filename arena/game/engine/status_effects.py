"""Status conditions as data: prevention, stat modifiers, ticks and durations.

Every status is described by one StatusRule row. The engine never branches
on a specific status; adding a condition means adding a row here and a
member to the Status enum.
"""

import math
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Dict, Optional

from arena.game.data.move import Move
from arena.game.engine.config import EngineConfig
from arena.game.engine.rng import SeededRandom
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import Status


@dataclass(frozen=True)
class StatusRule:
    """Behaviour of one status condition.

    Attributes:
        label: Human readable name used in event descriptions
        skip_chance: Probability the creature loses its action. 0 never
            skips, 1 always skips without a random draw, anything in between
            costs one draw per check
        speed_multiplier: Applied to speed for turn order and accuracy
        accuracy_multiplier: Applied to the hit chance of the creature's moves
        physical_attack_multiplier: Applied to attack for physical moves
        damage_taken_multiplier: Applied to damage the creature receives
        tick_fraction: Share of max HP lost (positive) or restored
            (negative) at the end of each turn
        default_duration: Turns the status lasts unless overridden
    """

    label: str
    skip_chance: float = 0.0
    speed_multiplier: float = 1.0
    accuracy_multiplier: float = 1.0
    physical_attack_multiplier: float = 1.0
    damage_taken_multiplier: float = 1.0
    tick_fraction: Fraction = Fraction(0)
    default_duration: int = 0


# Durations are fixed per status, sleep included, so applying a status never
# draws from the random stream.
STATUS_RULES: Dict[Status, StatusRule] = {
    Status.NONE: StatusRule(label="healthy"),
    Status.BURN: StatusRule(
        label="burned",
        physical_attack_multiplier=0.5,
        tick_fraction=Fraction(1, 16),
        default_duration=3,
    ),
    Status.POISON: StatusRule(
        label="poisoned", tick_fraction=Fraction(1, 8), default_duration=4
    ),
    Status.PARALYSIS: StatusRule(
        label="paralyzed", skip_chance=0.25, speed_multiplier=0.5, default_duration=3
    ),
    Status.SLEEP: StatusRule(label="asleep", skip_chance=1.0, default_duration=2),
    Status.FREEZE: StatusRule(label="frozen", skip_chance=0.8, default_duration=2),
    Status.BLIND: StatusRule(
        label="blinded", accuracy_multiplier=0.7, default_duration=2
    ),
    Status.SLOW: StatusRule(label="slowed", speed_multiplier=0.6, default_duration=2),
    Status.SHIELD: StatusRule(
        label="shielded", damage_taken_multiplier=0.5, default_duration=3
    ),
    Status.REGEN: StatusRule(
        label="regenerating", tick_fraction=Fraction(-1, 10), default_duration=3
    ),
}


def get_rule(status: Status) -> StatusRule:
    return STATUS_RULES[status]


def check_can_act(creature: CreatureInstance, rng: SeededRandom) -> bool:
    """Decide whether the creature may use its move this turn.

    Draws from the stream only when the rule is probabilistic.
    """
    rule = get_rule(creature.status)
    if rule.skip_chance <= 0.0:
        return True
    if rule.skip_chance >= 1.0:
        return False
    return not rng.chance(rule.skip_chance)


def effective_speed(creature: CreatureInstance) -> int:
    return math.floor(creature.spd * get_rule(creature.status).speed_multiplier)


def status_duration(
    status: Status, config: EngineConfig, move: Optional[Move] = None
) -> int:
    """Duration for a newly applied status.

    A move's own duration wins, then the config override, then the rule.
    """
    if move is not None and move.status_duration:
        return move.status_duration
    if status.value in config.status_durations:
        return config.status_durations[status.value]
    return get_rule(status).default_duration


def can_apply_status(creature: CreatureInstance, status: Status) -> bool:
    """A healthy creature takes any status; an afflicted one only a refresh."""
    return creature.status in (Status.NONE, status)


def apply_status(
    creature: CreatureInstance, status: Status, duration: int
) -> CreatureInstance:
    """Put `status` in the creature's single status slot.

    Reapplying the current status restarts its duration. A different status
    on an afflicted creature is ignored and the creature returned unchanged.
    """
    if status == Status.NONE:
        return cure_status(creature)
    if not can_apply_status(creature, status):
        return creature
    return replace(creature, status=status, status_turns_remaining=max(1, duration))


def cure_status(creature: CreatureInstance) -> CreatureInstance:
    return replace(creature, status=Status.NONE, status_turns_remaining=0)


@dataclass(frozen=True)
class StatusTick:
    """Outcome of one end-of-turn status tick.

    `hp_change` is negative for damage and positive for healing.
    """

    creature: CreatureInstance
    status: Status
    hp_change: int = 0
    expired: bool = False


def tick_amount(creature: CreatureInstance, fraction: Fraction) -> int:
    return max(1, math.floor(creature.max_hp * abs(fraction)))


def tick_status(creature: CreatureInstance) -> StatusTick:
    """Apply the end-of-turn effect and count the duration down by one."""
    status = creature.status
    if status == Status.NONE or creature.is_fainted:
        return StatusTick(creature=creature, status=status)

    rule = get_rule(status)
    hp = creature.current_hp
    if rule.tick_fraction > 0:
        hp = max(0, hp - tick_amount(creature, rule.tick_fraction))
    elif rule.tick_fraction < 0:
        hp = min(creature.max_hp, hp + tick_amount(creature, rule.tick_fraction))

    turns = creature.status_turns_remaining - 1
    expired = turns <= 0
    updated = replace(
        creature,
        current_hp=hp,
        status=Status.NONE if expired else status,
        status_turns_remaining=0 if expired else turns,
    )
    return StatusTick(
        creature=updated,
        status=status,
        hp_change=hp - creature.current_hp,
        expired=expired,
    )
