"""Enums for battle state representation."""

from enum import Enum


class ElementType(Enum):
    """Creature and move elements."""

    FIRE = "FIRE"
    WATER = "WATER"
    GRASS = "GRASS"
    ELECTRIC = "ELECTRIC"
    ICE = "ICE"
    EARTH = "EARTH"
    DARK = "DARK"
    LIGHT = "LIGHT"
    NEUTRAL = "NEUTRAL"

    @classmethod
    def from_name(cls, name: str) -> "ElementType":
        """Parse an element name case-insensitively.

        Raises:
            ValueError: If the name is not a known element
        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown element type: {name}") from None


class MoveCategory(Enum):
    PHYSICAL = "physical"
    SPECIAL = "special"
    STATUS = "status"


class MoveTarget(Enum):
    OPPONENT = "opponent"
    SELF = "self"


class Status(Enum):
    """Creature status conditions. At most one is active per creature."""

    NONE = "none"
    BURN = "burn"
    POISON = "poison"
    PARALYSIS = "paralysis"
    SLEEP = "sleep"
    FREEZE = "freeze"
    BLIND = "blind"
    SLOW = "slow"
    SHIELD = "shield"
    REGEN = "regen"


class BattlePhase(Enum):
    AWAITING_ACTIONS = "awaiting-actions"
    RESOLVING = "resolving"
    FINISHED = "finished"


class BattleResult(Enum):
    ONGOING = "ongoing"
    SIDE1_WIN = "side1-win"
    SIDE2_WIN = "side2-win"
    DRAW = "draw"


class EventType(Enum):
    """Kinds of entries in a turn's event log."""

    TURN_START = "turn-start"
    TURN_END = "turn-end"
    MOVE_USED = "move-used"
    DAMAGE = "damage"
    STATUS_APPLIED = "status-applied"
    STATUS_DAMAGE = "status-damage"
    STATUS_EXPIRED = "status-expired"
    STATUS_CURED = "status-cured"
    HEAL = "heal"
    SWITCH = "switch"
    FAINT = "faint"
    CRITICAL = "critical"
    MISS = "miss"
    SUPER_EFFECTIVE = "super-effective"
    NOT_EFFECTIVE = "not-effective"
    NO_EFFECT = "no-effect"
    CANT_ACT = "cant-act"
    INVALID_ACTION = "invalid-action"
    FORFEIT = "forfeit"
