"""Creature state representation for battle simulation."""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from arena.game.exceptions import InvariantViolationError
from arena.game.schema.enums import Status


@dataclass(frozen=True)
class CreatureInstance:
    """Immutable snapshot of one battling creature.

    Stats are the current effective values for this battle. Status modifiers
    (burn halving physical attack, paralysis slowing, ...) are applied by the
    engine at use time and never written back into the stats here.

    Attributes:
        instance_id: Stable identity of this creature within the battle
        definition_id: Catalog species id the creature was built from
        current_hp: Remaining HP, 0 means fainted
        max_hp: HP ceiling
        atk: Attack stat
        def_: Defense stat
        spd: Speed stat
        status: Current status condition, Status.NONE when healthy
        status_turns_remaining: Turns until the status wears off
        move_cooldowns: Move id -> turns until the move is usable again
        known_move_ids: Moves this creature can use, in slot order
    """

    instance_id: str
    definition_id: str
    current_hp: int
    max_hp: int
    atk: int
    def_: int
    spd: int
    status: Status = Status.NONE
    status_turns_remaining: int = 0
    move_cooldowns: Dict[str, int] = field(default_factory=dict)
    known_move_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.known_move_ids, tuple):
            object.__setattr__(self, "known_move_ids", tuple(self.known_move_ids))
        if self.max_hp < 1:
            raise InvariantViolationError(
                f"max_hp must be positive, got {self.max_hp}", self.instance_id
            )
        if not 0 <= self.current_hp <= self.max_hp:
            raise InvariantViolationError(
                f"current_hp {self.current_hp} outside [0, {self.max_hp}]",
                self.instance_id,
            )
        if self.status_turns_remaining < 0:
            raise InvariantViolationError(
                "status_turns_remaining must not be negative", self.instance_id
            )
        if any(turns < 0 for turns in self.move_cooldowns.values()):
            raise InvariantViolationError(
                "move cooldowns must not be negative", self.instance_id
            )

    @property
    def is_fainted(self) -> bool:
        return self.current_hp == 0

    def is_alive(self) -> bool:
        """Check if creature is not fainted.

        Returns:
            True if HP > 0, False otherwise
        """
        return self.current_hp > 0

    def has_status(self) -> bool:
        return self.status != Status.NONE

    def get_cooldown(self, move_id: str) -> int:
        return self.move_cooldowns.get(move_id, 0)

    def is_move_ready(self, move_id: str) -> bool:
        return move_id in self.known_move_ids and self.get_cooldown(move_id) == 0

    def with_hp(self, hp: int) -> "CreatureInstance":
        """Copy with HP set, clamped to [0, max_hp]."""
        return replace(self, current_hp=max(0, min(self.max_hp, hp)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "definition_id": self.definition_id,
            "current_hp": self.current_hp,
            "max_hp": self.max_hp,
            "atk": self.atk,
            "def": self.def_,
            "spd": self.spd,
            "status": self.status.value,
            "status_turns_remaining": self.status_turns_remaining,
            "move_cooldowns": {
                move_id: self.move_cooldowns[move_id]
                for move_id in sorted(self.move_cooldowns)
            },
            "known_move_ids": list(self.known_move_ids),
            "is_fainted": self.is_fainted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreatureInstance":
        creature = cls(
            instance_id=data["instance_id"],
            definition_id=data["definition_id"],
            current_hp=int(data["current_hp"]),
            max_hp=int(data["max_hp"]),
            atk=int(data["atk"]),
            def_=int(data["def"]),
            spd=int(data["spd"]),
            status=Status(data.get("status", Status.NONE.value)),
            status_turns_remaining=int(data.get("status_turns_remaining", 0)),
            move_cooldowns={
                str(k): int(v) for k, v in data.get("move_cooldowns", {}).items()
            },
            known_move_ids=tuple(data.get("known_move_ids", ())),
        )
        if "is_fainted" in data and bool(data["is_fainted"]) != creature.is_fainted:
            raise InvariantViolationError(
                "is_fainted does not match current_hp", creature.instance_id
            )
        return creature

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
