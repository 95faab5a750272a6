"""One player's creatures during a battle."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from arena.game.exceptions import InvariantViolationError
from arena.game.schema.creature_state import CreatureInstance


@dataclass(frozen=True)
class PlayerSide:
    """Immutable state of one side of the battle.

    Creatures only move between `active`, `bench` and `fallen` through a
    switch or a faint. `lineup` keeps the original instance order so the
    union of all three can be checked against it.

    Attributes:
        player_id: Identifier of the player controlling this side
        active: The creature currently on the field, None once all fainted
        bench: Living creatures waiting to switch in, in order
        fallen: Fainted creatures, in the order they fainted
        lineup: Instance ids of the team as submitted
    """

    player_id: str
    active: Optional[CreatureInstance]
    bench: Tuple[CreatureInstance, ...] = ()
    fallen: Tuple[CreatureInstance, ...] = ()
    lineup: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("bench", "fallen", "lineup"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def all_creatures(self) -> List[CreatureInstance]:
        """Active first, then bench, then fallen."""
        creatures: List[CreatureInstance] = []
        if self.active is not None:
            creatures.append(self.active)
        creatures.extend(self.bench)
        creatures.extend(self.fallen)
        return creatures

    def get_alive_creatures(self) -> List[CreatureInstance]:
        return [c for c in self.all_creatures() if c.is_alive()]

    def has_living_creatures(self) -> bool:
        if self.active is not None and self.active.is_alive():
            return True
        return any(c.is_alive() for c in self.bench)

    def find_bench_index(self, instance_id: str) -> Optional[int]:
        for index, creature in enumerate(self.bench):
            if creature.instance_id == instance_id:
                return index
        return None

    def find_creature(self, instance_id: str) -> Optional[CreatureInstance]:
        for creature in self.all_creatures():
            if creature.instance_id == instance_id:
                return creature
        return None

    def validate(self) -> None:
        """Check the structural invariants of this side.

        Raises:
            InvariantViolationError: On duplicate instance ids, a fainted
                creature on the bench or field, a living creature in
                `fallen`, or creatures that do not match `lineup`
        """
        seen = set()
        for creature in self.all_creatures():
            if creature.instance_id in seen:
                raise InvariantViolationError(
                    f"duplicate instance id on side {self.player_id}",
                    creature.instance_id,
                )
            seen.add(creature.instance_id)

        if self.active is not None and self.active.is_fainted:
            raise InvariantViolationError(
                "active creature is fainted", self.active.instance_id
            )
        for creature in self.bench:
            if creature.is_fainted:
                raise InvariantViolationError(
                    "fainted creature on bench", creature.instance_id
                )
        for creature in self.fallen:
            if creature.is_alive():
                raise InvariantViolationError(
                    "living creature in fallen", creature.instance_id
                )
        if self.lineup and seen != set(self.lineup):
            raise InvariantViolationError(
                f"creatures on side {self.player_id} do not match the lineup"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "active": self.active.to_dict() if self.active is not None else None,
            "bench": [c.to_dict() for c in self.bench],
            "fallen": [c.to_dict() for c in self.fallen],
            "lineup": list(self.lineup),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerSide":
        active_data = data.get("active")
        return cls(
            player_id=data["player_id"],
            active=(
                CreatureInstance.from_dict(active_data)
                if active_data is not None
                else None
            ),
            bench=tuple(CreatureInstance.from_dict(c) for c in data.get("bench", [])),
            fallen=tuple(
                CreatureInstance.from_dict(c) for c in data.get("fallen", [])
            ),
            lineup=tuple(data.get("lineup", ())),
        )

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
