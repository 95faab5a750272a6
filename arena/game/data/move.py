from dataclasses import dataclass
from typing import Optional

from arena.game.data.base import GameDataObject
from arena.game.schema.enums import ElementType, MoveCategory, MoveTarget, Status


@dataclass(frozen=True)
class Move(GameDataObject):
    """Static move definition from the catalog.

    An accuracy of 0 means the move never misses. `status_chance` is a
    probability in [0, 1] and only matters when `status_effect` is set.
    """

    id: str
    name: str
    type: str
    category: str
    power: int
    accuracy: int
    priority: int = 0
    cooldown: int = 0
    status_effect: Optional[str] = None
    status_chance: float = 0.0
    status_duration: Optional[int] = None
    target: str = "opponent"
    heal_fraction: float = 0.0
    cures_status: bool = False
    description: str = ""

    @property
    def element(self) -> ElementType:
        return ElementType.from_name(self.type)

    @property
    def move_category(self) -> MoveCategory:
        return MoveCategory(self.category.lower())

    @property
    def move_target(self) -> MoveTarget:
        return MoveTarget(self.target.lower())

    @property
    def status(self) -> Status:
        if not self.status_effect:
            return Status.NONE
        return Status(self.status_effect.lower())

    def is_damaging(self) -> bool:
        return self.move_category != MoveCategory.STATUS

    def targets_self(self) -> bool:
        return self.move_target == MoveTarget.SELF
