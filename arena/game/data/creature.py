from dataclasses import dataclass
from typing import Dict, List

from arena.game.data.base import GameDataObject
from arena.game.schema.enums import ElementType


@dataclass(frozen=True)
class CreatureDefinition(GameDataObject):
    """Species template that creature instances are built from."""

    id: str
    name: str
    element_type: str
    base_stats: Dict[str, int]
    move_pool_ids: List[str]
    rarity: str = "COMMON"

    @property
    def element(self) -> ElementType:
        return ElementType.from_name(self.element_type)
