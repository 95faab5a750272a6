"""Player action representation for turn submissions."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ActionType(Enum):
    """Type of action a player can take."""

    USE_MOVE = "use-move"
    SWITCH = "switch"


@dataclass(frozen=True)
class PlayerAction:
    """Immutable representation of one side's choice for a turn.

    Actions are built by the request layer or an AI opponent from
    `BattleState.get_available_moves` and `get_available_switches`. No
    validation happens here; the engine turns an unusable action into a
    skipped action with an invalid-action event.

    Attributes:
        action_type: USE_MOVE or SWITCH
        move_id: Move to use, required for USE_MOVE
        switch_to_instance_id: Bench creature to bring in, required for SWITCH

    Examples:
        >>> PlayerAction.use_move("ember").to_dict()
        {'type': 'use-move', 'move_id': 'ember'}

        >>> PlayerAction.switch("p1-slime-1").to_dict()
        {'type': 'switch', 'switch_to_instance_id': 'p1-slime-1'}
    """

    action_type: ActionType
    move_id: Optional[str] = None
    switch_to_instance_id: Optional[str] = None

    @classmethod
    def use_move(cls, move_id: str) -> "PlayerAction":
        return cls(action_type=ActionType.USE_MOVE, move_id=move_id)

    @classmethod
    def switch(cls, instance_id: str) -> "PlayerAction":
        return cls(action_type=ActionType.SWITCH, switch_to_instance_id=instance_id)

    def is_switch(self) -> bool:
        return self.action_type == ActionType.SWITCH

    def to_dict(self) -> Dict[str, Any]:
        if self.action_type == ActionType.SWITCH:
            return {
                "type": self.action_type.value,
                "switch_to_instance_id": self.switch_to_instance_id,
            }
        return {"type": self.action_type.value, "move_id": self.move_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerAction":
        """Parse an action dict.

        Raises:
            ValueError: If the type is unknown or its required field is missing
        """
        action_type = ActionType(data.get("type"))
        if action_type == ActionType.SWITCH:
            instance_id = data.get("switch_to_instance_id")
            if not instance_id:
                raise ValueError("switch action requires switch_to_instance_id")
            return cls.switch(instance_id)
        move_id = data.get("move_id")
        if not move_id:
            raise ValueError("use-move action requires move_id")
        return cls.use_move(move_id)

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
