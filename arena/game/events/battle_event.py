import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from arena.game.schema.enums import EventType


@dataclass(frozen=True)
class BattleEvent:
    """One entry in a resolved turn's event log.

    `source_player` is the side (1 or 2) that caused the event; turn-level
    events (turn-start, turn-end) use 0. The payload carries type-specific
    values such as damage dealt or the status applied.
    """

    type: EventType
    turn: int
    source_player: int
    actor_id: Optional[str] = None
    target_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "turn": self.turn,
            "source_player": self.source_player,
            "actor_id": self.actor_id,
            "target_id": self.target_id,
            "payload": dict(self.payload),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BattleEvent":
        return cls(
            type=EventType(data["type"]),
            turn=int(data["turn"]),
            source_player=int(data["source_player"]),
            actor_id=data.get("actor_id"),
            target_id=data.get("target_id"),
            payload=dict(data.get("payload", {})),
            description=data.get("description", ""),
        )

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
