"""Complete battle state representation."""

import hashlib
import json
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Tuple

from arena.game.events.battle_event import BattleEvent
from arena.game.schema.enums import BattlePhase, BattleResult
from arena.game.schema.player_side import PlayerSide


@dataclass(frozen=True)
class BattleState:
    """Immutable snapshot of a whole battle between two sides.

    Each resolved turn produces a new BattleState; `last_turn_events` holds
    the log of the turn that produced it and is replaced every turn.

    Attributes:
        battle_id: Identifier of the battle or match
        seed: Battle seed, offset per turn to seed that turn's random stream
        turn_number: Number of resolved turns, starts at 0
        phase: Where the battle is in its lifecycle
        result: Outcome, ONGOING until one side has no living creatures
        player1: Side 1
        player2: Side 2
        last_turn_events: Events of the most recently resolved turn

    Example:
        >>> state.get_side(1).active.instance_id
        'p1-flame_lizard-0'
        >>> state.get_available_moves(1)
        ['ember', 'tackle', 'quick_strike']
    """

    battle_id: str
    seed: int
    player1: PlayerSide
    player2: PlayerSide
    turn_number: int = 0
    phase: BattlePhase = BattlePhase.AWAITING_ACTIONS
    result: BattleResult = BattleResult.ONGOING
    last_turn_events: Tuple[BattleEvent, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.last_turn_events, tuple):
            object.__setattr__(self, "last_turn_events", tuple(self.last_turn_events))

    def get_side(self, player: int) -> PlayerSide:
        """Get a side by its number.

        Args:
            player: 1 or 2

        Raises:
            ValueError: For any other player number
        """
        if player == 1:
            return self.player1
        if player == 2:
            return self.player2
        raise ValueError(f"Invalid player: {player}")

    def with_side(self, player: int, side: PlayerSide) -> "BattleState":
        if player == 1:
            return replace(self, player1=side)
        if player == 2:
            return replace(self, player2=side)
        raise ValueError(f"Invalid player: {player}")

    def is_finished(self) -> bool:
        return self.result != BattleResult.ONGOING

    def get_available_moves(self, player: int) -> List[str]:
        """Moves the side's active creature can use this turn.

        Returns:
            Known move ids that are off cooldown, in slot order. Empty when
            the side has no active creature or the battle is over.
        """
        if self.is_finished():
            return []
        active = self.get_side(player).active
        if active is None:
            return []
        return [m for m in active.known_move_ids if active.get_cooldown(m) == 0]

    def get_available_switches(self, player: int) -> List[str]:
        if self.is_finished():
            return []
        return [c.instance_id for c in self.get_side(player).bench if c.is_alive()]

    def validate(self) -> None:
        """Validate both sides. Raises InvariantViolationError on failure."""
        self.player1.validate()
        self.player2.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "battle_id": self.battle_id,
            "seed": self.seed,
            "turn_number": self.turn_number,
            "phase": self.phase.value,
            "result": self.result.value,
            "player1": self.player1.to_dict(),
            "player2": self.player2.to_dict(),
            "last_turn_events": [e.to_dict() for e in self.last_turn_events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BattleState":
        return cls(
            battle_id=data["battle_id"],
            seed=int(data["seed"]),
            turn_number=int(data.get("turn_number", 0)),
            phase=BattlePhase(data.get("phase", BattlePhase.AWAITING_ACTIONS.value)),
            result=BattleResult(data.get("result", BattleResult.ONGOING.value)),
            player1=PlayerSide.from_dict(data["player1"]),
            player2=PlayerSide.from_dict(data["player2"]),
            last_turn_events=tuple(
                BattleEvent.from_dict(e) for e in data.get("last_turn_events", [])
            ),
        )

    def digest(self) -> str:
        """SHA-256 over the canonical JSON form, for comparing replays."""
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
