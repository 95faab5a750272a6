"""Serializable battle records and deterministic replay.

A record stores the initial state and every turn's actions. Because turn
resolution is a pure function of state, actions and seed, replaying the
record reproduces the final state exactly; the digest of that state is what
gets compared when an outcome is disputed.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from absl import logging
from pydantic import BaseModel, ConfigDict, Field

from arena.game.data.game_data import GameData
from arena.game.engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from arena.game.engine.turn_engine import TurnEngine
from arena.game.exceptions import ReplayMismatchError
from arena.game.interface.battle_action import PlayerAction
from arena.game.protocol.battle_event_logger import BattleEventLogger
from arena.game.schema.battle_state import BattleState


def _action_dict(action: Optional[PlayerAction]) -> Optional[Dict[str, Any]]:
    return action.to_dict() if action is not None else None


def _parse_action(data: Optional[Dict[str, Any]]) -> Optional[PlayerAction]:
    return PlayerAction.from_dict(data) if data is not None else None


class TurnRecord(BaseModel):
    """Both sides' submitted actions for one turn."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    action1: Optional[Dict[str, Any]] = Field(
        default=None, description="Side 1 action dict, null when the side passed"
    )
    action2: Optional[Dict[str, Any]] = Field(
        default=None, description="Side 2 action dict, null when the side passed"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed override for this turn, the battle seed when null",
    )

    @classmethod
    def from_actions(
        cls,
        action1: Optional[PlayerAction],
        action2: Optional[PlayerAction],
        seed: Optional[int] = None,
    ) -> "TurnRecord":
        return cls(action1=_action_dict(action1), action2=_action_dict(action2), seed=seed)

    def actions(self) -> Tuple[Optional[PlayerAction], Optional[PlayerAction]]:
        return _parse_action(self.action1), _parse_action(self.action2)


class BattleRecord(BaseModel):
    """Everything needed to re-run a battle from its first turn."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_state: Dict[str, Any] = Field(
        description="BattleState.to_dict() of the battle before turn 1"
    )
    turns: List[TurnRecord] = Field(
        default_factory=list, description="Resolved turns in order"
    )
    expected_digest: Optional[str] = Field(
        default=None, description="Digest of the final state when recorded"
    )

    @classmethod
    def start(cls, state: BattleState) -> "BattleRecord":
        return cls(initial_state=state.to_dict())

    @property
    def battle_id(self) -> str:
        return self.initial_state.get("battle_id", "")

    def with_turn(
        self,
        action1: Optional[PlayerAction],
        action2: Optional[PlayerAction],
        seed: Optional[int] = None,
    ) -> "BattleRecord":
        turn = TurnRecord.from_actions(action1, action2, seed)
        return self.model_copy(update={"turns": [*self.turns, turn]})

    def sealed(self, final_state: BattleState) -> "BattleRecord":
        """Copy of the record carrying the final state's digest."""
        return self.model_copy(update={"expected_digest": final_state.digest()})


def replay_battle(
    record: BattleRecord,
    game_data: Optional[GameData] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    event_logger: Optional[BattleEventLogger] = None,
) -> BattleState:
    """Re-run every recorded turn from the initial state.

    Args:
        record: Battle record to replay
        game_data: Catalog the battle was played with
        config: Formula constants the battle was played with
        event_logger: Optional logger receiving every replayed turn

    Returns:
        The final BattleState

    Raises:
        ReplayMismatchError: If the record carries an expected digest and the
            replayed final state does not match it
        InvariantViolationError: If the stored initial state is inconsistent
    """
    engine = TurnEngine(game_data, config)
    state = BattleState.from_dict(record.initial_state)
    state.validate()

    for index, turn in enumerate(record.turns):
        if state.is_finished():
            logging.warning(
                "Battle %s finished before recorded turn %d of %d",
                state.battle_id,
                index + 1,
                len(record.turns),
            )
            break
        action1, action2 = turn.actions()
        state = engine.simulate_turn(state, action1, action2, turn.seed)
        if event_logger is not None:
            event_logger.log_turn(state)

    if record.expected_digest is not None:
        actual = state.digest()
        if actual != record.expected_digest:
            raise ReplayMismatchError(state.battle_id, record.expected_digest, actual)
    logging.info(
        "Replayed battle %s: %d turns, result %s",
        state.battle_id,
        state.turn_number,
        state.result.value,
    )
    return state


def load_battle_record(path: Union[str, Path]) -> BattleRecord:
    with open(path, "r") as f:
        return BattleRecord.model_validate_json(f.read())


def save_battle_record(record: BattleRecord, path: Union[str, Path]) -> None:
    with open(path, "w") as f:
        f.write(record.model_dump_json(indent=2))
