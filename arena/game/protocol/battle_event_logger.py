"""Logs resolved battle events to file for auditing and dispute review."""

import json
import os
from typing import Any, Dict, Optional, TextIO

from arena.game.events.battle_event import BattleEvent
from arena.game.schema.battle_state import BattleState

DEFAULT_LOG_DIR = "/tmp/logs"


class BattleEventLogger:
    """Appends one JSON line per battle event to a per-battle file."""

    def __init__(
        self, battle_id: str, epoch_secs: int, log_dir: str = DEFAULT_LOG_DIR
    ) -> None:
        """Initialize the event logger.

        Args:
            battle_id: Battle the events belong to
            epoch_secs: Timestamp in epoch seconds for the log filename
            log_dir: Directory for the log file, created if missing
        """
        self._battle_id = battle_id
        self._epoch_secs = epoch_secs
        self._log_dir = log_dir
        self._file: Optional[TextIO] = None

        os.makedirs(self._log_dir, exist_ok=True)
        self.path = os.path.join(self._log_dir, f"{battle_id}_{epoch_secs}.jsonl")
        self._file = open(self.path, "w")

    def __enter__(self) -> "BattleEventLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def log_event(self, turn_number: int, event: BattleEvent) -> None:
        """Log a battle event.

        Args:
            turn_number: Turn the event was produced in
            event: BattleEvent to log
        """
        if self._file is None:
            return

        log_entry: Dict[str, Any] = {
            "battle_id": self._battle_id,
            "turn_number": turn_number,
            "event": event.to_dict(),
        }
        self._file.write(f"{json.dumps(log_entry, sort_keys=True)}\n")
        self._file.flush()

    def log_turn(self, state: BattleState) -> None:
        """Log every event of the state's last resolved turn."""
        for event in state.last_turn_events:
            self.log_event(state.turn_number, event)

    def close(self) -> None:
        """Close the log file."""
        if self._file is not None:
            self._file.close()
            self._file = None
