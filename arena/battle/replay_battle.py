"""Replays a recorded battle and checks its final state digest.

Used to audit a settled battle: the record's turns are re-resolved from the
initial state with the same catalog and formula constants, and the digest
of the final state is compared against the stored one.

Example:
    arena-replay --record=/tmp/battle-42.json --log_events --event_log_dir=/tmp/logs
"""

import time
from typing import List

from absl import app, flags, logging

from arena.game.data.game_data import GameData, default_game_data
from arena.game.engine.config import DEFAULT_ENGINE_CONFIG, load_engine_config
from arena.game.exceptions import ReplayMismatchError
from arena.game.protocol.battle_event_logger import DEFAULT_LOG_DIR, BattleEventLogger
from arena.game.protocol.battle_record import load_battle_record, replay_battle

FLAGS = flags.FLAGS

flags.DEFINE_string("record", None, "Path to the battle record JSON file")
flags.DEFINE_string(
    "engine_config",
    None,
    "Path to an EngineConfig JSON file (default: built-in constants)",
)
flags.DEFINE_string(
    "catalog_dir",
    None,
    "Directory holding moves.json, creatures.json and type_chart.json "
    "(default: packaged catalog)",
)
flags.DEFINE_bool(
    "log_events",
    False,
    "Write every replayed event to <event_log_dir>/<battle_id>_<epoch>.jsonl",
)
flags.DEFINE_string("event_log_dir", DEFAULT_LOG_DIR, "Directory for event logs")
flags.DEFINE_string(
    "expected_digest",
    None,
    "Digest the final state must match (default: the digest stored in the record)",
)


def main(argv: List[str]) -> int:
    del argv  # Unused.

    record = load_battle_record(FLAGS.record)
    if FLAGS.expected_digest:
        record = record.model_copy(update={"expected_digest": FLAGS.expected_digest})
    logging.info(
        "Loaded battle %s with %d recorded turns", record.battle_id, len(record.turns)
    )

    game_data = (
        GameData.load(FLAGS.catalog_dir) if FLAGS.catalog_dir else default_game_data()
    )
    config = (
        load_engine_config(FLAGS.engine_config)
        if FLAGS.engine_config
        else DEFAULT_ENGINE_CONFIG
    )

    event_logger = None
    if FLAGS.log_events:
        event_logger = BattleEventLogger(
            record.battle_id, int(time.time()), log_dir=FLAGS.event_log_dir
        )
        logging.info("Event logging enabled: %s", event_logger.path)

    try:
        state = replay_battle(record, game_data, config, event_logger)
    except ReplayMismatchError as e:
        logging.error("%s", e)
        return 1
    finally:
        if event_logger is not None:
            event_logger.close()

    logging.info(
        "Battle %s: turn %d, result %s, digest %s",
        state.battle_id,
        state.turn_number,
        state.result.value,
        state.digest(),
    )
    return 0


def run() -> None:
    flags.mark_flag_as_required("record")
    app.run(main)


if __name__ == "__main__":
    run()
