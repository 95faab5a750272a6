"""Shared fixtures for engine tests: a scripted stream and a small catalog."""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from arena.game.data.game_data import GameData
from arena.game.engine.rng import SeededRandom
from arena.game.schema.creature_state import CreatureInstance
from arena.game.schema.enums import Status


class ScriptedRandom(SeededRandom):
    """Stream that replays given uniform values and counts every draw.

    Once the script runs out, `default` is returned; with no default an
    extra draw raises AssertionError so tests notice unexpected consumption.
    """

    def __init__(
        self, values: Sequence[float] = (), default: Optional[float] = None
    ) -> None:
        super().__init__(0)
        self._values = list(values)
        self._default = default
        self.draws = 0

    def next_uint32(self) -> int:
        return int(self._next_value() * 4294967296) & 0xFFFFFFFF

    def uniform(self) -> float:
        return self._next_value()

    def _next_value(self) -> float:
        self.draws += 1
        if self._values:
            return self._values.pop(0)
        if self._default is None:
            raise AssertionError(f"Unexpected random draw #{self.draws}")
        return self._default

    @property
    def remaining(self) -> List[float]:
        return list(self._values)


def _move(move_id: str, element: str, category: str, power: int, **extra: Any) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "id": move_id,
        "name": move_id.replace("_", " ").title(),
        "type": element,
        "category": category,
        "power": power,
        "accuracy": extra.pop("accuracy", 100),
    }
    entry.update(extra)
    return entry


FIXTURE_MOVES: List[Dict[str, Any]] = [
    _move("tackle", "NEUTRAL", "physical", 40),
    _move("nudge", "NEUTRAL", "physical", 1),
    _move("feint", "NEUTRAL", "physical", 0, accuracy=0),
    _move("quick_strike", "NEUTRAL", "physical", 40, priority=1),
    _move("sure_hit", "NEUTRAL", "physical", 40, accuracy=0),
    _move("mega_punch", "NEUTRAL", "physical", 999, accuracy=0),
    _move("slam", "NEUTRAL", "physical", 80, accuracy=75),
    _move("ember", "FIRE", "special", 40, status_effect="burn", status_chance=0.1),
    _move("fire_blast", "FIRE", "special", 110, cooldown=2),
    _move("zap", "ELECTRIC", "special", 40),
    _move(
        "thunder_wave",
        "ELECTRIC",
        "status",
        0,
        accuracy=90,
        status_effect="paralysis",
        status_chance=1.0,
    ),
    _move("lullaby", "NEUTRAL", "status", 0, status_effect="sleep", status_chance=1.0),
    _move("toxic", "DARK", "status", 0, status_effect="poison", status_chance=1.0),
    _move(
        "barrier",
        "LIGHT",
        "status",
        0,
        accuracy=0,
        cooldown=2,
        status_effect="shield",
        status_chance=1.0,
        target="self",
    ),
    _move(
        "purify",
        "LIGHT",
        "status",
        0,
        accuracy=0,
        target="self",
        heal_fraction=0.25,
        cures_status=True,
    ),
]


def _creature_def(definition_id: str, element: str, moves: Iterable[str]) -> Dict[str, Any]:
    return {
        "id": definition_id,
        "name": definition_id.title(),
        "element_type": element,
        "base_stats": {"hp": 100, "atk": 100, "def": 100, "spd": 100},
        "move_pool_ids": list(moves),
    }


FIXTURE_CREATURES: List[Dict[str, Any]] = [
    _creature_def("blob", "NEUTRAL", ["tackle", "quick_strike", "slam"]),
    _creature_def("pyro", "FIRE", ["ember", "fire_blast", "tackle"]),
    _creature_def("leafy", "GRASS", ["tackle"]),
    _creature_def("volt", "ELECTRIC", ["zap", "thunder_wave"]),
    _creature_def("rock", "EARTH", ["tackle"]),
]


def fixture_game_data() -> GameData:
    return GameData.from_entries(moves=FIXTURE_MOVES, creatures=FIXTURE_CREATURES)


def make_creature(
    instance_id: str,
    definition_id: str = "blob",
    hp: int = 100,
    max_hp: Optional[int] = None,
    atk: int = 100,
    def_: int = 100,
    spd: int = 100,
    moves: Sequence[str] = ("tackle",),
    status: Status = Status.NONE,
    status_turns: int = 0,
    cooldowns: Optional[Dict[str, int]] = None,
) -> CreatureInstance:
    return CreatureInstance(
        instance_id=instance_id,
        definition_id=definition_id,
        current_hp=hp,
        max_hp=max_hp if max_hp is not None else max(hp, 1),
        atk=atk,
        def_=def_,
        spd=spd,
        status=status,
        status_turns_remaining=status_turns,
        move_cooldowns=dict(cooldowns or {}),
        known_move_ids=tuple(moves),
    )
