import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from arena.game.data.creature import CreatureDefinition
from arena.game.data.move import Move
from arena.game.data.type_chart import CATALOG_DIR, TypeChart, load_type_chart
from arena.game.schema.enums import ElementType

T = TypeVar("T")


class GameData:
    """Read-only lookup over the static move and creature catalog.

    Instances are passed into the engine explicitly so tests can build small
    fixture catalogs with `from_entries` instead of loading the packaged one.
    """

    def __init__(
        self,
        moves: Dict[str, Move],
        creatures: Dict[str, CreatureDefinition],
        type_chart: TypeChart,
    ) -> None:
        self._moves_lookup = moves
        self._creatures_lookup = creatures
        self._type_chart = type_chart

    @classmethod
    def load(cls, data_dir: Union[str, Path] = CATALOG_DIR) -> "GameData":
        """Load moves.json, creatures.json and type_chart.json from a directory."""
        data_dir = Path(data_dir)
        return cls(
            moves=cls._load_lookup_data(data_dir / "moves.json", Move),
            creatures=cls._load_lookup_data(
                data_dir / "creatures.json", CreatureDefinition
            ),
            type_chart=load_type_chart(data_dir / "type_chart.json"),
        )

    @classmethod
    def from_entries(
        cls,
        moves: Iterable[Dict[str, Any]],
        creatures: Iterable[Dict[str, Any]] = (),
        type_chart: Optional[TypeChart] = None,
    ) -> "GameData":
        if type_chart is None:
            type_chart = load_type_chart(CATALOG_DIR / "type_chart.json")
        return cls(
            moves={cls._normalize_key(m["id"]): Move.from_dict(m) for m in moves},
            creatures={
                cls._normalize_key(c["id"]): CreatureDefinition.from_dict(c)
                for c in creatures
            },
            type_chart=type_chart,
        )

    @staticmethod
    def _normalize_key(name: str) -> str:
        return name.lower().replace(" ", "_").replace("-", "_")

    @classmethod
    def _load_lookup_data(cls, path: Path, data_cls: Type[T]) -> Dict[str, T]:
        with open(path, "r") as f:
            data = json.load(f)
        return {
            cls._normalize_key(entry["id"]): data_cls.from_dict(entry)  # type: ignore
            for entry in data
        }

    def get_move(self, move_id: str) -> Move:
        move = self.find_move(move_id)
        if move is None:
            raise ValueError(f"Move not found: {move_id}")
        return move

    def find_move(self, move_id: str) -> Optional[Move]:
        return self._moves_lookup.get(self._normalize_key(move_id))

    def get_creature(self, definition_id: str) -> CreatureDefinition:
        key = self._normalize_key(definition_id)
        if key not in self._creatures_lookup:
            raise ValueError(f"Creature not found: {definition_id}")
        return self._creatures_lookup[key]

    def element_of(self, definition_id: str) -> ElementType:
        """Element of a creature definition; unknown definitions are NEUTRAL."""
        definition = self._creatures_lookup.get(self._normalize_key(definition_id))
        if definition is None:
            return ElementType.NEUTRAL
        return definition.element

    def get_type_chart(self) -> TypeChart:
        return self._type_chart

    def list_move_ids(self) -> List[str]:
        return sorted(self._moves_lookup)

    def list_creature_ids(self) -> List[str]:
        return sorted(self._creatures_lookup)


@lru_cache(maxsize=None)
def default_game_data() -> GameData:
    return GameData.load()
