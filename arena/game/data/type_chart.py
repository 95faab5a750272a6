import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Union

from arena.game.schema.enums import ElementType

CATALOG_DIR = Path(__file__).parent / "catalog"

ElementLike = Union[str, ElementType]

_KNOWN_ELEMENTS = frozenset(element.value.lower() for element in ElementType)


def _element_key(element: ElementLike) -> str:
    if isinstance(element, ElementType):
        return element.value.lower()
    return element.lower()


@dataclass(frozen=True)
class TypeChart:
    """Attacking element -> defending element -> damage multiplier.

    Pairs that the chart does not list are neutral (1.0).
    """

    effectiveness: Dict[str, Dict[str, float]]

    def get_effectiveness(
        self, attacking_type: ElementLike, defending_type: ElementLike
    ) -> float:
        attacking_key = _element_key(attacking_type)
        defending_key = _element_key(defending_type)

        if attacking_key not in _KNOWN_ELEMENTS:
            raise ValueError(f"Unknown attacking type: {attacking_type}")

        if defending_key not in _KNOWN_ELEMENTS:
            raise ValueError(f"Unknown defending type: {defending_type}")

        return self.effectiveness.get(attacking_key, {}).get(defending_key, 1.0)


def load_type_chart(path: Union[str, Path]) -> TypeChart:
    with open(path, "r") as f:
        data = json.load(f)
    return TypeChart(
        effectiveness={
            attacker.lower(): {
                defender.lower(): float(value) for defender, value in row.items()
            }
            for attacker, row in data["effectiveness"].items()
        }
    )


@lru_cache(maxsize=None)
def default_type_chart() -> TypeChart:
    return load_type_chart(CATALOG_DIR / "type_chart.json")


def type_effectiveness(attack_type: ElementLike, defender_type: ElementLike) -> float:
    """Damage multiplier for an attack element against a defender element.

    Pure helper over the packaged chart, usable for damage previews.

    Example:
        >>> type_effectiveness("FIRE", "GRASS")
        2.0
    """
    return default_type_chart().get_effectiveness(attack_type, defender_type)
