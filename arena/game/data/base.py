from dataclasses import dataclass, fields
from typing import Any, Dict, TypeVar

T = TypeVar("T", bound="GameDataObject")


@dataclass(frozen=True)
class GameDataObject:
    @classmethod
    def from_dict(cls: type[T], data: Dict[str, Any]) -> T:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown fields for {cls.__name__}: {', '.join(sorted(unknown))}"
            )
        return cls(**data)
