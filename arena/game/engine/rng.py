"""Seeded pseudorandom stream used for every probabilistic battle decision.

The generator is Mulberry32 implemented with explicit 32-bit masking so that
any implementation fed the same seed and the same call sequence produces the
same values, independent of platform float rounding.
"""

from typing import List, Sequence, TypeVar, Union

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296
_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def seed_from_string(text: str, initial: int = 0) -> int:
    """Derive a 32-bit seed from a string.

    Args:
        text: Any string, e.g. a match id
        initial: Starting hash value, e.g. a timestamp

    Returns:
        Unsigned 32-bit seed

    Example:
        >>> seed_from_string("battle-1") == seed_from_string("battle-1")
        True
    """
    value = initial & MASK_32
    for char in text:
        value = ((value << 5) - value + ord(char)) & MASK_32
    return value


def normalize_seed(seed: Union[int, str]) -> int:
    if isinstance(seed, str):
        return seed_from_string(seed)
    return seed & MASK_32


def turn_seed(battle_seed: Union[int, str], turn_number: int) -> int:
    """Per-turn seed: the battle seed offset by the turn being resolved."""
    return (normalize_seed(battle_seed) + turn_number) & MASK_32


def create_battle_seed(server_seed: str, player1_seed: str, player2_seed: str) -> int:
    """Combine server and player commitments into one battle seed."""
    return seed_from_string(f"{server_seed}:{player1_seed}:{player2_seed}")


class SeededRandom:
    """Deterministic random stream.

    Every method advances the stream by exactly one 32-bit draw, except
    `shuffle` which draws once per swap and `pick` which draws once.
    """

    def __init__(self, seed: Union[int, str]) -> None:
        self._state = normalize_seed(seed)

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        self._state = (self._state + _INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & MASK_32)) & MASK_32
        return (t ^ (t >> 14)) & MASK_32

    def uniform(self) -> float:
        """Float in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32

    def range_int(self, minimum: int, maximum: int) -> int:
        """Integer in [minimum, maximum], both inclusive."""
        if maximum < minimum:
            raise ValueError(f"Empty range: {minimum}..{maximum}")
        span = maximum - minimum + 1
        return minimum + ((self.next_uint32() * span) >> 32)

    def chance(self, probability: float) -> bool:
        return self.uniform() < probability

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self.range_int(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle returning a new list; the input is untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.range_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result
