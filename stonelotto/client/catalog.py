"""Static stone table with payout classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class PayoutClass(str, Enum):
    NORMAL = "normal"
    DOUBLE = "double"
    TRIPLE = "triple"
    SUPER = "super"


@dataclass(frozen=True)
class Stone:
    id: int
    payout_class: PayoutClass = PayoutClass.NORMAL


SPECIAL_STONES: Mapping[int, PayoutClass] = MappingProxyType(
    {
        500: PayoutClass.DOUBLE,
        1000: PayoutClass.DOUBLE,
        3355: PayoutClass.TRIPLE,
        6624: PayoutClass.SUPER,
    }
)

# Board rows top to bottom; numbers repeated on the physical board appear once.
BOARD_ROWS: tuple[tuple[int, ...], ...] = (
    (29, 40, 32, 81, 7),
    (13, 64, 1000, 101, 4),
    (3355, 65, 12, 22, 9, 6624, 44),
    (28, 21, 105, 500, 99, 20, 82, 3),
    (11, 37, 72, 17, 42, 8, 30, 91, 27, 5),
    (6, 80, 26, 100, 19, 14, 43, 16, 71, 10),
)


class StoneCatalog:
    """Immutable lookup from stone id to stone."""

    def __init__(self, stones: Iterable[Stone]) -> None:
        table: dict[int, Stone] = {}
        for stone in stones:
            if stone.id in table:
                raise ValueError(f"Duplicate stone id {stone.id}")
            table[stone.id] = stone
        self._stones: Mapping[int, Stone] = MappingProxyType(table)

    def __contains__(self, stone_id: object) -> bool:
        return stone_id in self._stones

    def __len__(self) -> int:
        return len(self._stones)

    def get(self, stone_id: int) -> Stone | None:
        return self._stones.get(stone_id)

    def classify(self, stone_id: int) -> PayoutClass:
        """Return the payout class; ids that are not on the board pay normally."""
        stone = self._stones.get(stone_id)
        if stone is None:
            return PayoutClass.NORMAL
        return stone.payout_class

    def ids(self) -> list[int]:
        return list(self._stones)


def build_default_catalog() -> StoneCatalog:
    stones = [
        Stone(id=number, payout_class=SPECIAL_STONES.get(number, PayoutClass.NORMAL))
        for row in BOARD_ROWS
        for number in row
    ]
    return StoneCatalog(stones)


STONE_CATALOG = build_default_catalog()
