from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from hexsurfaces.sim.hexmap import HexMap

DEFAULT_MAP_WIDTH = 16
DEFAULT_MAP_HEIGHT = 16
MAX_TILE_HEIGHT = 5


class TileKind(Enum):
    WATER = "water"
    ROCK = "rock"

    @property
    def material_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> tuple[int, int, int]:
        return TILE_COLORS[self]


TILE_COLORS: dict[TileKind, tuple[int, int, int]] = {
    TileKind.WATER: (58, 110, 165),
    TileKind.ROCK: (120, 116, 108),
}


@dataclass
class TileData:
    height: int
    kind: TileKind

    def __post_init__(self) -> None:
        if isinstance(self.height, bool) or not isinstance(self.height, int) or self.height < 0:
            raise ValueError("tile height must be a non-negative integer")
        if not isinstance(self.kind, TileKind):
            raise ValueError(f"invalid tile kind: {self.kind}")

    def to_dict(self) -> dict[str, object]:
        return {"height": self.height, "kind": self.kind.value}


def demo_tiles() -> Iterator[TileData]:
    """Endless tile stream; a sparse band of full-height rock in open water."""
    i = 0
    while True:
        i += 1
        if i % 6 == 0 and 100 < i < 150:
            yield TileData(height=MAX_TILE_HEIGHT, kind=TileKind.ROCK)
        else:
            yield TileData(height=i % (MAX_TILE_HEIGHT + 1), kind=TileKind.WATER)


def build_demo_map(width: int = DEFAULT_MAP_WIDTH, height: int = DEFAULT_MAP_HEIGHT) -> HexMap[TileData]:
    tiles = demo_tiles()
    return HexMap(width, height, (next(tiles) for _ in range(width * height)))
