from __future__ import annotations

import math
from dataclasses import dataclass

from hexsurfaces.sim.hexmap import HexPos, wrap_hex_pos

HEX_WIDTH = 32.0
HEX_HEIGHT = 32.0

AXIAL_DIRECTIONS: tuple[HexPos, ...] = (
    HexPos(1, 0),
    HexPos(1, -1),
    HexPos(0, -1),
    HexPos(-1, 0),
    HexPos(-1, 1),
    HexPos(0, 1),
)


@dataclass(frozen=True)
class HexGeometry:
    """Staggered-column layout shared by every world-space conversion.

    Columns sit ``hex_width`` apart and each column is shifted up by half a
    hex per step in ``q``.
    """

    hex_width: float = HEX_WIDTH
    hex_height: float = HEX_HEIGHT

    def __post_init__(self) -> None:
        if self.hex_width <= 0 or self.hex_height <= 0:
            raise ValueError("hex_width and hex_height must be > 0")
        if float(self.hex_height).is_integer() and int(self.hex_height) % 2 != 0:
            raise ValueError("integral hex_height must be even so column shifts stay on whole pixels")

    @property
    def column_shift(self) -> float:
        return self.hex_height / 2.0


DEFAULT_GEOMETRY = HexGeometry()


def hex_pos_to_pos(pos: HexPos, geometry: HexGeometry = DEFAULT_GEOMETRY) -> tuple[float, float]:
    """Hex center in world space."""
    x = pos.q * geometry.hex_width
    y = pos.r * geometry.hex_height + pos.q * geometry.column_shift
    return (x, y)


def pos_to_hex_pos(x: float, y: float, geometry: HexGeometry = DEFAULT_GEOMETRY) -> HexPos:
    """Nearest hex for a world-space point (not screen space).

    Points exactly halfway between two centers resolve toward +infinity on
    that axis.
    """
    q = math.floor(x / geometry.hex_width + 0.5)
    column_y = y - q * geometry.column_shift
    r = math.floor(column_y / geometry.hex_height + 0.5)
    return HexPos(q=int(q), r=int(r))


def hex_neighbors(pos: HexPos) -> tuple[HexPos, ...]:
    return tuple(HexPos(pos.q + delta.q, pos.r + delta.r) for delta in AXIAL_DIRECTIONS)


def wrapped_neighbors(pos: HexPos, width: int, height: int) -> tuple[HexPos, ...]:
    """Neighbours folded onto a ``width`` x ``height`` torus."""
    return tuple(wrap_hex_pos(neighbor, width, height) for neighbor in hex_neighbors(pos))


def axial_distance(a: HexPos, b: HexPos) -> int:
    dq = a.q - b.q
    dr = a.r - b.r
    ds = (-a.q - a.r) - (-b.q - b.r)
    return int((abs(dq) + abs(dr) + abs(ds)) / 2)
