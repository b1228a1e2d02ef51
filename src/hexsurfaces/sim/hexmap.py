from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import islice
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_NO_TILE = object()


class ItemCountMismatchError(ValueError):
    """Raised when a map is built from the wrong number of tiles."""


class OutOfBoundsError(IndexError):
    """Raised when an unwrapped position falls outside the map."""


@dataclass(frozen=True, order=True)
class HexPos:
    """Axial hex coordinate (q, r)."""

    q: int
    r: int

    def offset(self, dq: int, dr: int) -> "HexPos":
        return HexPos(self.q + dq, self.r + dr)

    def to_dict(self) -> dict[str, int]:
        return {"q": self.q, "r": self.r}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HexPos":
        return cls(q=int(data["q"]), r=int(data["r"]))


def wrap(c: int, n: int) -> int:
    """Fold ``c`` onto ``[0, n)`` so that the axis behaves like a ring."""
    if n <= 0:
        raise ValueError("axis size must be > 0")
    if c >= n:
        return c % n
    if c < 0:
        return (n - 1) - ((-c - 1) % n)
    return c


def wrap_hex_pos(pos: HexPos, width: int, height: int) -> HexPos:
    return HexPos(q=wrap(pos.q, width), r=wrap(pos.r, height))


class HexMap(Generic[T]):
    """Fixed-size row-major tile storage addressed by ``HexPos``.

    Lookups never wrap on their own: callers normalise raw coordinates with
    :func:`wrap_hex_pos` (or :meth:`wrap`) first.
    """

    def __init__(self, width: int, height: int, items: Iterable[T]) -> None:
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise ValueError("width must be a positive integer")
        if isinstance(height, bool) or not isinstance(height, int) or height <= 0:
            raise ValueError("height must be a positive integer")

        expected = width * height
        source = iter(items)
        tiles = list(islice(source, expected))
        if len(tiles) < expected:
            raise ItemCountMismatchError(f"expected {expected} tiles for a {width}x{height} map, got {len(tiles)}")
        if next(source, _NO_TILE) is not _NO_TILE:
            raise ItemCountMismatchError(f"expected {expected} tiles for a {width}x{height} map, got more")

        self._width = width
        self._height = height
        self._tiles = tiles

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __len__(self) -> int:
        return len(self._tiles)

    def __repr__(self) -> str:
        return f"HexMap(width={self._width}, height={self._height})"

    def contains(self, pos: HexPos) -> bool:
        return 0 <= pos.q < self._width and 0 <= pos.r < self._height

    def __contains__(self, pos: object) -> bool:
        return isinstance(pos, HexPos) and self.contains(pos)

    def wrap(self, pos: HexPos) -> HexPos:
        return wrap_hex_pos(pos, self._width, self._height)

    def _index(self, pos: HexPos) -> int:
        if not self.contains(pos):
            raise OutOfBoundsError(
                f"hex ({pos.q},{pos.r}) outside {self._width}x{self._height} map; wrap coordinates first"
            )
        return pos.q + pos.r * self._width

    def get(self, pos: HexPos) -> T:
        return self._tiles[self._index(pos)]

    def get_mut(self, pos: HexPos) -> T:
        # Same slot as get(); mutable tile objects are edited in place.
        return self._tiles[self._index(pos)]

    def get_wrapped(self, pos: HexPos) -> T:
        return self._tiles[self._index(self.wrap(pos))]

    def set(self, pos: HexPos, value: T) -> None:
        self._tiles[self._index(pos)] = value

    def __getitem__(self, pos: HexPos) -> T:
        return self.get(pos)

    def __setitem__(self, pos: HexPos, value: T) -> None:
        self.set(pos, value)

    def iter_positions(self) -> Iterator[HexPos]:
        for r in range(self._height):
            for q in range(self._width):
                yield HexPos(q, r)

    def items(self) -> Iterator[tuple[HexPos, T]]:
        for pos in self.iter_positions():
            yield pos, self._tiles[pos.q + pos.r * self._width]

    def tiles(self) -> tuple[T, ...]:
        return tuple(self._tiles)
