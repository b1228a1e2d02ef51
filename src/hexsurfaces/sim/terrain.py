from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hexsurfaces.sim.hexmap import HexMap, HexPos
from hexsurfaces.sim.movement import wrapped_neighbors
from hexsurfaces.sim.steps import Step
from hexsurfaces.sim.surfaces import Surfaces
from hexsurfaces.sim.tiles import TileData, TileKind
from hexsurfaces.sim.world import World

EROSION_INTERVAL_TICKS = 8


@dataclass
class SurfaceClock:
    tick: int = 0


class ClockStep(Step):
    """Counts completed ticks on the world's ``SurfaceClock``."""

    name = "clock"

    def initialize(self, world: World) -> None:
        if not world.contains_resource(SurfaceClock):
            world.insert_resource(SurfaceClock())

    def run(self, world: World) -> None:
        world.resource(SurfaceClock).tick += 1


class ErosionStep(Step):
    """Wears rock down where it touches water.

    On every ``interval_ticks``-th clock tick, rock next to water loses one
    height; rock already at height 0 turns into water. Without a
    ``SurfaceClock`` the step erodes on every run. Edits are queued during the
    scan and committed together, so a tile that erodes this run does not
    expose its neighbours until the next one.
    """

    name = "erosion"

    def __init__(self, interval_ticks: int = EROSION_INTERVAL_TICKS) -> None:
        if interval_ticks <= 0:
            raise ValueError("interval_ticks must be > 0")
        self.interval_ticks = interval_ticks
        self.eroded_total = 0

    def run(self, world: World) -> None:
        clock = world.get_resource(SurfaceClock)
        if clock is not None and clock.tick % self.interval_ticks != 0:
            return

        hexmap = world.hexmap
        targets = [pos for pos, tile in hexmap.items() if tile.kind == TileKind.ROCK and _touches_water(hexmap, pos)]
        for pos in targets:
            world.defer(_erode_command(pos))
        self.eroded_total += len(targets)


def _touches_water(hexmap: HexMap[TileData], pos: HexPos) -> bool:
    for neighbor in wrapped_neighbors(pos, hexmap.width, hexmap.height):
        if hexmap.get(neighbor).kind == TileKind.WATER:
            return True
    return False


def _erode_command(pos: HexPos) -> Callable[[World], Any]:
    def erode(world: World) -> None:
        tile: TileData = world.hexmap.get_mut(pos)
        if tile.height > 0:
            tile.height -= 1
        else:
            tile.kind = TileKind.WATER

    return erode


def register_demo_steps(surfaces: Surfaces) -> Surfaces:
    return surfaces.register_step(ClockStep).register_step(ErosionStep)
