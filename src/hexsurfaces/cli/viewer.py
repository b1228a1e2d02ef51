from __future__ import annotations

import argparse
from typing import Sequence

from hexsurfaces.sim.hash import hexmap_hash
from hexsurfaces.sim.hexmap import HexPos
from hexsurfaces.sim.surfaces import CurrentHexMap, NoSuchSurfaceError, SelectedSurface, Surfaces
from hexsurfaces.sim.terrain import SurfaceClock, register_demo_steps
from hexsurfaces.sim.tiles import DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH, TileKind, build_demo_map

KIND_GLYPHS = {TileKind.WATER: "~", TileKind.ROCK: "#"}


class AsciiViewer:
    """Read-only projection of the selected surface for terminal display."""

    def render(self, surfaces: Surfaces, selected: SelectedSurface) -> str:
        current = CurrentHexMap(surfaces, selected)
        lines = [f"tick={surfaces.tick_count} surface={selected.index}/{len(surfaces)}"]
        if not current.is_valid():
            return "\n".join(lines + ["<no surface selected>"])

        world = current.world()
        hexmap = current.hexmap()
        clock = world.get_resource(SurfaceClock)
        if clock is not None:
            lines.append(f"surface_tick={clock.tick}")
        lines.append(f"steps={','.join(surfaces.pipeline(selected.index).step_names()) or '<none>'}")

        for r in range(hexmap.height):
            cells = []
            for q in range(hexmap.width):
                tile = hexmap.get(HexPos(q, r))
                cells.append(f"{KIND_GLYPHS.get(tile.kind, '?')}{tile.height}")
            lines.append(f"r={r:>2}: " + " ".join(cells))
        lines.append(f"map_hash={hexmap_hash(hexmap)[:12]}")
        return "\n".join(lines)


class SurfaceController:
    """Small command adapter; drives the registry but does not own it."""

    def __init__(self, surfaces: Surfaces, selected: SelectedSurface) -> None:
        self.surfaces = surfaces
        self.selected = selected

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            self.surfaces.advance_all()

    def select(self, index: int) -> bool:
        try:
            self.surfaces.surface(index)
        except NoSuchSurfaceError:
            return False
        self.selected.select(index)
        return True

    def cycle(self, delta: int = 1) -> int:
        return self.selected.cycle(self.surfaces, delta)


def build_demo_surfaces(
    surface_count: int = 1,
    width: int = DEFAULT_MAP_WIDTH,
    height: int = DEFAULT_MAP_HEIGHT,
) -> Surfaces:
    if surface_count <= 0:
        raise ValueError("surface_count must be > 0")
    surfaces = Surfaces()
    register_demo_steps(surfaces)
    for _ in range(surface_count):
        surfaces.register_surface(None, build_demo_map(width, height))
    return surfaces


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hexsurfaces-ascii", description="Terminal viewer for hexsurfaces.")
    parser.add_argument("--width", type=int, default=DEFAULT_MAP_WIDTH, help="Map width in hexes.")
    parser.add_argument("--height", type=int, default=DEFAULT_MAP_HEIGHT, help="Map height in hexes.")
    parser.add_argument("--surfaces", type=int, default=2, help="Number of surfaces to simulate.")
    return parser


def run_demo(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    surfaces = build_demo_surfaces(args.surfaces, args.width, args.height)
    selected = SelectedSurface(0)
    view = AsciiViewer()
    controller = SurfaceController(surfaces, selected)

    print("hexsurfaces demo. Commands: show | tick <n> | select <i> | next | quit")
    print(view.render(surfaces, selected))

    while True:
        raw = input("> ").strip()
        if raw in {"quit", "exit"}:
            break
        if raw == "show":
            print(view.render(surfaces, selected))
            continue
        if raw == "next":
            controller.cycle(1)
            print(view.render(surfaces, selected))
            continue

        parts = raw.split()
        if len(parts) == 2 and parts[0] == "tick":
            controller.advance(int(parts[1]))
            print(view.render(surfaces, selected))
            continue
        if len(parts) == 2 and parts[0] == "select":
            if not controller.select(int(parts[1])):
                print(f"no surface {parts[1]}")
                continue
            print(view.render(surfaces, selected))
            continue

        print("unknown command")


if __name__ == "__main__":
    run_demo()
