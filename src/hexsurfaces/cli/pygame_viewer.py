from __future__ import annotations

import argparse
import importlib.metadata
import os
import platform
import sys
from typing import Any

from hexsurfaces.cli.camera import (
    CameraState,
    move_camera,
    picked_hex,
    visible_hex_positions,
    world_to_screen,
    wrap_camera,
)
from hexsurfaces.cli.viewer import SurfaceController, build_demo_surfaces
from hexsurfaces.sim.hash import surfaces_hash
from hexsurfaces.sim.hexmap import HexPos
from hexsurfaces.sim.movement import DEFAULT_GEOMETRY, HexGeometry, hex_pos_to_pos
from hexsurfaces.sim.surfaces import CurrentHexMap, SelectedSurface, Surfaces
from hexsurfaces.sim.tiles import DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH

WINDOW_SIZE = (1280, 800)
SIM_TICK_SECONDS = 0.25
BACKGROUND_COLOR = (17, 18, 25)
OUTLINE_COLOR = (35, 35, 40)
HIGHLIGHT_COLOR = (220, 60, 60)
FRAME_RATE = 60

pygame: Any | None = None


def hex_points(center: tuple[float, float], geometry: HexGeometry = DEFAULT_GEOMETRY) -> list[tuple[float, float]]:
    """Flat-top hexagon corners that tile the staggered-column layout exactly."""
    cx, cy = center
    w = geometry.hex_width
    half_h = geometry.hex_height / 2.0
    return [
        (cx + w * 2.0 / 3.0, cy),
        (cx + w / 3.0, cy + half_h),
        (cx - w / 3.0, cy + half_h),
        (cx - w * 2.0 / 3.0, cy),
        (cx - w / 3.0, cy - half_h),
        (cx + w / 3.0, cy - half_h),
    ]


def tile_color(tile: Any, *, selected: bool) -> tuple[int, int, int]:
    if selected:
        return HIGHLIGHT_COLOR
    base = tile.kind.color
    # Taller tiles read lighter.
    lift = min(tile.height, 5) * 8
    return (min(base[0] + lift, 255), min(base[1] + lift, 255), min(base[2] + lift, 255))


def _draw_surface(
    screen: Any,
    current: CurrentHexMap,
    camera: CameraState,
    cursor: tuple[int, int] | None,
) -> HexPos:
    hexmap = current.hexmap()
    selected_hex = picked_hex(camera, WINDOW_SIZE, cursor, hexmap.width, hexmap.height)
    for raw_pos in visible_hex_positions(camera, WINDOW_SIZE):
        wrapped_pos = hexmap.wrap(raw_pos)
        tile = hexmap.get(wrapped_pos)
        center = world_to_screen(camera, WINDOW_SIZE, hex_pos_to_pos(raw_pos))
        points = hex_points(center)
        pygame.draw.polygon(screen, tile_color(tile, selected=wrapped_pos == selected_hex), points)
        pygame.draw.polygon(screen, OUTLINE_COLOR, points, 1)
    return selected_hex


def _draw_hud(screen: Any, font: Any, surfaces: Surfaces, selected: SelectedSurface, selected_hex: HexPos, paused: bool) -> None:
    tile = surfaces.hexmap(selected.index).get(selected_hex)
    lines = [
        f"surface={selected.index}/{len(surfaces)} | tick={surfaces.tick_count} | {'paused' if paused else 'running'}",
        f"hex q={selected_hex.q},r={selected_hex.r} | {tile.kind.material_name} h={tile.height}",
        "WASD move | TAB next surface | SPACE pause | N step | ESC quit",
    ]
    y = 12
    for line in lines:
        rendered = font.render(line, True, (240, 240, 240))
        screen.blit(rendered, (12, y))
        y += 24


def _current_input_vector() -> tuple[float, float]:
    keys = pygame.key.get_pressed()
    x = 0.0
    y = 0.0
    if keys[pygame.K_w]:
        y -= 1.0
    if keys[pygame.K_s]:
        y += 1.0
    if keys[pygame.K_a]:
        x -= 1.0
    if keys[pygame.K_d]:
        x += 1.0
    return (x, y)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hexsurfaces-viewer",
        description="Run the hexsurfaces pygame viewer.",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_MAP_WIDTH, help="Map width in hexes.")
    parser.add_argument("--height", type=int, default=DEFAULT_MAP_HEIGHT, help="Map height in hexes.")
    parser.add_argument("--surfaces", type=int, default=2, help="Number of independently simulated surfaces.")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver for CI/testing and exit without opening a real window.",
    )
    return parser


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[hexsurfaces.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )
    for name in ("SDL_VIDEODRIVER", "SDL_AUDIODRIVER"):
        value = os.environ.get(name, "<unset>")
        print(f"[hexsurfaces.viewer] env {name}={value}")


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def run_pygame_viewer(
    *,
    width: int = DEFAULT_MAP_WIDTH,
    height: int = DEFAULT_MAP_HEIGHT,
    surface_count: int = 2,
    headless: bool = False,
) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[hexsurfaces.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()

    try:
        surfaces = build_demo_surfaces(surface_count, width, height)
    except ValueError as exc:
        print(f"[hexsurfaces.viewer] failed to initialize surfaces: {exc}", file=sys.stderr)
        return 1

    selected = SelectedSurface(0)
    controller = SurfaceController(surfaces, selected)
    current = CurrentHexMap(surfaces, selected)

    pygame_module = _ensure_pygame_imported()
    try:
        pygame_module.init()
    except Exception as exc:
        print(
            "[hexsurfaces.viewer] failed during pygame.init(): "
            f"{exc}. Hint: set SDL_VIDEODRIVER=dummy for headless mode.",
            file=sys.stderr,
        )
        return 1

    try:
        pygame_module.display.set_caption("hexsurfaces")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            "[hexsurfaces.viewer] failed during pygame.display.set_mode(...): "
            f"{exc}. Hint: use --headless or HEXSURFACES_HEADLESS=1 without a display.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    print(f"[hexsurfaces.viewer] display initialized: {pygame_module.display.get_driver()}, window size={WINDOW_SIZE}")

    if headless:
        controller.advance(1)
        print(f"[hexsurfaces.viewer] tick={surfaces.tick_count} surfaces_hash={surfaces_hash(surfaces)}")
        pygame_module.quit()
        return 0

    font = pygame_module.font.SysFont("consolas", 18)
    clock = pygame_module.time.Clock()
    camera = CameraState()
    accumulator = 0.0
    paused = False
    running = True

    while running:
        accumulator += clock.tick(FRAME_RATE) / 1000.0
        for event in pygame_module.event.get():
            if event.type == pygame_module.QUIT:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_TAB:
                controller.cycle(1)
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_SPACE:
                paused = not paused
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_n:
                controller.advance(1)

        move_x, move_y = _current_input_vector()
        move_camera(camera, move_x, move_y)
        hexmap = current.hexmap()
        wrap_camera(camera, hexmap.width, hexmap.height)

        while accumulator >= SIM_TICK_SECONDS:
            if not paused:
                controller.advance(1)
            accumulator -= SIM_TICK_SECONDS

        cursor = pygame_module.mouse.get_pos() if pygame_module.mouse.get_focused() else None
        screen.fill(BACKGROUND_COLOR)
        selected_hex = _draw_surface(screen, current, camera, cursor)
        _draw_hud(screen, font, surfaces, selected, selected_hex, paused)
        pygame_module.display.flip()

    print(f"[hexsurfaces.viewer] exit tick={surfaces.tick_count} surfaces_hash={surfaces_hash(surfaces)}")
    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    headless = args.headless or _env_flag_enabled("HEXSURFACES_HEADLESS")
    raise SystemExit(
        run_pygame_viewer(
            width=args.width,
            height=args.height,
            surface_count=args.surfaces,
            headless=headless,
        )
    )


if __name__ == "__main__":
    main()
