from __future__ import annotations

import math
from dataclasses import dataclass

from hexsurfaces.sim.hexmap import HexPos, wrap_hex_pos
from hexsurfaces.sim.movement import DEFAULT_GEOMETRY, HexGeometry, hex_pos_to_pos, pos_to_hex_pos

CAM_SPEED = 4.0
VIEW_MARGIN = 32.0


@dataclass
class CameraState:
    """Camera center in world space."""

    x: float = 0.0
    y: float = 0.0

    def hex_pos(self, geometry: HexGeometry = DEFAULT_GEOMETRY) -> HexPos:
        return pos_to_hex_pos(self.x, self.y, geometry)


def clamp_axis_pair(x: float, y: float) -> tuple[float, float]:
    """Clamp an input axis pair to the unit circle."""
    length = math.hypot(x, y)
    if length <= 1.0:
        return (x, y)
    return (x / length, y / length)


def move_camera(camera: CameraState, dx: float, dy: float, speed: float = CAM_SPEED) -> CameraState:
    if dx == 0.0 and dy == 0.0:
        return camera
    move_x, move_y = clamp_axis_pair(dx, dy)
    # Whole pixels only, so tile edges never shimmer.
    camera.x = float(math.trunc(camera.x + move_x * speed))
    camera.y = float(math.trunc(camera.y + move_y * speed))
    return camera


def wrap_camera(camera: CameraState, width: int, height: int, geometry: HexGeometry = DEFAULT_GEOMETRY) -> CameraState:
    """Teleport the camera onto the wrapped copy of its hex.

    The camera keeps its offset from the hex center, so the move is invisible
    on a toroidal map.
    """
    hex_pos = camera.hex_pos(geometry)
    wrapped = wrap_hex_pos(hex_pos, width, height)
    if hex_pos == wrapped:
        return camera
    snapped_x, snapped_y = hex_pos_to_pos(hex_pos, geometry)
    offset_x = snapped_x - camera.x
    offset_y = snapped_y - camera.y
    wrapped_x, wrapped_y = hex_pos_to_pos(wrapped, geometry)
    camera.x = wrapped_x - offset_x
    camera.y = wrapped_y - offset_y
    return camera


def visible_hex_positions(
    camera: CameraState,
    window_size: tuple[int, int],
    geometry: HexGeometry = DEFAULT_GEOMETRY,
    margin: float = VIEW_MARGIN,
) -> list[HexPos]:
    """Raw (unwrapped) hex positions whose centers fall inside the padded view."""
    start_x = camera.x - window_size[0] / 2.0 - margin
    end_x = camera.x + window_size[0] / 2.0 + margin
    start_y = camera.y - window_size[1] / 2.0 - margin
    end_y = camera.y + window_size[1] / 2.0 + margin

    positions: list[HexPos] = []
    q_min = math.floor(start_x / geometry.hex_width)
    q_max = math.ceil(end_x / geometry.hex_width)
    for q in range(q_min, q_max + 1):
        shift = q * geometry.column_shift
        r_min = math.floor((start_y - shift) / geometry.hex_height)
        r_max = math.ceil((end_y - shift) / geometry.hex_height)
        for r in range(r_min, r_max + 1):
            positions.append(HexPos(q, r))
    return positions


def screen_to_world(camera: CameraState, window_size: tuple[int, int], pixel: tuple[float, float]) -> tuple[float, float]:
    return (pixel[0] + camera.x - window_size[0] / 2.0, pixel[1] + camera.y - window_size[1] / 2.0)


def world_to_screen(camera: CameraState, window_size: tuple[int, int], world: tuple[float, float]) -> tuple[float, float]:
    return (world[0] - camera.x + window_size[0] / 2.0, world[1] - camera.y + window_size[1] / 2.0)


def picked_hex(
    camera: CameraState,
    window_size: tuple[int, int],
    cursor: tuple[float, float] | None,
    width: int,
    height: int,
    geometry: HexGeometry = DEFAULT_GEOMETRY,
) -> HexPos:
    """Wrapped hex under the cursor, or under the camera when there is no cursor."""
    if cursor is None:
        raw = pos_to_hex_pos(camera.x, camera.y, geometry)
    else:
        world_x, world_y = screen_to_world(camera, window_size, cursor)
        raw = pos_to_hex_pos(world_x, world_y, geometry)
    return wrap_hex_pos(raw, width, height)
