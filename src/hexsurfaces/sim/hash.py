from __future__ import annotations

import hashlib
import json
from typing import Any

from hexsurfaces.sim.hexmap import HexMap
from hexsurfaces.sim.surfaces import Surfaces


def _tile_payload(tile: Any) -> Any:
    to_dict = getattr(tile, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return repr(tile)


def hexmap_hash(hexmap: HexMap[Any]) -> str:
    payload = {
        "width": hexmap.width,
        "height": hexmap.height,
        "tiles": [_tile_payload(tile) for tile in hexmap.tiles()],
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def surfaces_hash(surfaces: Surfaces) -> str:
    payload = {
        "tick_count": surfaces.tick_count,
        "steps": surfaces.step_names(),
        "surfaces": [
            {
                "surface_id": surface_id,
                "pipeline": pipeline.step_names(),
                "hexmap": hexmap_hash(world.hexmap),
            }
            for surface_id, (pipeline, world) in enumerate(surfaces)
        ],
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()
