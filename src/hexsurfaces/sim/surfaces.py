from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from hexsurfaces.sim.hexmap import HexMap
from hexsurfaces.sim.steps import Pipeline, Step, StepFactory, as_step_factory, build_step
from hexsurfaces.sim.world import DuplicateResourceError, World


class NoSuchSurfaceError(LookupError):
    """Raised when a surface index does not name a registered surface."""

    def __init__(self, index: int, surface_count: int) -> None:
        super().__init__(f"no surface at index {index}; {surface_count} registered")
        self.index = index
        self.surface_count = surface_count


class Surfaces:
    """Registry of independently simulated worlds sharing one step list.

    Every surface owns its world and a pipeline with one step instance per
    registered step factory, in registration order. Steps registered after a
    surface exists are appended to that surface's pipeline; surfaces created
    later are seeded from the full factory history.
    """

    def __init__(self) -> None:
        self._surfaces: list[tuple[Pipeline, World]] = []
        self._step_factories: list[StepFactory] = []
        self._step_names: list[str] = []
        self.tick_count = 0

    def __len__(self) -> int:
        return len(self._surfaces)

    def __iter__(self) -> Iterator[tuple[Pipeline, World]]:
        return iter(self._surfaces)

    def register_surface(self, world: World | None, initial_map: HexMap[Any]) -> int:
        if not isinstance(initial_map, HexMap):
            raise TypeError("initial_map must be a HexMap")
        world = World() if world is None else world
        if world.contains_resource(HexMap):
            raise DuplicateResourceError("world passed to register_surface already contains a HexMap")

        snapshot = _snapshot(world)
        world.insert_resource(initial_map, key=HexMap)
        pipeline = Pipeline()
        try:
            for factory in self._step_factories:
                pipeline.add_step(build_step(factory), world)
        except Exception:
            _rollback(world, snapshot)
            raise

        self._surfaces.append((pipeline, world))
        return len(self._surfaces) - 1

    # No remove_surface: surface ids are list indices and stay stable.

    def register_step(self, step: Any) -> "Surfaces":
        """Register ``step`` for every existing surface and all future ones.

        ``step`` may be a ``Step`` subclass, a factory decorated with
        :func:`hexsurfaces.sim.steps.step_factory`, or a plain ``func(world)``.
        """
        factory = as_step_factory(step)

        staged: list[tuple[Pipeline, Step]] = []
        snapshots = []
        try:
            for pipeline, world in self._surfaces:
                snapshots.append((world, _snapshot(world)))
                new_step = build_step(factory)
                new_step.initialize(world)
                staged.append((pipeline, new_step))
        except Exception:
            for world, snapshot in snapshots:
                _rollback(world, snapshot)
            raise
        for pipeline, new_step in staged:
            pipeline.append_initialized(new_step)

        self._step_factories.append(factory)
        self._step_names.append(_factory_name(factory, staged))
        return self

    def advance_all(self) -> None:
        for pipeline, world in self._surfaces:
            pipeline.run_once(world)
        self.tick_count += 1

    def surface(self, index: int) -> tuple[Pipeline, World]:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._surfaces):
            raise NoSuchSurfaceError(index, len(self._surfaces))
        return self._surfaces[index]

    def world(self, index: int) -> World:
        return self.surface(index)[1]

    def pipeline(self, index: int) -> Pipeline:
        return self.surface(index)[0]

    def hexmap(self, index: int) -> HexMap[Any]:
        return self.world(index).hexmap

    def surface_ids(self) -> list[int]:
        return list(range(len(self._surfaces)))

    def step_names(self) -> list[str]:
        return list(self._step_names)


def _factory_name(factory: StepFactory, staged: list[tuple[Pipeline, Step]]) -> str:
    if staged:
        return staged[0][1].name
    name = getattr(factory, "name", None)
    if isinstance(name, str):
        return name
    return getattr(factory, "__name__", type(factory).__name__)


def _snapshot(world: World) -> tuple[set[Any], int]:
    return set(world.resource_keys()), world.pending_commands()


def _rollback(world: World, snapshot: tuple[set[Any], int]) -> None:
    """Remove resources and queued commands added to ``world`` since ``snapshot``."""
    keys, pending = snapshot
    for key in world.resource_keys():
        if key not in keys:
            world.remove_resource(key)
    world.discard_deferred(keep=pending)


@dataclass
class SelectedSurface:
    """Index of the surface shown by viewers; owned by the viewer layer."""

    index: int = 0

    def select(self, index: int) -> None:
        self.index = index

    def cycle(self, surfaces: Surfaces, delta: int = 1) -> int:
        if len(surfaces) == 0:
            raise NoSuchSurfaceError(self.index + delta, 0)
        self.index = (self.index + delta) % len(surfaces)
        return self.index


class CurrentHexMap:
    """Read access to the selected surface's map for render/camera code."""

    def __init__(self, surfaces: Surfaces, selected: SelectedSurface) -> None:
        self.surfaces = surfaces
        self.selected = selected

    def is_valid(self) -> bool:
        return 0 <= self.selected.index < len(self.surfaces)

    def world(self) -> World:
        return self.surfaces.world(self.selected.index)

    def hexmap(self) -> HexMap[Any]:
        return self.surfaces.hexmap(self.selected.index)
