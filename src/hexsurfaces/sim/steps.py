from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hexsurfaces.sim.world import World

StepFactory = Callable[[], "Step"]


class Step:
    """One unit of per-tick simulation work.

    A step instance belongs to exactly one world. ``initialize`` is called once
    when the step joins that world's pipeline; ``run`` is called once per tick
    in pipeline order.
    """

    name: str = "step"

    def initialize(self, world: World) -> None:
        """Called once, immediately when the step is bound to a world."""

    def run(self, world: World) -> None:
        raise NotImplementedError


class FunctionStep(Step):
    """Adapts a plain ``func(world)`` callable to the ``Step`` interface."""

    def __init__(self, func: Callable[[World], Any], name: str | None = None) -> None:
        self.func = func
        self.name = name or getattr(func, "__name__", type(func).__name__)

    def run(self, world: World) -> None:
        self.func(world)


def as_step_factory(step: Any) -> StepFactory:
    """Normalise a Step subclass, a Step factory, or a plain function.

    The returned factory yields a fresh ``Step`` on every call so no two
    worlds ever share a step instance.
    """
    if isinstance(step, Step):
        raise TypeError("register a Step class or factory, not a shared Step instance")
    if isinstance(step, type):
        if not issubclass(step, Step):
            raise TypeError(f"{step.__name__} is not a Step subclass")
        return step
    if not callable(step):
        raise TypeError("step must be a Step subclass, a step factory, or a callable taking a world")
    if getattr(step, "__step_factory__", False):
        return step
    return _function_step_factory(step)


def step_factory(func: Callable[[], Step]) -> Callable[[], Step]:
    """Mark a zero-argument callable as a factory returning ``Step`` objects."""
    func.__step_factory__ = True  # type: ignore[attr-defined]
    return func


def _function_step_factory(func: Callable[[World], Any]) -> StepFactory:
    @step_factory
    def build() -> Step:
        return FunctionStep(func)

    build.name = getattr(func, "__name__", type(func).__name__)  # type: ignore[attr-defined]
    return build


class Pipeline:
    """Runs steps sequentially, applying deferred commands after each step."""

    def __init__(self) -> None:
        self.steps: list[Step] = []

    def __len__(self) -> int:
        return len(self.steps)

    def add_step(self, step: Step, world: World) -> "Pipeline":
        step.initialize(world)
        return self.append_initialized(step)

    def append_initialized(self, step: Step) -> "Pipeline":
        self.steps.append(step)
        return self

    def run_once(self, world: World) -> None:
        # Commands queued outside a tick land before the first step.
        world.apply_deferred()
        for step in self.steps:
            try:
                step.run(world)
            except Exception:
                world.discard_deferred()
                raise
            world.apply_deferred()

    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]


def build_step(factory: StepFactory) -> Step:
    step = factory()
    if not isinstance(step, Step):
        raise TypeError(f"step factory returned {type(step).__name__}, expected a Step")
    return step
