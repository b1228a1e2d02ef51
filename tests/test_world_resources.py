from dataclasses import dataclass

import pytest

from hexsurfaces.sim.hexmap import HexMap
from hexsurfaces.sim.world import DuplicateResourceError, MissingResourceError, World


@dataclass
class Weather:
    rain: int = 0


def test_resources_are_keyed_by_type() -> None:
    world = World(Weather(rain=2))

    assert world.contains_resource(Weather)
    assert world.resource(Weather).rain == 2
    assert world.get_resource(HexMap) is None


def test_duplicate_resource_is_rejected_without_replacing() -> None:
    original = Weather(rain=1)
    world = World(original)

    with pytest.raises(DuplicateResourceError):
        world.insert_resource(Weather(rain=5))

    assert world.resource(Weather) is original


def test_explicit_keys_allow_two_values_of_one_type() -> None:
    world = World()
    world.insert_resource(1, key="seed")
    world.insert_resource(2, key="season")

    assert world.resource("seed") == 1
    assert world.resource("season") == 2
    assert world.resource_keys() == ["seed", "season"]


def test_missing_resource_raises_key_error() -> None:
    world = World()

    with pytest.raises(MissingResourceError):
        world.resource(Weather)
    with pytest.raises(KeyError):
        _ = world.hexmap


def test_deferred_commands_apply_in_fifo_order() -> None:
    world = World(Weather())
    seen: list[int] = []

    def push(value: int):
        def command(target: World) -> None:
            seen.append(value)
            target.resource(Weather).rain = value

        return command

    world.defer(push(1))
    world.defer(push(2))
    assert world.pending_commands() == 2
    assert seen == []

    assert world.apply_deferred() == 2
    assert seen == [1, 2]
    assert world.resource(Weather).rain == 2
    assert world.pending_commands() == 0


def test_defer_rejects_non_callables() -> None:
    with pytest.raises(TypeError):
        World().defer("not a command")  # type: ignore[arg-type]


def test_hexmap_subclass_is_keyed_as_hexmap() -> None:
    class LabelledMap(HexMap[int]):
        pass

    world = World(LabelledMap(1, 1, [0]))

    assert world.contains_resource(HexMap)
    assert not world.contains_resource(LabelledMap)
    with pytest.raises(DuplicateResourceError):
        world.insert_resource(HexMap(1, 1, [1]))


def test_discard_deferred_keeps_the_oldest_commands() -> None:
    applied: list[str] = []
    world = World()
    world.defer(lambda w: applied.append("kept"))
    world.defer(lambda w: applied.append("dropped"))

    assert world.discard_deferred(keep=1) == 1
    assert world.apply_deferred() == 1
    assert applied == ["kept"]
