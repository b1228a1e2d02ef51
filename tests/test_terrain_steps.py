import pytest

from hexsurfaces.sim.hash import surfaces_hash
from hexsurfaces.sim.hexmap import HexMap, HexPos
from hexsurfaces.sim.steps import step_factory
from hexsurfaces.sim.surfaces import Surfaces
from hexsurfaces.sim.terrain import ClockStep, ErosionStep, SurfaceClock, register_demo_steps
from hexsurfaces.sim.tiles import MAX_TILE_HEIGHT, TileData, TileKind, build_demo_map, demo_tiles
from hexsurfaces.sim.world import World


def _island_map() -> HexMap[TileData]:
    # 3x3 water with a single rock of height 1 in the middle.
    tiles = [TileData(height=0, kind=TileKind.WATER) for _ in range(9)]
    tiles[4] = TileData(height=1, kind=TileKind.ROCK)
    return HexMap(3, 3, tiles)


def _every_tick_erosion() -> ErosionStep:
    return ErosionStep(interval_ticks=1)


def test_demo_map_matches_seeding_rule() -> None:
    hexmap = build_demo_map()
    rocks = [pos for pos, tile in hexmap.items() if tile.kind == TileKind.ROCK]

    assert hexmap.width == 16 and hexmap.height == 16
    assert len(rocks) == 8
    # Tile i (1-based) lives at row-major index i - 1.
    assert rocks[0] == HexPos(101 % 16, 101 // 16)
    assert all(hexmap.get(pos).height == MAX_TILE_HEIGHT for pos in rocks)
    assert hexmap.get(HexPos(0, 0)) == TileData(height=1, kind=TileKind.WATER)


def test_demo_tiles_is_unbounded() -> None:
    stream = demo_tiles()
    first = [next(stream) for _ in range(300)]

    assert len(first) == 300


def test_tile_data_validation() -> None:
    with pytest.raises(ValueError):
        TileData(height=-1, kind=TileKind.WATER)
    with pytest.raises(ValueError):
        TileData(height=1, kind="rock")  # type: ignore[arg-type]
    assert TileKind.ROCK.material_name == "Rock"
    assert TileKind.WATER.color == (58, 110, 165)


def test_clock_step_counts_ticks_per_surface() -> None:
    surfaces = Surfaces()
    surfaces.register_surface(None, _island_map())
    surfaces.register_step(ClockStep)
    surfaces.advance_all()
    surfaces.register_surface(None, _island_map())
    surfaces.advance_all()

    assert surfaces.world(0).resource(SurfaceClock).tick == 2
    assert surfaces.world(1).resource(SurfaceClock).tick == 1


def test_erosion_wears_rock_then_floods_it() -> None:
    surfaces = Surfaces()
    surfaces.register_step(step_factory(_every_tick_erosion))
    surfaces.register_surface(None, _island_map())
    centre = HexPos(1, 1)

    surfaces.advance_all()
    assert surfaces.hexmap(0).get(centre) == TileData(height=0, kind=TileKind.ROCK)

    surfaces.advance_all()
    assert surfaces.hexmap(0).get(centre) == TileData(height=0, kind=TileKind.WATER)
    assert surfaces.pipeline(0).steps[0].eroded_total == 2


def test_erosion_commits_after_scan() -> None:
    # A solid rock row: no rock touches water, so nothing erodes.
    world = World()
    hexmap = HexMap(2, 1, [TileData(height=3, kind=TileKind.ROCK), TileData(height=3, kind=TileKind.ROCK)])
    world.insert_resource(hexmap, key=HexMap)

    step = ErosionStep(interval_ticks=1)
    step.run(world)

    assert world.pending_commands() == 0
    assert step.eroded_total == 0


def test_erosion_waits_for_clock_interval() -> None:
    surfaces = Surfaces()
    surfaces.register_step(ClockStep).register_step(step_factory(lambda: ErosionStep(interval_ticks=3)))
    surfaces.register_surface(None, _island_map())

    surfaces.advance_all()
    surfaces.advance_all()
    assert surfaces.hexmap(0).get(HexPos(1, 1)).height == 1

    surfaces.advance_all()
    assert surfaces.hexmap(0).get(HexPos(1, 1)).height == 0


def test_erosion_rejects_bad_interval() -> None:
    with pytest.raises(ValueError):
        ErosionStep(interval_ticks=0)


def test_identically_driven_registries_hash_equal() -> None:
    def build() -> Surfaces:
        surfaces = Surfaces()
        register_demo_steps(surfaces)
        surfaces.register_surface(None, build_demo_map())
        surfaces.register_surface(None, build_demo_map(8, 8))
        return surfaces

    a = build()
    b = build()
    for _ in range(20):
        a.advance_all()
        b.advance_all()

    assert surfaces_hash(a) == surfaces_hash(b)

    b.advance_all()
    assert surfaces_hash(a) != surfaces_hash(b)
