import pytest

from hexsurfaces.sim.hexmap import HexMap, HexPos, ItemCountMismatchError, OutOfBoundsError, wrap, wrap_hex_pos


def _build_map(width: int = 4, height: int = 3) -> HexMap[int]:
    return HexMap(width, height, range(width * height))


def test_wrap_stays_in_range_for_large_offsets() -> None:
    for n in (1, 2, 5, 16):
        for c in range(-5 * n - 3, 5 * n + 4):
            assert 0 <= wrap(c, n) < n


def test_wrap_is_identity_inside_range() -> None:
    for c in range(16):
        assert wrap(c, 16) == c


def test_wrap_is_periodic_and_handles_exact_multiples() -> None:
    for c in range(-40, 40):
        assert wrap(c + 7, 7) == wrap(c, 7)
    assert wrap(16, 16) == 0
    assert wrap(-16, 16) == 0
    assert wrap(-32, 16) == 0
    assert wrap(48, 16) == 0


def test_wrap_minus_one_is_last_index() -> None:
    assert wrap(-1, 16) == 15
    assert wrap(-1, 1) == 0
    assert wrap(-17, 16) == 15


def test_wrap_rejects_non_positive_axis() -> None:
    with pytest.raises(ValueError):
        wrap(3, 0)


def test_wrap_hex_pos_applies_each_axis() -> None:
    assert wrap_hex_pos(HexPos(q=-1, r=20), 16, 16) == HexPos(q=15, r=4)
    assert wrap_hex_pos(HexPos(q=3, r=-2), 5, 7) == HexPos(q=3, r=5)


def test_hex_pos_value_semantics() -> None:
    assert HexPos(1, 2) == HexPos(1, 2)
    assert len({HexPos(1, 2), HexPos(1, 2), HexPos(2, 1)}) == 2
    assert HexPos(1, 2).offset(-3, 1) == HexPos(-2, 3)
    assert HexPos.from_dict(HexPos(4, -5).to_dict()) == HexPos(4, -5)


def test_get_returns_row_major_item() -> None:
    hexmap = _build_map(width=4, height=3)

    for r in range(3):
        for q in range(4):
            assert hexmap.get(HexPos(q, r)) == q + r * 4

    assert len(hexmap) == 12


def test_construction_rejects_unbounded_source() -> None:
    def counter():
        i = 0
        while True:
            yield i
            i += 1

    with pytest.raises(ItemCountMismatchError):
        HexMap(2, 2, counter())


def test_construction_rejects_too_few_and_too_many_items() -> None:
    with pytest.raises(ItemCountMismatchError):
        HexMap(3, 3, range(8))
    with pytest.raises(ItemCountMismatchError):
        HexMap(3, 3, range(10))
    assert HexMap(3, 3, range(9)).get(HexPos(2, 2)) == 8


def test_construction_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError):
        HexMap(0, 3, [])
    with pytest.raises(ValueError):
        HexMap(2, -1, [])


@pytest.mark.parametrize("pos", [HexPos(-1, 0), HexPos(0, -1), HexPos(4, 0), HexPos(0, 3), HexPos(9, 9)])
def test_get_and_get_mut_reject_out_of_bounds(pos: HexPos) -> None:
    hexmap = _build_map(width=4, height=3)

    with pytest.raises(OutOfBoundsError):
        hexmap.get(pos)
    with pytest.raises(OutOfBoundsError):
        hexmap.get_mut(pos)
    with pytest.raises(OutOfBoundsError):
        hexmap.set(pos, 99)

    assert hexmap.tiles() == tuple(range(12))


def test_get_mut_edits_in_place_and_set_replaces() -> None:
    hexmap = HexMap(2, 1, [[1], [2]])

    hexmap.get_mut(HexPos(1, 0)).append(3)
    hexmap[HexPos(0, 0)] = [7]

    assert hexmap.get(HexPos(1, 0)) == [2, 3]
    assert hexmap[HexPos(0, 0)] == [7]


def test_get_wrapped_and_contains() -> None:
    hexmap = _build_map(width=4, height=3)

    assert hexmap.get_wrapped(HexPos(-1, -1)) == hexmap.get(HexPos(3, 2))
    assert hexmap.get_wrapped(HexPos(8, 4)) == hexmap.get(HexPos(0, 1))
    assert HexPos(3, 2) in hexmap
    assert HexPos(4, 2) not in hexmap
    assert "q" not in hexmap


def test_items_are_row_major() -> None:
    hexmap = _build_map(width=2, height=2)

    assert list(hexmap.items()) == [
        (HexPos(0, 0), 0),
        (HexPos(1, 0), 1),
        (HexPos(0, 1), 2),
        (HexPos(1, 1), 3),
    ]
