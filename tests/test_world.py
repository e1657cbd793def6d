import math
import random
import struct

import pytest

from dirtworld.cell import CellFullError
from dirtworld.form import make_form, square_collider
from dirtworld.spawner import RecipeBook
from dirtworld.world import (
    World,
    make_dirt,
    make_inert,
    make_stone,
    save_dirt,
    save_form,
)


def _recipes():
    book = RecipeBook(3, 10)
    book.add(make_dirt, save_dirt, 1)
    book.add(make_stone, save_form, 2)
    return book


def _occupied(world):
    return {
        (x, y)
        for x in range(world.x)
        for y in range(world.y)
        if world.map[x][y].count > 0
    }


def test_make_inert():
    inert = make_inert()
    assert inert.id == 420
    assert inert.solid
    assert inert.size == (0, 0)
    assert inert.pos == [-1.0, -1.0]


def test_make_dirt_stats():
    dirt = make_dirt(15, rng=random.Random(0))
    assert dirt.id == 10
    assert dirt.get_stat("moisture") == pytest.approx(0.5)
    assert dirt.get_stat("hydroK") == 1
    assert 0 <= dirt.get_stat("tile") < 1


@pytest.mark.parametrize("value", range(10, 20))
def test_dirt_save_round_trip(value):
    assert save_dirt(make_dirt(value)) == value


def test_make_stone_and_save():
    stone = make_stone(0)
    assert stone.id == 20
    assert save_form(stone) == stone.id
    assert stone.get_stat("moisture") == 0


def test_place_point_form():
    world = World(5, 5)
    point = make_form(0, 0, 0, 0, 0)
    assert world.place_form(2.5, 3.2, point)
    assert point in world.map[2][3].forms
    assert not world.place_form(7, 1, make_form(0, 0, 0, 0, 0))


def test_place_block():
    world = World(5, 5)
    dirt = make_dirt(10)
    assert world.place_form(2, 3, dirt)
    assert dirt.pos == [2.0, 3.0]
    assert _occupied(world) == {(2, 3)}


def test_place_large_form_partly_outside():
    world = World(5, 5)
    big = make_form(0, 0, 0, 3, 3)
    assert not world.place_form(0, 0, big)
    assert big in world.map[0][0].forms
    assert big in world.map[1][1].forms


def test_remove_form_clears_every_cell():
    world = World(5, 5)
    big = make_form(0, 0, 0, 3, 3)
    assert world.place_form(2, 2, big)
    assert len(_occupied(world)) == len(big.body)
    world.remove_form(big)
    assert _occupied(world) == set()


def test_remove_form_pos():
    world = World(4, 4)
    dirt = make_dirt(10)
    world.place_form(1, 1, dirt)
    assert world.remove_form_pos(dirt, 1, 1) is dirt
    assert world.map[1][1].count == 0


def test_scan_cell_out_of_bounds_gives_inert():
    world = World(3, 3)
    found = world.scan_cell(-2, 1)
    assert found == [world.inert]
    assert world.inert.pos == [-2.0, 1.0]


def test_check_collision_solid_and_not():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 1, 1)
    world.place_form(1, 1, mover)
    ghost = make_form(0, 0, 0, 1, 1)
    ghost.solid = False
    world.place_form(3, 3, ghost)
    assert not world.check_collision(mover, 3, 3, True)
    assert world.check_collision(mover, 3, 3, False)
    assert not world.check_collision(mover, 1, 1, True)
    assert world.check_collision(mover, -1, 0, True)


def test_no_collide_ids_are_ignored():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 1, 1)
    world.place_form(2, 2, make_dirt(10))
    mover.set_no_collide([10])
    assert world.check_col(mover, 2, 2, True) == []
    assert not world.check_col_at_pos(mover, 2, 2, True)


def test_check_col_side_detects_ground():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 1, 1)
    world.place_form(2, 2, mover)
    world.place_form(2, 1, make_dirt(10))
    assert world.check_col_side(mover, 2, 2, 0, -1)
    assert not world.check_col_side(mover, 2, 2, 0, 1)
    assert world.check_col_side_at_pos(mover, 2, 2, 0, -1, True)
    assert not world.check_col_side_at_pos(mover, 2, 2, 1, 0, True)


def test_check_side_returns_distinct_forms():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 1, 1)
    world.place_form(2, 2, mover)
    ground = world.make_square(0, 0, 3)
    found = world.check_side(mover, 2, 3, 0, -1, True)
    assert found == [ground]
    assert world.check_side_i(mover, 2, 2, 1, True) == [ground]


def test_check_pos_and_pos_col():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 3, 3)
    stone = make_stone(0)
    world.place_form(2, 2, stone)
    assert world.check_pos(mover, 2, 2, True) == [stone]
    assert world.check_pos_col(mover, 2, 2)
    assert not world.check_pos_col(mover, 1, 3) or world.map[2][2].count == 1
    assert world.check_pos_col(mover, 0, 0)


def test_check_side_for_val():
    world = World(5, 5)
    mover = make_form(0, 0, 0, 1, 1)
    world.place_form(2, 2, mover)
    world.place_form(3, 2, make_dirt(12))
    assert world.check_side_for_val(mover, 2, 2, 1, 0, "moisture")
    assert not world.check_side_for_val(mover, 2, 2, -1, 0, "moisture")
    assert not world.check_side_for_val(mover, 0, 2, -1, 0, "moisture")


def test_check_collider_pos():
    world = World(5, 5)
    collider = square_collider(1, 1)
    assert not world.check_collider_pos(collider, 2, 2)
    world.place_form(2, 2, make_dirt(10))
    assert world.check_collider_pos(collider, 2, 2)
    assert world.check_collider_pos(collider, -1, 0)


def test_take_form_removes_solids():
    world = World(4, 4)
    dirt = make_dirt(10)
    ghost = make_form(0, 0, 0, 0, 0)
    ghost.solid = False
    world.place_form(1, 2, dirt)
    world.place_form(1, 2, ghost)
    assert world.take_form(1, 2) == [dirt]
    assert world.map[1][2].forms == [ghost]
    assert world.take_form(9, 9) == []


def test_form_ids_and_has_form_id():
    world = World(4, 4)
    world.place_form(0, 0, make_dirt(10))
    world.place_form(0, 0, make_stone(0))
    assert world.form_ids(0, 0) == [10, 20]
    assert world.has_form_id(0, 0, 20)
    assert not world.has_form_id(1, 0, 10)
    assert world.form_ids(-1, 0) is None


def test_cell_full_raises():
    world = World(2, 2)
    for _ in range(8):
        world.place_form(0, 0, make_form(0, 0, 0, 0, 0))
    with pytest.raises(CellFullError):
        world.place_form(0, 0, make_form(0, 0, 0, 0, 0))


def test_make_square_fills_inside():
    world = World(6, 6)
    world.make_square(1, 1, 3)
    assert _occupied(world) == {(2, 2), (2, 3), (3, 2), (3, 3)}


def test_make_stone_square_uses_separate_stones():
    world = World(6, 6)
    world.make_stone_square(0, 0, 3)
    stones = [world.map[x][y].forms[0] for x, y in _occupied(world)]
    assert len({id(s) for s in stones}) == len(stones)
    assert all(s.id == 20 for s in stones)


def test_make_circle_stays_within_radius():
    world = World(11, 11)
    world.make_circle(5, 5, 2)
    cells = _occupied(world)
    assert (5, 5) in cells
    assert (5, 7) in cells
    assert (7, 7) not in cells
    assert all(math.hypot(x - 5, y - 5) <= 2 for x, y in cells)


def test_dirt_floor_covers_bottom_row():
    world = World(10, 10)
    world.dirt_floor(3, random.Random(1))
    assert all(world.has_form_id(x, 0, 10) for x in range(world.x))
    assert not any(world.map[x][9].count for x in range(world.x))


def test_write_and_load_round_trip(tmp_path):
    world = World(5, 5)
    world.place_form(1, 1, make_dirt(17))
    world.place_form(3, 2, make_stone(0))
    path = tmp_path / "world.bin"
    assert world.write(path, _recipes()) == 2
    assert struct.unpack("<2i", path.read_bytes()[:8]) == (5, 5)

    loaded = World.load(path, _recipes())
    assert (loaded.x, loaded.y) == (5, 5)
    assert _occupied(loaded) == {(1, 1), (3, 2)}
    assert loaded.map[1][1].forms[0].get_stat("moisture") == pytest.approx(0.7)
    assert loaded.form_ids(3, 2) == [20]


def test_load_truncated_file(tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(struct.pack("<3i", 5, 5, 1))
    with pytest.raises(ValueError):
        World.load(path, _recipes())


def test_load_uneven_file(tmp_path):
    path = tmp_path / "odd.bin"
    path.write_bytes(b"\x01\x02\x03")
    with pytest.raises(ValueError):
        World.load(path, _recipes())


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        World.load(tmp_path / "none.bin", _recipes())


def test_delete_empties_world():
    world = World(4, 4)
    dirt = make_dirt(10)
    world.add_to_terrain(dirt)
    world.place_form(1, 1, dirt)
    world.place_form(2, 2, make_stone(0))
    world.delete()
    assert _occupied(world) == set()
    assert world.terrain == []
    assert dirt.terrain


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        World(-1, 3)