"""Map generation: integer grids describing terrain, and turning them into worlds."""

from __future__ import annotations

import random
import struct
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, Union

from dirtworld.world import make_dirt, make_stone

if TYPE_CHECKING:
    from dirtworld.world import World

Grid = list[list[int]]

SPACE = 0
DIRT = 10
SAT_VAL = 9
RAIN_INC = 11


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def array_to_file(path: Union[str, Path], grid: Grid) -> None:
    """Write ``grid`` column by column as 32-bit little-endian integers."""
    with open(path, "wb") as fh:
        for column in grid:
            fh.write(struct.pack(f"<{len(column)}i", *column))


def file_to_array(path: Union[str, Path], size_x: int, size_y: int) -> Grid:
    """Read a grid written by :func:`array_to_file`; missing data reads as zero."""
    grid = gen_map(size_x, size_y)
    try:
        data = Path(path).read_bytes()
    except OSError:
        return grid
    usable = len(data) - len(data) % 4
    values = [v for (v,) in struct.iter_unpack("<i", data[:usable])]
    for i, value in enumerate(values[: size_x * size_y]):
        grid[i // size_y][i % size_y] = value
    return grid


def gen_map(size_x: int, size_y: int) -> Grid:
    """An empty grid of ``size_x`` columns of ``size_y`` cells."""
    return [[SPACE] * size_y for _ in range(size_x)]


def hill_world(size_x: int, size_y: int, rng: Optional[_RandomSource] = None) -> Grid:
    """Rolling dirt hills whose height wanders from column to column."""
    source = rng if rng is not None else random
    grid = gen_map(size_x, size_y)
    max_grow = size_y // 3
    height = size_y // 5
    for x in range(size_x):
        for y in range(height):
            grid[x][y] = DIRT
        if source.random() > 0.75:
            grow = int(source.random() * max_grow)
            if source.random() > 0.5:
                grow = -grow
            height = _clamp(height + grow, 1, size_y - size_y // 5)
    return grid


def square_world(size_x: int, size_y: int) -> Grid:
    """A block of dirt in the middle half of the map."""
    grid = gen_map(size_x, size_y)
    width = size_x // 2
    height = size_y // 2
    for x in range(width - width // 2, width + width // 2):
        for y in range(height - height // 2, height + height // 2):
            grid[x][y] = DIRT
    return grid


def gen_rain(grid: Grid) -> Grid:
    """Soak the top dirt of each column and let some water seep down; changes ``grid``."""
    for column in grid:
        blocksum = 0
        for y in range(len(column) - 2, -1, -1):
            above = column[y + 1]
            blocksum += above
            if column[y] == DIRT and blocksum == 0:
                column[y] += SAT_VAL
            if column[y] == DIRT and above > DIRT:
                column[y] += above - RAIN_INC
    return grid


def fill_world(world: "World") -> None:
    """Fill every cell of ``world`` with dry dirt, with a stone in the middle."""
    for x in range(world.x):
        for y in range(world.y):
            if x == world.x // 2 and y == world.y // 2:
                world.place_form(x, y, make_stone(0))
            else:
                world.place_form(x, y, make_dirt(0))


def gen_world(world: "World", grid: Grid) -> None:
    """Place a dirt block in ``world`` for every grid value from 10 to 19."""
    for x in range(world.x):
        for y in range(world.y):
            value = grid[x][y]
            if DIRT <= value <= DIRT + 9:
                world.place_form(x, y, make_dirt(value - 9))


def world_to_map(world: "World") -> Grid:
    """A grid of the solid forms anchored in each cell; dirt carries its moisture."""
    grid = gen_map(world.x, world.y)
    for x, column in enumerate(world.map):
        for y, cell in enumerate(column):
            for form in cell.solid_forms():
                if not form.is_center(x, y):
                    continue
                value = form.id
                if form.id == DIRT:
                    moisture = form.get_stat("moisture") or 0.0
                    value = _clamp(value + int(moisture * 10 + 1e-6), 10, 19)
                grid[x][y] = value
                break
    return grid