"""The world grid: placing forms, finding collisions, terrain helpers and saving."""

from __future__ import annotations

import math
import random
import struct
from pathlib import Path
from typing import Iterable, Optional, Protocol, Union

from dirtworld.cell import MAX_CELL_COUNT, Cell
from dirtworld.form import Collider, Form, make_form
from dirtworld.spawner import RecipeBook

DEFAULT_POWER = 10
INERT_ID = 420

_INT = struct.Struct("<i")


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _rng_or_default(rng: Optional[_RandomSource]) -> _RandomSource:
    return rng if rng is not None else random


def make_inert() -> Form:
    """The solid placeholder that stands for everything outside the world."""
    inert = make_form(0, 0, 0, 0, 0)
    inert.id = INERT_ID
    inert.solid = True
    inert.pos = [-1.0, -1.0]
    return inert


def make_dirt(
    moist: int,
    power: int = DEFAULT_POWER,
    rng: Optional[_RandomSource] = None,
) -> Form:
    """A dirt block; the last digit of ``moist`` sets its moisture in tenths."""
    dirt = make_form(0.7, 0.3, 0.1, 1, 1)
    dirt.id = 1 * power
    moist = int(moist)
    whole = int(moist / power) * power
    dirt.add_stat("moisture", (moist - whole) * 0.1)
    dirt.add_stat("hydroK", 1)
    dirt.add_stat("tile", _rng_or_default(rng).random())
    return dirt


def save_dirt(form: Form) -> int:
    """The saved value of a dirt block: its id plus its moisture in tenths."""
    moisture = form.get_stat("moisture") or 0.0
    return _clamp(int(form.id + moisture * 10), 10, 19)


def make_stone(value: int = 0, power: int = DEFAULT_POWER) -> Form:
    """A dry stone block."""
    stone = make_form(0.2, 0.3, 0.4, 1, 1)
    stone.id = 2 * power
    stone.add_stat("moisture", 0)
    stone.add_stat("hydroK", 1)
    stone.add_stat("tile", 1)
    return stone


def save_form(form: Form) -> int:
    """The saved value of a plain form is its id."""
    return form.id


def _is_point(form: Form) -> bool:
    return form.size[0] == 0 and form.size[1] == 0


class World:
    """A grid of cells holding forms."""

    def __init__(self, x: int, y: int) -> None:
        if x < 0 or y < 0:
            raise ValueError("world size must not be negative")
        self.x = int(x)
        self.y = int(y)
        self.map: list[list[Cell]] = [
            [Cell(i, j) for j in range(self.y)] for i in range(self.x)
        ]
        self.terrain: list[Form] = []
        self.inert = make_inert()
        self.out_of_bounds: list[Form] = [self.inert]

    def __repr__(self) -> str:
        return f"World(x={self.x}, y={self.y})"

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.x and 0 <= y < self.y

    def add_to_terrain(self, form: Form) -> None:
        form.terrain = True
        self.terrain.append(form)

    def delete(self) -> None:
        """Free every cell and delete the terrain forms."""
        for column in self.map:
            for cell in column:
                cell.free()
        for form in self.terrain:
            form.delete()
        self.terrain.clear()

    # placing and removing

    def place_form(self, x: float, y: float, form: Form) -> bool:
        """Put ``form`` at (x, y); returns whether all of it landed inside the world."""
        form.pos = [float(x), float(y)]
        fx, fy = math.floor(x), math.floor(y)
        if _is_point(form):
            if self.in_bounds(fx, fy):
                self.map[fx][fy].add(form)
                return True
            return False
        in_world = True
        for bx, by in form.body:
            xp, yp = fx + bx, fy + by
            if self.in_bounds(xp, yp):
                self.map[xp][yp].add(form)
            else:
                in_world = False
        return in_world

    def take_form(self, x: int, y: int) -> list[Form]:
        """Take the solid forms out of cell (x, y)."""
        if self.in_bounds(x, y):
            return self.map[x][y].take_solid()
        return []

    def remove_form_pos(self, form: Form, x: int, y: int) -> Optional[Form]:
        """Remove ``form`` from the single cell (x, y)."""
        if self.in_bounds(x, y):
            return self.map[x][y].remove(form)
        return None

    def remove_form(self, form: Form) -> Form:
        """Take ``form`` out of every cell it covers; its position is kept."""
        if _is_point(form):
            x, y = int(form.pos[0]), int(form.pos[1])
            if self.in_bounds(x, y):
                self.map[x][y].remove(form)
        elif form.pos[0] >= 0 and form.pos[1] >= 0:
            fx, fy = math.floor(form.pos[0]), math.floor(form.pos[1])
            for bx, by in form.body:
                xp, yp = fx + bx, fy + by
                if self.in_bounds(xp, yp):
                    self.map[xp][yp].remove(form)
        return form

    # looking at cells

    def scan_cell(self, x: int, y: int) -> list[Form]:
        """The forms in cell (x, y); outside the world, the inert placeholder."""
        if self.in_bounds(x, y):
            return list(self.map[x][y].forms)
        self.inert.pos = [float(x), float(y)]
        return list(self.out_of_bounds)

    def check_form(self, x: int, y: int, solid: bool) -> list[Form]:
        """The forms (or only the solid ones) at (x, y); the inert form outside the world."""
        if self.in_bounds(x, y):
            cell = self.map[x][y]
            return cell.solid_forms() if solid else list(cell.forms)
        self.inert.pos = [float(x), float(y)]
        return [self.inert]

    @staticmethod
    def _hits(form: Form, other: Form, solid: bool) -> bool:
        return (
            (other.solid or not solid)
            and not other.same_as(form)
            and form.can_collide(other)
        )

    def check_collision(self, form: Form, x: int, y: int, solid: bool) -> bool:
        """Whether anything at (x, y) blocks ``form``."""
        return any(self._hits(form, other, solid) for other in self.scan_cell(x, y))

    def check_col(self, form: Form, x: int, y: int, solid: bool) -> list[Form]:
        """The forms at (x, y) that ``form`` collides with."""
        return [
            other for other in self.check_form(x, y, solid)
            if self._hits(form, other, solid)
        ]

    def _add_collisions(
        self, found: list[Form], form: Form, x: int, y: int, solid: bool
    ) -> None:
        for other in self.check_col(form, x, y, solid):
            if not any(f is other for f in found):
                found.append(other)

    def check_col_at_pos(self, form: Form, x: int, y: int, solid: bool) -> bool:
        """Whether ``form`` would collide with anything if anchored at (x, y)."""
        if _is_point(form):
            return self.check_collision(form, x, y, True)
        return any(
            self.check_collision(form, x + bx, y + by, solid) for bx, by in form.body
        )

    def check_col_side_i(
        self, form: Form, xp: float, yp: float, direction: int, solid: bool
    ) -> bool:
        """Whether anything touches side ``direction`` of ``form`` anchored at (xp, yp)."""
        return any(
            self.check_collision(form, int(xp + sx), int(yp + sy), solid)
            for sx, sy in form.sides[direction]
        )

    def check_col_side_at_pos(
        self, form: Form, xp: float, yp: float, xd: int, yd: int, solid: bool
    ) -> bool:
        """Whether anything touches ``form`` on the sides facing (xd, yd)."""
        if xd != 0:
            side = 1 if xd < 0 else 3
            if self.check_col_side_i(form, xp, yp, side, solid):
                return True
        if yd != 0:
            side = 2 if yd < 0 else 0
            if self.check_col_side_i(form, xp, yp, side, solid):
                return True
        return False

    def check_pos_col(self, form: Form, x: int, y: int) -> bool:
        """Whether ``form`` anchored at (x, y) hits a solid form or leaves the world."""
        if _is_point(form):
            if self.in_bounds(x, y):
                return bool(self.check_col(form, x, y, True))
            return True
        for bx, by in form.body:
            xp, yp = x + bx, y + by
            if not self.in_bounds(xp, yp):
                return True
            if self.check_col(form, xp, yp, True):
                return True
        return False

    def check_pos(self, form: Form, x: int, y: int, solid: bool) -> list[Form]:
        """Every distinct form ``form`` would overlap if anchored at (x, y)."""
        if _is_point(form):
            return self.check_col(form, x, y, True)
        found: list[Form] = []
        for bx, by in form.body:
            self._add_collisions(found, form, x + bx, y + by, solid)
        return found

    def check_side_i(
        self, form: Form, xp: float, yp: float, direction: int, solid: bool
    ) -> list[Form]:
        """Every distinct form touching side ``direction`` of ``form``."""
        found: list[Form] = []
        for sx, sy in form.sides[direction]:
            self._add_collisions(found, form, int(xp + sx), int(yp + sy), solid)
        return found

    def check_side(
        self, form: Form, xp: float, yp: float, xd: int, yd: int, solid: bool
    ) -> list[Form]:
        """Every distinct form touching ``form`` on the sides facing (xd, yd)."""
        found: list[Form] = []
        if xd != 0:
            found = self.check_side_i(form, xp, yp, 1 if xd < 0 else 3, solid)
        if yd != 0:
            side = 2 if yd < 0 else 0
            for sx, sy in form.sides[side]:
                self._add_collisions(found, form, int(xp + sx), int(yp + sy), solid)
        return found

    def check_col_side(
        self, form: Form, xp: float, yp: float, xd: int, yd: int
    ) -> bool:
        """Whether a solid form touches ``form`` on the sides facing (xd, yd)."""
        sides: list[int] = []
        if xd != 0:
            sides.append(1 if xd < 0 else 3)
        if yd != 0:
            sides.append(2 if yd < 0 else 0)
        for side in sides:
            for sx, sy in form.sides[side]:
                hits = self.check_col(form, int(xp + sx), int(yp + sy), True)
                if any(not other.same_as(form) for other in hits):
                    return True
        return False

    def check_side_for_val(
        self, form: Form, xp: float, yp: float, xd: int, yd: int, stat: str
    ) -> bool:
        """Whether a form with stat ``stat`` touches ``form`` on the sides facing (xd, yd).

        Reaching the edge of the world ends the search with False.
        """
        sides: list[int] = []
        if xd != 0:
            sides.append(1 if xd < 0 else 3)
        if yd != 0:
            sides.append(2 if yd < 0 else 0)
        for side in sides:
            for sx, sy in form.sides[side]:
                xc, yc = int(xp + sx), int(yp + sy)
                if not self.in_bounds(xc, yc):
                    return False
                if any(f.get_stat(stat) is not None for f in self.map[xc][yc].forms):
                    return True
        return False

    def check_collider_pos(self, collider: Collider, x: int, y: int) -> bool:
        """Whether ``collider`` anchored at (x, y) hits a solid form or leaves the world."""
        for bx, by in collider.body:
            xp, yp = x + bx, y + by
            if not self.in_bounds(xp, yp):
                return True
            if self.check_form(xp, yp, True):
                return True
        return False

    def form_ids(self, x: int, y: int) -> Optional[list[int]]:
        """Ids of the forms in cell (x, y), or None outside the world."""
        if not self.in_bounds(x, y):
            return None
        return [f.id for f in self.map[x][y].forms[:MAX_CELL_COUNT]]

    def has_form_id(self, x: int, y: int, form_id: int) -> bool:
        ids = self.form_ids(x, y)
        return ids is not None and form_id in ids

    # terrain shapes

    def make_square(self, x: int, y: int, z: int) -> Form:
        """Fill the inside of a ``z`` square at (x, y) with one dirt form."""
        dirt = make_dirt(0)
        for i in range(1, z):
            for j in range(1, z):
                self.place_form(x + i, y + j, dirt)
        return dirt

    def make_stone_square(self, x: int, y: int, z: int) -> None:
        """Fill the inside of a ``z`` square at (x, y) with stone blocks."""
        for i in range(1, z):
            for j in range(1, z):
                self.place_form(x + i, y + j, make_stone(0))

    def make_circle(self, x: int, y: int, r: int) -> Form:
        """Fill a disc of radius ``r`` around (x, y) with one dirt form."""
        dirt = make_dirt(0)
        for i in range(x - r, x + r + 1):
            for j in range(y - r, y + r + 1):
                if math.hypot(x - i, y - j) <= r:
                    self.place_form(i, j, dirt)
        return dirt

    def dirt_floor(self, height: int, rng: Optional[_RandomSource] = None) -> Form:
        """Lay a bumpy dirt floor starting at ``height`` rows deep."""
        source = _rng_or_default(rng)
        dirt = make_dirt(0, rng=source)
        max_grow = 6
        for x in range(self.x):
            for y in range(height):
                self.place_form(x, y, dirt)
            if source.random() > 0.75:
                grow = int(source.random() * max_grow)
                if source.random() > 0.5:
                    grow = -grow
                height = _clamp(height + grow, 1, self.y - 1)
        return dirt

    # saving and loading

    def write(self, path: Union[str, Path], recipes: RecipeBook) -> int:
        """Save the world to ``path``; returns the number of cells written."""
        written = 0
        with open(path, "wb") as fh:
            fh.write(struct.pack("<2i", self.x, self.y))
            for column in self.map:
                for cell in column:
                    if cell.count == 0:
                        continue
                    record = cell.encode(recipes)
                    if record:
                        fh.write(struct.pack(f"<{len(record)}i", *record))
                        written += 1
        return written

    @classmethod
    def load(cls, path: Union[str, Path], recipes: RecipeBook) -> "World":
        """Build a world from a file made by :meth:`write`."""
        data = Path(path).read_bytes()
        if len(data) % _INT.size:
            raise ValueError("world file is not a whole number of integers")
        ints = [value for (value,) in _INT.iter_unpack(data)]
        if len(ints) < 2:
            raise ValueError("world file has no size header")
        world = cls(ints[0], ints[1])
        for px, py, residents in _records(ints[2:]):
            if not world.in_bounds(px, py):
                raise ValueError(f"cell ({px}, {py}) lies outside the world")
            for value in residents:
                recipe = recipes.get(value)
                if recipe is not None:
                    world.place_form(px, py, recipe.make(value))
        return world


def _records(ints: list[int]) -> Iterable[tuple[int, int, list[int]]]:
    i = 0
    while i < len(ints):
        count = ints[i]
        if count < 0 or i + 3 + count > len(ints):
            raise ValueError("world file ends in the middle of a cell")
        yield ints[i + 1], ints[i + 2], ints[i + 3:i + 3 + count]
        i += 3 + count