"""Forms: the things that occupy a world's cells, with their bodies, sides and stats."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

Point = tuple[int, int]

# Side order used everywhere: up, left, down, right.
DIRECTIONS: tuple[Point, ...] = ((0, 1), (-1, 0), (0, -1), (1, 0))


def _empty_sides() -> list[list[Point]]:
    return [[] for _ in DIRECTIONS]


def _open_sides(x: int, y: int, others: Iterable[Point]) -> list[bool]:
    """Which of the four sides of (x, y) are not covered by a neighbour in ``others``."""
    open_ = [True, True, True, True]
    for ox, oy in others:
        if x == ox and abs(y - oy) == 1:
            if y < oy:
                open_[0] = False
            else:
                open_[2] = False
        if y == oy and abs(x - ox) == 1:
            if x < ox:
                open_[3] = False
            else:
                open_[1] = False
    return open_


def square_body(wid: int, length: int) -> list[Point]:
    """Cell offsets of a ``wid`` by ``length`` rectangle around the origin."""
    wid, length = int(wid), int(length)
    # Even extents are shifted one cell towards the positive axis.
    shift_x = 1 if wid % 2 == 0 else 0
    shift_y = 1 if length % 2 == 0 else 0
    left = -(wid // 2)
    bottom = -(length // 2)
    return [
        (left + shift_x + x, bottom + shift_y + y)
        for x in range(wid)
        for y in range(length)
    ]


def square_sides(wid: int, length: int) -> list[list[Point]]:
    """The cells just outside each side of a rectangle made by :func:`square_body`."""
    wid, length = int(wid), int(length)
    shift_x = 1 if wid % 2 == 0 else 0
    shift_y = 1 if length % 2 == 0 else 0
    row_top = (length + shift_y) // 2 + 1
    row_bottom = -((length - shift_y) // 2 + 1)
    col_right = (wid + shift_x) // 2 + 1
    col_left = -((wid - shift_x) // 2 + 1)

    xs = [-(wid // 2) + i + shift_x for i in range(wid)]
    ys = [-(length // 2) + i + shift_y for i in range(length)]
    return [
        [(x, row_top) for x in xs],
        [(col_left, y) for y in ys],
        [(x, row_bottom) for x in xs],
        [(col_right, y) for y in ys],
    ]


def calc_sides(body: Iterable[Point]) -> list[list[Point]]:
    """Work out the outside cells on each side of an arbitrary body."""
    points = [tuple(p) for p in body]
    sides = _empty_sides()
    for i, (x, y) in enumerate(points):
        others = points[:i] + points[i + 1:]
        for direction, is_open in enumerate(_open_sides(x, y, others)):
            if is_open:
                dx, dy = DIRECTIONS[direction]
                sides[direction].append((x + dx, y + dy))
    return sides


@dataclass
class Collider:
    """A body shape that can be swapped onto a form."""

    size: tuple[int, int]
    sides: list[list[Point]]
    body: list[Point]

    @property
    def body_length(self) -> int:
        return len(self.body)


def square_collider(wid: int, length: int) -> Collider:
    """A rectangular collider."""
    return Collider(
        size=(int(wid), int(length)),
        sides=square_sides(wid, length),
        body=square_body(wid, length),
    )


@dataclass(eq=False)
class Form:
    """Anything that sits in the world: terrain blocks, players, clouds."""

    id: int = -1
    pos: list[float] = field(default_factory=lambda: [-1.0, -1.0])
    p_mod: list[float] = field(default_factory=lambda: [0.0, 0.0])
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    size: tuple[int, int] = (0, 0)
    body: list[Point] = field(default_factory=list)
    sides: list[list[Point]] = field(default_factory=_empty_sides)
    anim: Any = None
    stats: dict[str, float] = field(default_factory=dict)
    actor: Any = None
    col_matrix: Optional[tuple[int, ...]] = None
    solid: bool = True
    terrain: bool = False

    @property
    def body_length(self) -> int:
        return len(self.body)

    def add_to_body(self, growth: Iterable[Point]) -> None:
        """Grow the body by the given cells, skipping ones already in it, and update the sides."""
        existing = list(self.body)
        occupied = set(existing)
        added: list[Point] = []
        for x, y in growth:
            if (x, y) in occupied:
                continue
            for direction, is_open in enumerate(_open_sides(x, y, existing)):
                if not is_open:
                    continue
                dx, dy = DIRECTIONS[direction]
                point = (x + dx, y + dy)
                side = self.sides[direction]
                for k, (sx, sy) in enumerate(side):
                    x_diff = abs(point[0] - sx)
                    y_diff = abs(point[1] - sy)
                    if direction % 2 == 1:
                        moved = y_diff == 0 and x_diff == 1
                    else:
                        moved = x_diff == 0 and y_diff == 1
                    if moved:
                        side[k] = point
                        break
                else:
                    side.append(point)
            added.append((x, y))
        self.body.extend(added)

    def change_collider(self, collider: Collider) -> None:
        """Take on the shape of ``collider``."""
        self.body = collider.body
        self.sides = collider.sides
        self.size = collider.size

    def get_collider(self) -> Collider:
        """The form's current shape as a collider."""
        return Collider(size=self.size, sides=self.sides, body=self.body)

    def get_edge(self, side: int, d: int) -> int:
        """The first coordinate past the form on axis ``side``, towards the sign of ``d``."""
        half = self.size[side] // 2 + 1
        if d > 0:
            return int(self.pos[side] + half)
        return int(self.pos[side] - half)

    def delete(self) -> None:
        """Release the form and tell its actor it must go."""
        if self.actor is not None:
            self.actor.body = None
            self.actor.delete_me = True
            self.actor = None
        self.stats.clear()
        self.col_matrix = None
        self.anim = None
        self.body = []
        self.sides = _empty_sides()

    def same_as(self, other: Optional["Form"]) -> bool:
        """Two forms match when they share an id and a position."""
        if other is None:
            return False
        return (
            self.id == other.id
            and self.pos[0] == other.pos[0]
            and self.pos[1] == other.pos[1]
        )

    def is_center(self, x: int, y: int) -> bool:
        """Whether the form's anchor lies in cell (x, y)."""
        return math.floor(self.pos[0]) == x and self.pos[1] == y

    def set_no_collide(self, ids: Iterable[int]) -> Optional[tuple[int, ...]]:
        """Set the ids this form passes through; returns the previous set."""
        old = self.col_matrix
        ids = tuple(ids)
        self.col_matrix = ids if ids else None
        return old

    def can_collide(self, other: "Form") -> bool:
        if self.col_matrix is None:
            return True
        return other.id not in self.col_matrix

    def add_stat(self, key: str, value: float) -> None:
        """Add a stat unless one with that key already exists."""
        self.stats.setdefault(key, float(value))

    def get_stat(self, key: str) -> Optional[float]:
        return self.stats.get(key)

    def set_stat(self, key: str, value: float) -> None:
        """Change an existing stat; unknown keys are left alone."""
        if key in self.stats:
            self.stats[key] = float(value)


def make_form(r: float, g: float, b: float, wid: float, length: float) -> Form:
    """A rectangular form; zero width or length gives a point form with no body."""
    w, h = int(wid), int(length)
    form = Form(color=(r, g, b), size=(w, h))
    if w != 0 and h != 0:
        form.body = square_body(w, h)
        form.sides = square_sides(w, h)
    return form


def make_irregular_form(r: float, g: float, b: float, body: Iterable[Point]) -> Form:
    """A form with an arbitrary body; its sides are computed from the body."""
    points = [tuple(p) for p in body]
    form = Form(color=(r, g, b), size=(1, 1))
    if points:
        form.body = points
        form.sides = calc_sides(points)
    return form