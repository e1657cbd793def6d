"""Groundwater simulation: rain soaks surface dirt, the sun dries it, gravity drains it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from dirtworld.cell import Cell
    from dirtworld.form import Form
    from dirtworld.world import World

DIRT_ID = 10


def _first_solid(cell: "Cell") -> Optional["Form"]:
    solids = cell.solid_forms()
    return solids[0] if solids else None


class Groundwater:
    """Moves moisture between the dirt blocks of a world, a little every few ticks.

    ``t_hold_upper`` is the moisture above which a block passes water down,
    ``t_hold_lower`` the least moisture a block may have and still take water,
    ``sat`` the moisture of a fully soaked block, ``s_take`` how much the sun
    takes per step and ``g_pull`` how much gravity moves per step.  Water is
    updated every ``w_int`` ticks and it rains every ``r_int`` ticks.
    """

    t_hold_upper = 0.5
    t_hold_lower = 0.0
    sat = 1.0
    s_take = 0.02
    g_pull = 0.10
    w_int = 5
    r_int = 200

    def __init__(self, world: "World") -> None:
        self.world = world
        self.w_counter = 0
        self.r_counter = 0

    def tick(self) -> None:
        """Advance one tick; every ``w_int`` ticks update every dirt block."""
        self.w_counter += 1
        self.r_counter += 1
        if self.w_counter < self.w_int:
            return
        raining = self.r_counter >= self.r_int
        for x in range(self.world.x):
            for y in reversed(range(self.world.y)):
                if self.world.has_form_id(x, y, DIRT_ID):
                    self.evaporate(x, y)
                    self.gravity_pull(x, y)
                    if raining:
                        self.rain(x, y)
        if raining:
            self.r_counter = 0
        self.w_counter = 0

    def has_sky(self, x: int, y: int) -> bool:
        """Whether nothing solid lies above cell (x, y)."""
        column = self.world.map[x]
        return not any(column[yi].has_solid() for yi in range(y + 1, self.world.y))

    def rain(self, x: int, y: int) -> None:
        """Soak the solid forms at (x, y) if they are open to the sky."""
        cell = self.world.map[x][y]
        if not cell.has_solid() or not self.has_sky(x, y):
            return
        for form in cell.solid_forms():
            form.set_stat("moisture", self.sat)

    def evaporate(self, x: int, y: int) -> None:
        """Let the sun draw water from the bottom of the wet column under (x, y)."""
        if not self.has_sky(x, y):
            return
        column = self.world.map[x]
        depth = 0
        for yi in range(y):
            cell = column[yi]
            if cell.has_solid():
                stat = cell.get_stat("moisture")
                if stat is not None and stat > 0.01:
                    depth += 1
        form = _first_solid(column[y - depth])
        if form is None:
            return
        moisture = form.get_stat("moisture")
        if moisture is None:
            return
        if moisture >= self.s_take:
            form.set_stat("moisture", moisture - self.s_take)
        else:
            # Keeps a dry block from sitting at a value just under s_take.
            form.set_stat("moisture", 0.1)

    def gravity_pull(self, x: int, y: int) -> None:
        """Let water in a saturated block at (x, y) drain into the block below."""
        column = self.world.map[x]
        form = _first_solid(column[y])
        if form is None:
            return
        moisture = form.get_stat("moisture")
        k = form.get_stat("hydroK")
        if moisture is None or k is None:
            return
        flow = k * self.g_pull

        if y == 0:
            # Water drains out of the bottom of the world.
            if moisture - flow >= self.t_hold_upper:
                form.set_stat("moisture", moisture - flow)
            return

        below = _first_solid(column[y - 1])
        if below is None:
            return
        moisture_below = below.get_stat("moisture")
        if moisture_below is None:
            return
        if not (moisture > self.t_hold_upper and moisture_below >= self.t_hold_lower):
            return
        k_below = below.get_stat("hydroK")
        if k_below is None:
            return

        if moisture - flow >= self.t_hold_upper:
            form.set_stat("moisture", moisture - flow)
        else:
            form.set_stat("moisture", self.t_hold_upper)

        gain = k_below * self.g_pull
        if moisture_below + gain <= 1:
            below.set_stat("moisture", moisture_below + gain)
        else:
            below.set_stat("moisture", 1.0)