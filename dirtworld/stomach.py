"""Eating blocks in front of a form and pooping them out behind it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from dirtworld.actor import Action
from dirtworld.form import DIRECTIONS
from dirtworld.world import make_dirt

if TYPE_CHECKING:
    from dirtworld.form import Form
    from dirtworld.world import World

DIRT_ID = 10
POOP_MOISTURE = 5


@dataclass
class FormStack:
    """A run of eaten forms of one type."""

    type: int
    count: int = 1


@dataclass
class StomachVars:
    """What has been eaten, which way the eater faces, and bite timing."""

    world: Optional["World"] = None
    stomach: list[FormStack] = field(default_factory=list)
    direction: int = 0
    pooping: bool = False
    eating: bool = False
    bite: list[float] = field(default_factory=lambda: [0.0, 0.0])
    x_bite: int = 0
    y_bite: int = 0
    bite_counter: int = 0
    bite_interval: int = 1

    def change_dir(self, form: "Form", direction: int) -> None:
        """Face ``direction`` (0 up, 1 left, 2 down, 3 right) and size the bite to match."""
        self.direction = direction
        if direction % 2 == 0:
            self.x_bite = int(self.bite[0] - form.p_mod[0])
            self.y_bite = 1
        else:
            self.x_bite = 1
            self.y_bite = int(self.bite[1] - form.p_mod[1])

    def push(self, form: "Form") -> None:
        """Swallow ``form``; dirt is deleted, only its type is remembered."""
        for stack in self.stomach:
            if stack.type == form.id:
                stack.count += 1
                break
        else:
            self.stomach.append(FormStack(form.id, 1))
        if form.id == DIRT_ID:
            form.delete()

    def pop(self) -> Optional["Form"]:
        """Take one item from the oldest stack; dirt comes back as a fresh moist dirt block."""
        if not self.stomach:
            return None
        stack = self.stomach[0]
        stack.count -= 1
        kind = stack.type
        if stack.count == 0:
            self.stomach.pop(0)
        if kind == DIRT_ID:
            return make_dirt(POOP_MOISTURE)
        return None


def make_stomach(world: "World", form: "Form", bite_x: float, bite_y: float) -> Action:
    """An eating and pooping action for ``form``, initially facing right."""
    sv = StomachVars(world=world, bite=[bite_x, bite_y])
    sv.change_dir(form, 3)
    action = Action(stomach_stuff, sv)
    action.active = True
    return action


def _mouth(form: "Form", direction: int, parity: int) -> tuple[int, int]:
    dx, dy = DIRECTIONS[direction]
    if parity % 2 == 0:
        xc = int(form.pos[0] - (1 - form.p_mod[0]) + (form.size[0] // 2 + 1))
        yc = form.get_edge(1, dy)
    else:
        xc = form.get_edge(0, dx)
        yc = int(form.pos[1] - (1 - form.p_mod[1]) + (form.size[1] // 2 + 1))
    return xc, yc


def stomach_stuff(form: "Form", action: Action) -> int:
    sv: StomachVars = action.vars
    world = sv.world
    if sv.eating:
        if sv.bite_counter > sv.bite_interval:
            xc, yc = _mouth(form, sv.direction, sv.direction)
            for x in range(sv.x_bite):
                for y in range(sv.y_bite):
                    for food in world.take_form(xc - x, yc - y):
                        sv.push(food)
            sv.bite_counter = 0
        else:
            sv.bite_counter += 1
    elif sv.bite_counter != 0:
        sv.bite_counter = 0

    if sv.pooping:
        poo = sv.pop()
        if poo is not None:
            front = DIRECTIONS[sv.direction]
            butt_dir = (sv.direction + 2) % 4
            butt = DIRECTIONS[butt_dir]
            poop_good = True
            if world.check_col_side(form, form.pos[0], form.pos[1], *butt):
                if not world.check_col_side(form, form.pos[0], form.pos[1], *front):
                    world.remove_form(form)
                    world.place_form(form.pos[0] + front[0], form.pos[1] + front[1], form)
                else:
                    poop_good = False
            sv.push(poo)
            if poop_good:
                xc, yc = _mouth(form, butt_dir, sv.direction)
                done = False
                for x in range(sv.x_bite):
                    for y in range(sv.y_bite):
                        piece = sv.pop()
                        if piece is None:
                            done = True
                            break
                        world.place_form(xc - x, yc - y, piece)
                    if done:
                        break
    return 0