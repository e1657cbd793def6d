"""Movement actions: momentum-based moving, player control, gravity and jumping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from dirtworld.actor import Action

if TYPE_CHECKING:
    from dirtworld.form import Form
    from dirtworld.world import World

TERMINAL_VELOCITY = -10
GRAVITY_FORCE = 1


def sign(value: float) -> int:
    """-1, 0 or 1 according to the sign of ``value``."""
    return (value > 0) - (value < 0)


@dataclass
class MoveVars:
    """Force and deceleration state of a moving form."""

    world: Optional["World"] = None
    speed_counter: int = 0
    speed: int = 0
    max_force: int = 0
    dir: list[int] = field(default_factory=lambda: [0, 0])
    force: list[int] = field(default_factory=lambda: [0, 0])
    mass: int = 10
    force_counter: list[int] = field(default_factory=lambda: [0, 0])
    decel: list[int] = field(default_factory=lambda: [0, 0])
    decel_counter: list[int] = field(default_factory=lambda: [0, 0])
    decel_speed: list[int] = field(default_factory=lambda: [10, 0])

    def decelerate(self) -> None:
        """Bleed force towards zero on each axis, every ``decel`` ticks."""
        for i in range(2):
            if self.force[i] == 0:
                continue
            if self.decel_counter[i] >= self.decel[i]:
                if self.force[i] > 0:
                    self.force[i] = max(self.force[i] - self.decel_speed[i], 0)
                else:
                    self.force[i] = min(self.force[i] + self.decel_speed[i], 0)
                self.decel_counter[i] = 0
            else:
                self.decel_counter[i] += 1

    def add_force(self, x: int, y: int) -> None:
        self.force[0] += x
        self.force[1] += y

    def set_force(self, x: int, y: int) -> None:
        """Set the force on each axis; a negative value leaves that axis alone."""
        if x >= 0:
            self.force[0] = x
        if y >= 0:
            self.force[1] = y

    def set_decel(self, axis: int, interval: int, speed: int) -> None:
        """Set deceleration for axis 0 or 1, or for both axes for any other value."""
        axes = (axis,) if axis in (0, 1) else (0, 1)
        for i in axes:
            self.decel[i] = interval
            self.decel_speed[i] = speed


def make_move(world: "World") -> Action:
    """An action that moves its form according to the force in its :class:`MoveVars`."""
    action = Action(move, MoveVars(world=world))
    action.active = True
    return action


def move(form: "Form", action: Action) -> int:
    mv: MoveVars = action.vars
    world = mv.world
    if mv.force[0] != 0:
        step = sign(mv.force[0])
        total = mv.force_counter[0] + abs(mv.force[0])
        speed = total // mv.mass
        mv.force_counter[0] = total % mv.mass
        if not world.check_col_side_at_pos(form, form.pos[0], form.pos[1], step, 0, True):
            form.p_mod[0] = (mv.force_counter[0] / mv.mass) * step
        else:
            form.p_mod[0] = 0.0
        for _ in range(speed):
            target = int(form.pos[0] + step)
            if not world.check_col_side_at_pos(form, form.pos[0], form.pos[1], step, 0, True):
                world.remove_form(form)
                world.place_form(target, form.pos[1], form)
    if mv.force[1] != 0:
        step = sign(mv.force[1])
        total = mv.force_counter[1] + abs(mv.force[1])
        speed = total // mv.mass
        mv.force_counter[1] = total % mv.mass
        for _ in range(speed):
            target = int(form.pos[1] + step)
            if not world.check_col_side_at_pos(form, form.pos[0], form.pos[1], 0, step, True):
                world.remove_form(form)
                world.place_form(form.pos[0], target, form)
    mv.decelerate()
    return 0


@dataclass
class ControlVars:
    """Which way the player is pushing, and for how many ticks."""

    move: Optional[MoveVars] = None
    move_left: int = 0
    move_right: int = 0
    mr_count: int = 0
    ml_count: int = 0


def make_control(move_vars: Optional[MoveVars] = None) -> Action:
    """An action that turns held left/right input into force on ``move_vars``."""
    return Action(control, ControlVars(move=move_vars))


def control(form: "Form", action: Action) -> int:
    cv: ControlVars = action.vars
    move_x = cv.move_right - cv.move_left
    cv.mr_count = cv.mr_count + 1 if cv.move_right == 1 else 0
    cv.ml_count = cv.ml_count + 1 if cv.move_left == 1 else 0
    if move_x != 0 and (cv.mr_count > 3 or cv.ml_count > 3):
        mv = cv.move
        push = mv.speed * move_x
        if abs(mv.force[0] + push) <= mv.max_force:
            mv.add_force(push, 0)
    return 0


@dataclass
class GravityVars:
    """Gravity state; friction slows falling while touching a wall."""

    world: Optional["World"] = None
    move: Optional[MoveVars] = None
    side_col: int = 1
    friction: int = 20
    fric_count: int = 0


def make_gravity(world: "World", move_vars: MoveVars) -> Action:
    """An action that pulls its form down by adding force to ``move_vars``."""
    action = Action(gravity, GravityVars(world=world, move=move_vars))
    action.active = True
    return action


def gravity(form: "Form", action: Action) -> int:
    gv: GravityVars = action.vars
    world = gv.world
    mv = gv.move
    x, y = form.pos
    touching_wall = world.check_col_side_at_pos(
        form, x, y, -1, 0, True
    ) or world.check_col_side_at_pos(form, x, y, 1, 0, True)
    gv.side_col = 0 if touching_wall else 1
    if not world.check_col_side_at_pos(form, x, y, 0, -1, True):
        if gv.fric_count >= gv.friction * gv.side_col:
            if mv.force[1] >= TERMINAL_VELOCITY * mv.mass + GRAVITY_FORCE:
                mv.add_force(0, -GRAVITY_FORCE)
            gv.fric_count = 0
        else:
            gv.fric_count += 1
    return 0


@dataclass
class JumpVars:
    """Jump progress: rising towards ``jp_goal`` and then falling back."""

    world: Optional["World"] = None
    move: Optional[MoveVars] = None
    grav: Optional[Action] = None
    cur_jp: int = 0
    jp_goal: int = 0
    max_jp: int = 4
    jump_pow: int = 5
    jump_count: int = 0
    jump_max: int = 2


def make_jump(world: "World", move_vars: MoveVars, gravity_action: Action) -> Action:
    """An inactive jump action; :func:`start_jump` switches it on."""
    action = Action(jump, JumpVars(world=world, move=move_vars, grav=gravity_action))
    action.active = False
    return action


def start_jump(form: Optional["Form"], action: Action) -> int:
    """Begin a jump unless the form has used up its jumps."""
    jv: JumpVars = action.vars
    if jv.jump_count < jv.jump_max:
        jv.jp_goal = jv.max_jp
        jv.cur_jp = 0
        jv.move.set_force(-1, 0)
        jv.grav.active = False
        action.active = True
        jv.jump_count += 1
    return 0


def jump(form: "Form", action: Action) -> int:
    jv: JumpVars = action.vars
    direction = 0
    if jv.cur_jp != jv.jp_goal:
        direction = sign(jv.jp_goal - jv.cur_jp)
        jv.cur_jp += direction
    elif jv.jp_goal > 0:
        jv.jp_goal = 0
    else:
        jv.grav.active = True
        world = jv.world
        x, y = form.pos
        if (
            world.check_col_side(form, x, y, 0, -1)
            or world.check_col_side(form, x, y, 1, 0)
            or world.check_col_side(form, x, y, -1, 0)
        ):
            action.active = False
            jv.jump_count = 0
    if direction != 0:
        jv.move.add_force(0, direction * jv.jump_pow)
    return 0