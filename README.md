# dirtworld

A small library for tile-based sandbox worlds. A `World` is a grid of
`Cell`s. Each cell holds `Form`s, which can be single blocks of dirt or
stone or larger bodies that cover several cells. Actors give forms
behaviour by running `Action`s every tick. The library provides these
behaviours: movement with force and deceleration, player-style left/right
control, gravity, jumping, and a stomach that eats blocks in front of a
form and puts them down behind it. It also simulates groundwater and
generates simple maps.

The library has no dependencies outside the standard library.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Modules

- `dirtworld.form`: `Form` and `Collider`, plus the geometry helpers
  `make_form`, `make_irregular_form`, `square_body`, `square_sides`,
  `calc_sides` and `square_collider`.
  - Each form keeps named stats through `add_stat`, `get_stat` and
    `set_stat`. `set_stat` leaves unknown keys alone.
  - A form can be told which ids it passes through with `set_no_collide`
    and `can_collide`.
- `dirtworld.spawner`: `RecipeBook` and `FormRecipe`. A recipe pairs a make
  function with a save function. Recipes are looked up by
  `form_id // power`.
- `dirtworld.cell`: `Cell`. A cell holds at most eight forms and raises
  `CellFullError` when another form is added to a full cell.
- `dirtworld.actor`: `Action`, `Actor` and `ActorList`. `ActorList.do_all`
  deletes actors that were marked with `destroy()` and runs the active
  actors.
- `dirtworld.world`: `World`. It places and removes forms, answers
  collision queries such as `check_col`, `check_pos`, `check_side` and
  `check_col_side_at_pos`, and builds terrain shapes with `make_square`,
  `make_stone_square`, `make_circle` and `dirt_floor`. It saves a world with
  `write` and rebuilds one with `World.load`. The module also has the form
  helpers `make_dirt`, `save_dirt`, `make_stone`, `save_form` and
  `make_inert`.
- `dirtworld.movement`: `make_move`, `make_control`, `make_gravity` and
  `make_jump`, with their state classes `MoveVars`, `ControlVars`,
  `GravityVars` and `JumpVars`. Call `start_jump` to begin a jump.
- `dirtworld.stomach`: `make_stomach` and `StomachVars`. While `eating` is
  set, the form digs solid blocks in the direction it faces. While
  `pooping` is set, it puts dirt back down behind it.
- `dirtworld.eco`: `Groundwater`. On each call to `tick()` it counts one
  tick. Every fifth tick it evaporates and drains moisture in every dirt
  block. Every 200th tick it also rains on blocks that are open to the sky.
- `dirtworld.procgen`: the grid generators `gen_map`, `hill_world`,
  `square_world` and `gen_rain`. It also converts between grids and worlds
  with `gen_world`, `fill_world` and `world_to_map`, and reads and writes
  grids as raw integers with `array_to_file` and `file_to_array`.

## Example: terrain and groundwater

```python
from dirtworld.world import World
from dirtworld.procgen import square_world, gen_world
from dirtworld.eco import Groundwater

world = World(100, 100)
gen_world(world, square_world(100, 100))

water = Groundwater(world)
for _ in range(1000):
    water.tick()
```

## Example: a falling actor

```python
from dirtworld.actor import Actor, ActorList
from dirtworld.form import make_form
from dirtworld.movement import make_move, make_gravity
from dirtworld.world import World

world = World(20, 20)
world.dirt_floor(3)

body = make_form(0.2, 1.0, 0.2, 3, 3)
world.place_form(10, 15, body)

actor = Actor(body)
move = make_move(world)
actor.add_action(move)
actor.add_action(make_gravity(world, move.vars))

actors = ActorList()
actors.add(actor)
for _ in range(200):
    actors.do_all()
```

## Saving and loading

```python
from dirtworld.spawner import RecipeBook
from dirtworld.world import World, make_dirt, save_dirt, make_stone, save_form

recipes = RecipeBook(3, 10)
recipes.add(make_dirt, save_dirt, 1)
recipes.add(make_stone, save_form, 2)

world.write("world.bin", recipes)
loaded = World.load("world.bin", recipes)
```

The file is made of little-endian 32-bit integers:

- It starts with the world's width and height.
- After that comes one record per cell that has saved forms:
  `count, x, y` followed by `count` saved values.

Only forms whose recipe is in the book are written, and only in the cell
that holds their anchor. `World.load` raises `ValueError` if the file is
truncated or malformed.

## What this package does not do

This is a simulation library only. It does not draw anything and does not
read keyboard or gamepad input. It has no sound, menus or command to start
a game. Any program that wants those has to provide them and drive the
world and its actors itself.

## Running the tests

```
pytest
```