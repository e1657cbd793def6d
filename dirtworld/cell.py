"""A single grid cell and the forms inside it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from dirtworld.form import Form
    from dirtworld.spawner import RecipeBook

MAX_CELL_COUNT = 8


class CellFullError(Exception):
    """Raised when a form is added to a cell that cannot take any more."""


class Cell:
    """One square of the world map."""

    def __init__(self, x: int, y: int) -> None:
        self.pos = (int(x), int(y))
        self.color = (0.0, 0.0, 0.0)
        self.forms: list["Form"] = []

    def __repr__(self) -> str:
        return f"Cell(pos={self.pos}, count={self.count})"

    @property
    def count(self) -> int:
        return len(self.forms)

    @property
    def solid(self) -> int:
        """Number of solid forms in the cell."""
        return sum(1 for f in self.forms if f.solid)

    def add(self, form: "Form") -> bool:
        """Add ``form``; returns False if it was already here."""
        if form is None:
            raise ValueError(f"cannot add no form to cell {self.pos}")
        if self.count >= MAX_CELL_COUNT:
            raise CellFullError(
                f"cell {self.pos} already holds {MAX_CELL_COUNT} forms"
            )
        if any(f is form for f in self.forms):
            return False
        self.forms.append(form)
        return True

    def remove(self, form: "Form") -> Optional["Form"]:
        """Take ``form`` out; returns it, or None if it was not here."""
        for i, f in enumerate(self.forms):
            if f is form:
                del self.forms[i]
                return form
        return None

    def take_solid(self) -> list["Form"]:
        """Remove every solid form from the cell and return them."""
        taken = [f for f in self.forms if f.solid]
        self.forms = [f for f in self.forms if not f.solid]
        return taken

    def solid_forms(self) -> list["Form"]:
        """The solid forms in the cell, left in place."""
        return [f for f in self.forms if f.solid]

    def has_solid(self) -> bool:
        return any(f.solid for f in self.forms)

    def contents(self) -> list["Form"]:
        return list(self.forms)

    def get_stat(self, key: str) -> Optional[float]:
        """The stat ``key`` of the first solid form here, if it has one."""
        solids = self.solid_forms()
        if not solids:
            return None
        return solids[0].get_stat(key)

    def encode(self, recipes: "RecipeBook") -> list[int]:
        """Saved values for the forms anchored here: ``[count, x, y, *values]``.

        Returns an empty list when no form anchored here has a recipe.
        """
        x, y = self.pos
        values = []
        for form in self.forms:
            if not form.is_center(x, y):
                continue
            recipe = recipes.get(form.id)
            if recipe is not None:
                values.append(recipe.save(form))
        if not values:
            return []
        return [len(values), x, y, *values]

    def free(self) -> None:
        """Delete every non-terrain form here and empty the cell."""
        for form in list(self.forms):
            if not form.terrain:
                form.delete()
        self.forms.clear()