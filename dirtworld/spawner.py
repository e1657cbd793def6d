"""Recipes that make and save forms, looked up by form id."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from dirtworld.form import Form


@dataclass(frozen=True)
class FormRecipe:
    """How to make a form from a saved id, and how to save it back to one."""

    make: Callable[[int], "Form"]
    save: Callable[["Form"], int]


class RecipeBook:
    """Recipes indexed by ``form_id // power``."""

    def __init__(self, number: int, power: int = 10) -> None:
        if number < 0:
            raise ValueError("number of recipes must not be negative")
        if power <= 0:
            raise ValueError("recipe power must be positive")
        self.power = power
        self._recipes: list[Optional[FormRecipe]] = [None] * number

    def __len__(self) -> int:
        return len(self._recipes)

    def add(
        self,
        make: Callable[[int], "Form"],
        save: Callable[["Form"], int],
        index: int,
    ) -> FormRecipe:
        """Register a recipe in slot ``index``."""
        if not 0 <= index < len(self._recipes):
            raise IndexError(f"recipe index {index} out of range")
        recipe = FormRecipe(make, save)
        self._recipes[index] = recipe
        return recipe

    def get(self, form_id: int) -> Optional[FormRecipe]:
        """The recipe for ``form_id``, or None if there is none."""
        if form_id > -1:
            index = form_id // self.power
            if index < len(self._recipes):
                return self._recipes[index]
        return None