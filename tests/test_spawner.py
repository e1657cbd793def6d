import pytest

from dirtworld.form import make_form
from dirtworld.spawner import FormRecipe, RecipeBook


def _make(form_id):
    form = make_form(1, 1, 1, 1, 1)
    form.id = form_id
    return form


def _save(form):
    return form.id


def test_get_by_id_bucket():
    book = RecipeBook(3, 10)
    recipe = book.add(_make, _save, 1)
    assert isinstance(recipe, FormRecipe)
    assert book.get(10) is recipe
    assert book.get(19) is recipe
    assert book.get(20) is None


def test_negative_and_out_of_range_ids():
    book = RecipeBook(3, 10)
    book.add(_make, _save, 0)
    assert book.get(-1) is None
    assert book.get(30) is None
    assert book.get(0) is not None and book.get(0).make is _make


def test_recipe_round_trip():
    book = RecipeBook(3, 10)
    book.add(_make, _save, 2)
    recipe = book.get(25)
    form = recipe.make(25)
    assert recipe.save(form) == 25


def test_default_power():
    book = RecipeBook(3)
    assert book.power == 10
    assert len(book) == 3


def test_add_out_of_range():
    book = RecipeBook(2, 10)
    with pytest.raises(IndexError):
        book.add(_make, _save, 2)


def test_invalid_power():
    with pytest.raises(ValueError):
        RecipeBook(2, 0)


def test_replacing_recipe():
    book = RecipeBook(1, 10)
    book.add(_make, _save, 0)
    second = book.add(_make, lambda f: -f.id, 0)
    assert book.get(5) is second
    assert book.get(5).save(_make(5)) == -5