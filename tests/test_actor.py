import pytest

from dirtworld.actor import Action, Actor, ActorList
from dirtworld.form import make_form


def _counting_action():
    calls = []

    def fun(form, action):
        calls.append((form, action))
        return 0

    return Action(fun, {"n": 1}), calls


def test_action_defaults():
    action = Action()
    assert action.active is True
    assert action.vars is None
    assert action.run(None) == 0


def test_action_run_passes_form_and_self():
    action, calls = _counting_action()
    form = make_form(1, 1, 1, 1, 1)
    action.run(form)
    assert calls == [(form, action)]


def test_actor_links_body():
    form = make_form(1, 1, 1, 1, 1)
    actor = Actor(form)
    assert form.actor is actor
    assert actor.body is form


def test_find_action_by_name_prefix():
    actor = Actor(None)
    move = Action(None, "move-state")
    move.name = "move"
    actor.add_action(Action())
    actor.add_action(move)
    assert actor.find_action("move") is move
    assert actor.find_vars("mov") == "move-state"
    assert actor.find_action("jump") is None
    assert actor.find_vars("jump") is None


def test_remove_action():
    actor = Actor(None)
    action = Action()
    actor.add_action(action)
    assert actor.remove_action(action) is action
    assert actor.actions == []
    assert actor.remove_action(action) is None


def test_do_actions_skips_inactive():
    actor = Actor(make_form(1, 1, 1, 1, 1))
    on, on_calls = _counting_action()
    off, off_calls = _counting_action()
    off.active = False
    actor.add_action(on)
    actor.add_action(off)
    actor.do_actions()
    actor.do_actions()
    assert len(on_calls) == 2
    assert off_calls == []


def test_actor_delete_detaches_body():
    form = make_form(1, 1, 1, 1, 1)
    actor = Actor(form)
    actor.add_action(Action())
    actor.delete()
    assert form.actor is None
    assert actor.actions == []


def test_actor_list_runs_and_removes_destroyed():
    actors = ActorList()
    keep = Actor(make_form(1, 1, 1, 1, 1))
    gone = Actor(make_form(1, 1, 1, 1, 1))
    keep_action, keep_calls = _counting_action()
    gone_action, gone_calls = _counting_action()
    keep.add_action(keep_action)
    gone.add_action(gone_action)
    actors.add(keep)
    actors.add(gone)
    gone.destroy()
    actors.do_all()
    assert list(actors) == [keep]
    assert len(keep_calls) == 1
    assert gone_calls == []


def test_form_delete_marks_actor_for_removal():
    actors = ActorList()
    form = make_form(1, 1, 1, 1, 1)
    actor = Actor(form)
    actors.add(actor)
    form.delete()
    assert actor.delete_me is True
    actors.do_all()
    assert len(actors) == 0


def test_inactive_actor_not_run():
    actors = ActorList()
    actor = Actor(None)
    action, calls = _counting_action()
    actor.add_action(action)
    actor.active = False
    actors.add(actor)
    actors.do_all()
    assert calls == []
    assert actor in actors


def test_remove_and_clear():
    actors = ActorList()
    a = Actor(make_form(1, 1, 1, 1, 1))
    b = Actor(make_form(1, 1, 1, 1, 1))
    actors.add(a)
    actors.add(b)
    actors.remove(a)
    assert list(actors) == [b]
    body = b.body
    actors.clear()
    assert len(actors) == 0
    assert body.actor is None


@pytest.mark.parametrize("count", [1, 3])
def test_all_destroyed_empties_list(count):
    actors = ActorList()
    for _ in range(count):
        actor = Actor(None)
        actor.destroy()
        actors.add(actor)
    actors.do_all()
    assert len(actors) == 0