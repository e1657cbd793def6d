"""Actions, the actors that carry them out, and the list of live actors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

if TYPE_CHECKING:
    from dirtworld.form import Form

ActionFunc = Callable[[Optional["Form"], "Action"], Any]


class Action:
    """A behaviour run once per tick on an actor's body, with its own state in ``vars``.

    An action made without a function does nothing when run and returns 0.
    """

    def __init__(self, fun: Optional[ActionFunc] = None, vars: Any = None) -> None:
        self.active = True
        self.fun: Optional[ActionFunc] = fun
        self.vars = vars
        self.dyn_vars: list[Any] = []
        self.name: Optional[str] = None

    def run(self, form: Optional["Form"]) -> Any:
        """Carry out the action on ``form``."""
        if self.fun is None:
            return 0
        return self.fun(form, self)

    def __repr__(self) -> str:
        return f"Action(name={self.name!r}, active={self.active})"


class Actor:
    """Something that acts: a form with a list of actions."""

    def __init__(self, body: Optional["Form"] = None) -> None:
        self.active = True
        self.delete_me = False
        self.actions: list[Action] = []
        self.body = body
        if body is not None:
            body.actor = self

    def add_action(self, action: Action) -> None:
        self.actions.append(action)

    def find_action(self, name: str) -> Optional[Action]:
        """The first action whose name starts with ``name``."""
        return next(
            (a for a in self.actions if a.name is not None and a.name.startswith(name)),
            None,
        )

    def find_vars(self, name: str) -> Any:
        """The state of the first action whose name starts with ``name``."""
        action = self.find_action(name)
        return action.vars if action is not None else None

    def remove_action(self, action: Action) -> Optional[Action]:
        """Take ``action`` off this actor; returns it, or None if it was not there."""
        try:
            self.actions.remove(action)
        except ValueError:
            return None
        return action

    def do_actions(self) -> None:
        """Run every active action on the body."""
        for action in list(self.actions):
            if action.active:
                action.run(self.body)

    def destroy(self) -> None:
        """Mark the actor for deletion on the next pass of its list."""
        self.delete_me = True

    def delete(self) -> None:
        """Detach from the body and drop all actions."""
        if self.body is not None:
            self.body.actor = None
        self.actions.clear()


class ActorList:
    """All actors that act each tick."""

    def __init__(self) -> None:
        self._actors: list[Actor] = []

    def __iter__(self) -> Iterator[Actor]:
        return iter(self._actors)

    def __len__(self) -> int:
        return len(self._actors)

    def __contains__(self, actor: object) -> bool:
        return actor in self._actors

    def add(self, actor: Actor) -> None:
        self._actors.append(actor)

    def remove(self, actor: Actor) -> None:
        """Take ``actor`` off the list if it is there."""
        if actor in self._actors:
            self._actors.remove(actor)

    def clear(self) -> None:
        """Delete every actor and empty the list."""
        for actor in self._actors:
            actor.delete()
        self._actors.clear()

    def do_all(self) -> None:
        """Delete actors marked for deletion and run the active ones."""
        deleted: list[Actor] = []
        # Actors appended while iterating are also visited in this pass.
        for actor in self._actors:
            if actor.delete_me:
                actor.delete()
                deleted.append(actor)
                continue
            if actor.active:
                actor.do_actions()
        if deleted:
            gone = {id(a) for a in deleted}
            self._actors = [a for a in self._actors if id(a) not in gone]