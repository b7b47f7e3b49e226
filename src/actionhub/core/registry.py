"""Action dispatch registry: action -> category assignment, category -> handlers."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from actionhub.core import log
from actionhub.core.contracts import Action, ActionId, ActionRef, CategoryId, Handler, check_payload
from actionhub.core.errors import RegistrationError
from actionhub.core.ids import Resolver, fmt_id, get_id
from actionhub.core.metrics import Timer, inc_counter, set_gauge

_active: Optional["ActionRegistry"] = None
_active_lock = threading.Lock()


def _handler_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or type(fn).__name__


def _check_name(kind: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RegistrationError(f"{kind} must be a non-empty string, got {value!r}")
    return value


class ActionRegistry:
    """Routes posted actions to the handlers subscribed to their category.

    Dispatch is synchronous on the caller's thread. Handlers run in
    subscription order against a snapshot taken at post time, so a handler
    may post, subscribe or reassign without deadlocking; changes apply to
    the next post.
    """

    def __init__(self, name: str = "actionhub.registry", resolver: Resolver = get_id):
        self.name = name
        self.l = log.get(name)
        self._resolve = resolver
        self._lock = threading.RLock()
        # routing is by exact name; ids only resolve posts made by id
        self._categories: Dict[str, str] = {}
        self._handlers: Dict[str, List[Handler]] = {}
        self._names: Dict[int, str] = {}

    # -------------------- active instance --------------------
    def activate(self) -> None:
        """Make this the registry returned by get_active()."""
        global _active
        with _active_lock:
            _active = self
        self.l.debug("registry activated name=%s", self.name)

    # -------------------- registration --------------------
    def _claim_ids(self, *names: str) -> List[int]:
        """Resolve names to ids; RegistrationError if an id already belongs to another name.

        Caller holds the lock. Nothing is written unless every name is clear.
        """
        ids: List[int] = []
        pending: Dict[int, str] = {}
        for name in names:
            id_ = self._resolve(name)
            owner = self._names.get(id_, pending.get(id_))
            if owner is not None and owner != name:
                raise RegistrationError(f"id {fmt_id(id_)} of {name!r} collides with {owner!r}")
            pending[id_] = name
            ids.append(id_)
        self._names.update(pending)
        return ids

    def assign_category(self, action_name: str, category: str) -> ActionId:
        """(Re)assign an action to a category. Returns the action id."""
        _check_name("action name", action_name)
        _check_name("category", category)
        with self._lock:
            act_id, cat_id = self._claim_ids(action_name, category)
            self._categories[action_name] = category
        self.l.debug(
            "assigned action %s (%s) to category %s (%s)",
            action_name, fmt_id(act_id), category, fmt_id(cat_id),
        )
        return act_id

    def unassign(self, action_name: str) -> bool:
        _check_name("action name", action_name)
        with self._lock:
            removed = self._categories.pop(action_name, None) is not None
        if removed:
            self.l.debug("unassigned action %s", action_name)
        return removed

    def subscribe(self, category: str, handler: Handler) -> CategoryId:
        """Append a handler to a category. Duplicates are kept and each runs."""
        _check_name("category", category)
        if not callable(handler):
            raise RegistrationError(f"no callable handler given for category {category}")
        with self._lock:
            (cat_id,) = self._claim_ids(category)
            subs = self._handlers.setdefault(category, [])
            subs.append(handler)
            count = len(subs)
        set_gauge("category_subscribers", float(count), category=category)
        self.l.debug("subscribed %s to category %s (%s)", _handler_name(handler), category, fmt_id(cat_id))
        return cat_id

    def unsubscribe(self, category: str, handler: Handler) -> bool:
        """Remove the first subscription of ``handler``; True if one was found."""
        _check_name("category", category)
        with self._lock:
            subs = self._handlers.get(category)
            if not subs or handler not in subs:
                return False
            subs.remove(handler)
            count = len(subs)
        set_gauge("category_subscribers", float(count), category=category)
        self.l.debug("unsubscribed %s from category %s", _handler_name(handler), category)
        return True

    # -------------------- lookup --------------------
    def _to_name(self, action: Union[str, int]) -> Optional[str]:
        """Action name for a name or id; None for an id nobody registered."""
        if isinstance(action, str):
            return action
        if isinstance(action, int) and not isinstance(action, bool):
            return self._names.get(action)
        raise TypeError(f"invalid action identifier type: {type(action).__name__}")

    def name_from_id(self, id_: int) -> str:
        with self._lock:
            return self._names.get(id_, "")

    def category_of(self, action: Union[str, int]) -> Optional[str]:
        with self._lock:
            name = self._to_name(action)
            return None if name is None else self._categories.get(name)

    def subscribers(self, category: str) -> Tuple[Handler, ...]:
        with self._lock:
            return tuple(self._handlers.get(category, ()))

    def __contains__(self, action: object) -> bool:
        if isinstance(action, bool) or not isinstance(action, (str, int)):
            return False
        return self.category_of(action) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._categories)

    # -------------------- dispatch --------------------
    def post(self, action: ActionRef, data: Optional[Sequence[Any]] = ()) -> bool:
        """Dispatch an action to every handler of its current category.

        Returns False (after logging a warning) when the action has no
        category or the category has no subscribers. Handler exceptions are
        logged and counted; later handlers still run.
        """
        if isinstance(action, Action):
            ref: Union[str, int] = action.name if action.name else action.action_id
            payload = check_payload(action.data)
        else:
            ref = action
            payload = check_payload(data)

        with self._lock:
            action_name = self._to_name(ref)
            category = None if action_name is None else self._categories.get(action_name)
            handlers = tuple(self._handlers.get(category, ())) if category is not None else ()

        if category is None:
            inc_counter("actions_unrecognized_total")
            shown = ref if isinstance(ref, str) else fmt_id(ref)
            self.l.warning("post: action %s has no registered category", shown)
            return False

        if not handlers:
            inc_counter("actions_unhandled_total", category=category)
            self.l.warning(
                "post: category %s has no subscribed handlers - ignoring action %s",
                category, action_name,
            )
            return False

        inc_counter("actions_posted_total", action=action_name)
        with Timer("dispatch_latency_ms", category=category):
            for fn in handlers:
                # fresh list per handler
                try:
                    fn(action_name, list(payload))
                except Exception as e:
                    inc_counter("handler_errors_total", category=category)
                    self.l.error(
                        "handler %s failed for action %s: %s",
                        _handler_name(fn), action_name, e, exc_info=True,
                    )
        return True


def get_active() -> Optional[ActionRegistry]:
    """The last activated registry, or None (with a warning)."""
    with _active_lock:
        reg = _active
    if reg is None:
        log.get("registry").warning("get_active: no active registry")
    return reg


def clear_active() -> None:
    global _active
    with _active_lock:
        _active = None
