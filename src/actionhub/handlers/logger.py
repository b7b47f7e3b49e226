from __future__ import annotations

import logging
from typing import List, Optional

from actionhub.core import log
from actionhub.core.contracts import Primitive
from actionhub.core.ids import fmt_id, get_id

_items_log = log.get("handlers.items")


def _type_name(value: Primitive) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _script_str(value: Primitive) -> str:
    """Render a payload item the way the scripting layer prints it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def log_action_items(action_name: str, action_data: List[Primitive]) -> None:
    """Log one line per payload item: ``name (id)[index]: value``."""
    act_id = get_id(action_name) if action_name else 0
    for index, value in enumerate(action_data):
        _items_log.info("%s (%d)[%d]: %s", action_name, act_id, index, _script_str(value))


class ActionLogger:
    """Debug handler: logs the action header and each typed payload item.

    Subscribe one instance to every category worth tracing, e.g.
    ``Window``, ``Debug``, ``Input``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.l = logger or log.get("handlers.action_logger")
        self.seen = 0

    def __call__(self, action_name: str, action_data: List[Primitive]) -> None:
        self.seen += 1
        self.l.debug(
            "action: %s (%s), %d item(s):",
            action_name, fmt_id(get_id(action_name)) if action_name else "?", len(action_data),
        )
        for index, value in enumerate(action_data):
            self.l.debug("    %d: %s %r", index, _type_name(value), value)
