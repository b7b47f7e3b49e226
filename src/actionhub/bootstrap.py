from __future__ import annotations

from typing import Callable, Optional

from actionhub.core import log
from actionhub.core.ids import get_id
from actionhub.core.registry import ActionRegistry
from actionhub.handlers.logger import log_action_items

InitFn = Callable[[ActionRegistry], Optional[bool]]

_log = log.get("bootstrap")


def run_init(registry: ActionRegistry, init_fn: InitFn) -> bool:
    """Run a one-time setup function against ``registry``.

    Returns False when ``init_fn`` raises or explicitly returns False, so
    the host can abort start-up. A None return counts as success.
    """
    name = getattr(init_fn, "__name__", repr(init_fn))
    try:
        result = init_fn(registry)
    except Exception as e:
        _log.error("init %s failed: %s", name, e, exc_info=True)
        return False
    if result is False:
        _log.warning("init %s reported failure", name)
        return False
    _log.info("init %s ok (%d action(s) assigned)", name, len(registry))
    return True


def example_init(registry: ActionRegistry) -> bool:
    """Sample setup: two actions in one category, one item logger, two posts."""
    registry.assign_category("ExampleAction", "ScriptCategory")
    registry.assign_category("ExampleAction2", "ScriptCategory")
    registry.subscribe("ScriptCategory", log_action_items)
    registry.post("ExampleAction", ["foo", 2, -65536])
    registry.post(get_id("ExampleAction2"), [6.66, True, None])
    return True
