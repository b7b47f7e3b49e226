# src/actionhub/wire_config.py
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from actionhub.core import log
from actionhub.core.contracts import Handler
from actionhub.core.errors import PayloadError, RegistrationError, WireConfigError
from actionhub.core.registry import ActionRegistry

_log = log.get("wire_config")


def _imp(ref: str) -> Any:
    """Resolve ``pkg.mod:attr`` (or ``pkg.mod.attr``) to an object."""
    if ":" in ref:
        module, attr = ref.split(":", 1)
    else:
        module, _, attr = ref.rpartition(".")
    if not module or not attr:
        raise WireConfigError(f"bad handler reference {ref!r}")
    try:
        obj: Any = importlib.import_module(module)
    except ImportError as e:
        raise WireConfigError(f"cannot import {module!r} for handler {ref!r}") from e
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise WireConfigError(f"{module!r} has no attribute {attr!r}") from e
    return obj


def _mk_handler(ref: str) -> Handler:
    obj = _imp(ref)
    # classes are handler factories (e.g. ActionLogger)
    if isinstance(obj, type):
        obj = obj()
    if not callable(obj):
        raise WireConfigError(f"handler {ref!r} is not callable")
    return obj


def _section(data: Dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise WireConfigError(f"'{key}' must be a {kind.__name__}, got {type(value).__name__}")
    return value


def apply_config(data: Dict[str, Any], registry: ActionRegistry) -> List[bool]:
    """Apply assign -> subscribe -> post sections in that order."""
    if not isinstance(data, dict):
        raise WireConfigError("wiring root must be a mapping")

    try:
        for action_name, category in _section(data, "assign", dict).items():
            registry.assign_category(action_name, category)

        # handler instances are shared across categories within one file
        made: Dict[str, Handler] = {}
        for category, refs in _section(data, "subscribe", dict).items():
            if isinstance(refs, str):
                refs = [refs]
            elif refs is None:
                refs = []
            if not isinstance(refs, list) or not all(isinstance(r, str) for r in refs):
                raise WireConfigError(f"subscribe[{category}] must be a handler reference or a list of them")
            for ref in refs:
                if ref not in made:
                    made[ref] = _mk_handler(ref)
                registry.subscribe(category, made[ref])
    except RegistrationError as e:
        raise WireConfigError(str(e)) from e

    results: List[bool] = []
    for i, item in enumerate(_section(data, "post", list)):
        if not isinstance(item, dict) or "action" not in item:
            raise WireConfigError(f"post[{i}] must be a mapping with an 'action' key")
        try:
            results.append(registry.post(item["action"], item.get("data") or ()))
        except (PayloadError, TypeError) as e:
            raise WireConfigError(f"post[{i}]: {e}") from e
    return results


def build_from_yaml(yaml_path: str | Path, registry: Optional[ActionRegistry] = None) -> Tuple[ActionRegistry, List[bool]]:
    """Read a wiring file and populate ``registry`` (a new one if omitted)."""
    path = Path(yaml_path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise WireConfigError(f"invalid YAML in {path}: {e}") from e

    reg = registry if registry is not None else ActionRegistry()
    results = apply_config(data, reg)
    _log.info("wired %s: %d action(s), %d initial post(s)", path.name, len(reg), len(results))
    return reg, results
