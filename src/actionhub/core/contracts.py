from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from actionhub.core.errors import PayloadError

__all__ = [
    "ActionId",
    "CategoryId",
    "Primitive",
    "Handler",
    "ActionRef",
    "Action",
    "PRIMITIVE_TYPES",
    "check_payload",
]


# --------- Primitive / aliases ---------
ActionId = int
CategoryId = int
Primitive = Union[int, float, bool, str, None]
Handler = Callable[[str, List[Primitive]], None]

PRIMITIVE_TYPES: Tuple[type, ...] = (int, float, bool, str, type(None))


# --------- Action envelope ---------
@dataclass(slots=True)
class Action:
    """A posted action: resolved id, optional name and its payload."""
    action_id: ActionId
    data: Tuple[Primitive, ...] = ()
    name: Optional[str] = None
    created_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        # keep the payload immutable once posted
        if not isinstance(self.data, tuple):
            self.data = tuple(self.data)

    def get_data(self, index: int) -> Primitive:
        return self.data[index]

    @property
    def data_count(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_id": self.action_id,
            "name": self.name,
            "data": list(self.data),
            "created_at": self.created_at,
        }


ActionRef = Union[str, ActionId, Action]


def check_payload(data: Any) -> Tuple[Primitive, ...]:
    """Return ``data`` as a tuple of primitives or raise PayloadError."""
    if data is None:
        return ()
    if isinstance(data, (str, bytes, bytearray)) or not isinstance(data, Sequence):
        raise PayloadError(f"action data must be a sequence, got {type(data).__name__}")
    items = tuple(data)
    for idx, item in enumerate(items):
        if not isinstance(item, PRIMITIVE_TYPES):
            raise PayloadError(f"invalid data item at index {idx}: {type(item).__name__}")
    return items
