from __future__ import annotations

import zlib
from typing import Callable

from actionhub.core.contracts import ActionId

Resolver = Callable[[str], int]


def get_id(name: str) -> ActionId:
    """Map a name to a stable 32-bit id (CRC-32 of the UTF-8 bytes).

    Unlike ``hash()`` this is not salted per process, so ids posted by a
    script match ids computed by the host.
    """
    if not isinstance(name, str):
        raise TypeError(f"get_id expects str, got {type(name).__name__}")
    return zlib.crc32(name.encode("utf-8")) & 0xFFFFFFFF


def fmt_id(value: int) -> str:
    return f"0x{value:08x}"
