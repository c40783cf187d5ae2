"""Wall-clock access.

Handlers take a ``Clock`` instead of calling ``datetime.now`` so booking
priority and "today" are deterministic under test.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(timezone.utc)
