"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from stockbook.infrastructure.config import get_settings
from stockbook.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(get_settings().store_path)


def horizon_days() -> tuple[int, ...]:
    return tuple(get_settings().projection_horizon_days)


def low_stock_threshold() -> int:
    return get_settings().low_stock_threshold
