"""Stock projection value objects (read-only what-if views)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ProjectionStatus(Enum):
    SAFE = "SAFE"
    AT_RISK = "AT_RISK"
    WAITING_LIST = "WAITING_LIST"


@dataclass(frozen=True)
class HorizonPoint:
    offset_days: int
    on: date
    after_allocation_stock: int
    waiting_quantity: int


@dataclass(frozen=True)
class StockProjection:
    product_id: str
    selected_date: date
    current_stock: int
    stock_on_selected_date: int
    after_allocation_stock: int
    total_waiting_quantity: int
    next_replenishment_date: date | None
    next_replenishment_quantity: int | None
    horizon: tuple[HorizonPoint, ...]
    status: ProjectionStatus
    requested_quantity: int | None = None
    requested_confirmable: int | None = None
    requested_shortfall: int | None = None
