"""Application service: Low Stock report (query)."""

from __future__ import annotations

from dataclasses import dataclass

from stockbook.domain.exceptions import ValidationError
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.stock_ledger import StockLedger


@dataclass(frozen=True)
class LowStockLineDTO:
    product_id: str
    product_name: str
    model_number: str | None
    current_stock: int


class LowStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, threshold: int) -> list[LowStockLineDTO]:
        """Products whose ledger stock is at or below *threshold*."""
        if threshold < 0:
            raise ValidationError("Low stock threshold cannot be negative")
        with self._uow as uow:
            ledger = StockLedger(uow.stock_events, uow.products)
            lines = [
                LowStockLineDTO(
                    product_id=p.id,
                    product_name=p.name,
                    model_number=p.model_number,
                    current_stock=ledger.current_stock(p.id),
                )
                for p in uow.products.list_all()
            ]
        return [line for line in lines if line.current_stock <= threshold]
