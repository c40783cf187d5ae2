"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from stockbook.domain.model.product import Product
from stockbook.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, document: dict) -> None:
        self._records: list[dict] = document.setdefault("products", [])

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._records:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._records:
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "model_number": product.model_number,
            "todays_stock": product.todays_stock,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            model_number=raw.get("model_number"),
            todays_stock=raw.get("todays_stock", 0),
        )
