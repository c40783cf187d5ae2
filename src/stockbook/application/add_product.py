"""Application service: Add Product use case."""

from __future__ import annotations

from stockbook.domain.exceptions import ValidationError
from stockbook.domain.model.product import Product
from stockbook.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        product_id: str | None = None,
        model_number: str | None = None,
    ) -> Product:
        """Register a stockable product. Stock starts at zero."""
        if product_id is not None:
            product_id = product_id.strip()

        with self._uow as uow:
            if name and uow.products.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Product '{name.strip()}' already exists")

            if product_id is None:
                # Auto-assign ID based on existing numeric IDs
                numeric = [int(p.id) for p in uow.products.list_all() if p.id.isdigit()]
                product_id = str(max(numeric) + 1) if numeric else "1"
            elif uow.products.get_by_id(product_id) is not None:
                raise ValidationError(f"Product ID '{product_id}' already exists")

            product = Product.create(product_id, name, model_number)
            uow.products.save(product)
            uow.commit()
        return product
