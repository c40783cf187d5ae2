"""Product aggregate.

Products are the unit stock is counted in. The catalogue itself is managed
elsewhere; here a product only carries what the ledger needs: an identity
and a cached "stock today" figure.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockbook.domain.exceptions import ValidationError


@dataclass
class Product:
    """A stockable product.

    ``todays_stock`` is a cache of the sum of every ledger event for the
    product. It is only ever written by the ledger, inside the same unit of
    work as the event change that invalidated it.
    """

    id: str
    name: str
    model_number: str | None = None
    todays_stock: int = 0

    @staticmethod
    def create(product_id: str, name: str, model_number: str | None = None) -> Product:
        if not product_id or not product_id.strip():
            raise ValidationError("Product ID is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        return Product(
            id=product_id.strip(),
            name=name.strip(),
            model_number=model_number.strip() if model_number else None,
        )

    def sync_stock(self, total: int) -> None:
        """Overwrite the cached stock figure with a freshly summed total."""
        self.todays_stock = total
