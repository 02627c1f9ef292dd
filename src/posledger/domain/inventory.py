"""Product domain service, used for inventory valuation."""

from decimal import Decimal
from typing import Optional

from posledger.database.base import Database
from posledger.domain.entities import Product
from posledger.domain.errors import ValidationError
from posledger.domain.transaction import parse_record_amount


class ProductService:
    """Service for stocked products."""

    def __init__(self, db: Database):
        self.db = db

    def create_product(
        self,
        name: str,
        sku: str,
        stock: int = 0,
        average_cost: Optional[str | Decimal] = None,
        selling_price: Optional[str | Decimal] = None,
    ) -> int:
        """Create a product.

        Returns:
            Product ID

        Raises:
            ValidationError: If a price is invalid
            ConflictError: If the SKU already exists
        """
        if not name.strip() or not sku.strip():
            raise ValidationError("Product name and SKU are required")
        return self.db.create_product(
            name=name.strip(),
            sku=sku.strip(),
            stock=stock,
            average_cost=None if average_cost is None else parse_record_amount(average_cost),
            selling_price=None if selling_price is None else parse_record_amount(selling_price),
        )

    def list_products(self, active_only: bool = True) -> list[Product]:
        return self.db.list_products(active_only=active_only)
