from typing import List, Optional
from uuid import UUID

from schemas.inventory import CamelModel


class CheckoutLine(CamelModel):
    product_id: Optional[UUID] = None
    variant_id: Optional[UUID] = None
    name: Optional[str] = None
    quantity: int = 1
    # Grams for weight-managed lines; falls back to quantity when missing
    numeric_value: Optional[float] = None
    # Cart copy of the product mode, used when the product can no longer be loaded
    stock_management_type: Optional[str] = None


class CheckoutStockRequest(CamelModel):
    items: List[CheckoutLine]


class CheckoutStockOut(CamelModel):
    valid: bool
    errors: List[str]
