from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


StockManagementType = Literal["quantity", "weight"]
AvailabilityReason = Literal["ok", "disabled", "no_record", "insufficient", "at_maximum"]
Amount = Union[int, float]


class CamelModel(BaseModel):
    # Storefront clients speak camelCase (productId, requestedQuantity, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InventoryCheckRequest(CamelModel):
    # Optional so a missing productId is a 400 from the handler, not a 422
    product_id: Optional[UUID] = None
    variant_id: Optional[UUID] = None

    requested_quantity: Optional[int] = None
    requested_weight: Optional[float] = None

    # Already in the requester's cart
    existing_quantity: int = 0
    existing_unit_count: int = 0
    per_unit_weight: float = 0.0

    @field_validator("variant_id", mode="before")
    @classmethod
    def _blank_variant(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class InventoryCheckOut(CamelModel):
    available: bool
    sufficient_for_total: bool
    headroom: Amount
    available_amount: Amount
    reason: AvailabilityReason
    stock_management_enabled: bool
    stock_management_type: StockManagementType
    requested_amount: Amount
    unit: str
    message: str
