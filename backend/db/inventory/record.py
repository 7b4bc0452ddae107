import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class ProductInventory(Base):
    __tablename__ = "product_inventory"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    variant_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Only the column matching products.stock_management_type is meaningful
    available_quantity = Column(Integer, nullable=False, default=0)
    available_weight = Column(Numeric(12, 3), nullable=False, default=0)  # grams

    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="inventory")
    variant = relationship("ProductVariant")
