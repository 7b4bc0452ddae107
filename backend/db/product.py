import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from .database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=True)
    # 'quantity' | 'weight'
    stock_management_type = Column(Text, nullable=False, default="quantity")
    # Inactive products are out of the catalogue: stock checks treat them as unknown
    is_active = Column(Boolean, nullable=False, default=True)

    variants = relationship("ProductVariant", back_populates="product", cascade="all, delete-orphan")
    inventory = relationship("ProductInventory", back_populates="product", cascade="all, delete-orphan")


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)

    product = relationship("Product", back_populates="variants")
