from sqlalchemy import Column, String, Text
from .database import Base

STOCK_MANAGEMENT_ENABLED = "stock_management_enabled"
WEIGHT_LABEL = "weight_label"


class Setting(Base):
    """Key/value store settings, e.g. stock_management_enabled='true'."""
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)
