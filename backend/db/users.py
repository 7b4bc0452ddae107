import uuid

from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# users.status
USER_PENDING = "pending"
USER_APPROVED = "approved"


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    name = Column(String, nullable=True)
    note = Column(Text, nullable=True)
    # Phone sign-ups keep a placeholder address in `email`
    phone = Column(String, nullable=True, unique=True, index=True)
    status = Column(String, nullable=False, default=USER_PENDING)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    magic_link_usages = relationship("MagicLinkUsage", back_populates="user", cascade="all, delete-orphan")


class GlobalMagicLink(Base):
    """Shared sign-up link; accounts created through an enabled one skip approval."""

    __tablename__ = "global_magic_links"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    token = Column(String, nullable=False, unique=True, index=True)
    is_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    usages = relationship("MagicLinkUsage", back_populates="magic_link", cascade="all, delete-orphan")


class MagicLinkUsage(Base):
    __tablename__ = "magic_link_usages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    magic_link_id = Column(
        Uuid(as_uuid=True), ForeignKey("global_magic_links.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ip_address = Column(String, nullable=True)
    user_agent = Column(Text, nullable=True)
    used_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="magic_link_usages")
    magic_link = relationship("GlobalMagicLink", back_populates="usages")
