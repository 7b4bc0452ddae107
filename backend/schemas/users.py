from typing import Optional

from schemas.inventory import CamelModel


class RegisterRequest(CamelModel):
    # `email` holds either an email address or a phone number
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    note: Optional[str] = None
    magic_token: Optional[str] = None


class RegisterOut(CamelModel):
    success: bool
    message: str
    requires_approval: bool
    auto_approved: Optional[bool] = None
