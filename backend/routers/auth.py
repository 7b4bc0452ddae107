import logging
import re
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session
from db.users import USER_APPROVED, USER_PENDING, GlobalMagicLink, MagicLinkUsage, User
from schemas.users import RegisterOut, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# bcrypt, cost 10: the hashes existing storefront logins were created with
password_helper = PasswordHelper(PasswordHash((BcryptHasher(rounds=10),)))

ACCOUNT_EXISTS = "An account with this email or phone number already exists."
PHONE_PLACEHOLDER_DOMAIN = "phone.placeholder"


def phone_placeholder_email(phone: str) -> str:
    return f"{re.sub(r'[^0-9]', '', phone)}@{PHONE_PLACEHOLDER_DOMAIN}"


async def _existing_user(db: AsyncSession, login: str, is_email: bool) -> Optional[User]:
    if is_email:
        return await SQLAlchemyUserDatabase(db, User).get_by_email(login)
    res = await db.execute(select(User).where(User.phone == login))
    return res.scalar_one_or_none()


async def _enabled_magic_link(db: AsyncSession, token: Optional[str]) -> Optional[GlobalMagicLink]:
    if not token:
        return None
    res = await db.execute(select(GlobalMagicLink).where(GlobalMagicLink.token == token).limit(1))
    link = res.scalar_one_or_none()
    if link is None or not link.is_enabled:
        return None
    return link


@router.post("/register", response_model=RegisterOut, response_model_exclude_none=True)
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Create a customer account.

    New accounts wait for admin approval unless they arrive through an enabled
    magic link, which approves them immediately and records the usage.
    """
    login = (payload.email or "").strip()
    if not login or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or phone number and password are required.",
        )
    if not (payload.name or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required.")

    is_email = "@" in login
    try:
        if await _existing_user(db, login, is_email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ACCOUNT_EXISTS)
        magic_link = await _enabled_magic_link(db, payload.magic_token)

        user = User(
            id=uuid.uuid4(),
            email=login if is_email else phone_placeholder_email(login),
            phone=None if is_email else login,
            hashed_password=password_helper.hash(payload.password),
            name=payload.name.strip(),
            note=payload.note or None,
            status=USER_APPROVED if magic_link else USER_PENDING,
        )
        db.add(user)
        if magic_link:
            db.add(
                MagicLinkUsage(
                    user_id=user.id,
                    magic_link_id=magic_link.id,
                    ip_address=request.client.host if request.client else None,
                    user_agent=request.headers.get("user-agent"),
                )
            )
        await db.commit()
    except HTTPException:
        raise
    except IntegrityError:
        # Lost a race with another sign-up, or two phone formats with the same digits
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ACCOUNT_EXISTS)
    except Exception:
        logger.exception("[auth] registration failed for %s", login)
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create account")

    logger.info("[auth] registered user %s status=%s", user.id, user.status)
    if magic_link:
        return RegisterOut(
            success=True,
            message="Account created and automatically approved via magic link! You can now login.",
            requires_approval=False,
            auto_approved=True,
        )
    return RegisterOut(
        success=True,
        message=(
            "Account created successfully! Your account is pending approval. "
            "You will be able to login once an admin approves your account."
        ),
        requires_approval=True,
    )
