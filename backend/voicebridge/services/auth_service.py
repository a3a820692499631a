from __future__ import annotations
import json
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from passlib.context import CryptContext
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.config import VERIFICATION_CODE_TTL_HOURS, verification_code_override
from voicebridge.errors import (
    AlreadyVerifiedError, AuthError, CodeExpiredError, CodeMismatchError,
    ConflictError, NotFoundError, ValidationError, VerificationRequiredError,
)
from voicebridge.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

# Same message for "no such account" and "wrong password".
INVALID_CREDENTIALS = "Invalid email or password"


def verify_password(plain_password, password_hash):
    return pwd_context.verify(plain_password, password_hash)


def hash_password(password):
    if not isinstance(password, (str, bytes)):
        raise TypeError("Password must be a string or bytes.")
    return pwd_context.hash(password)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_verification_code() -> str:
    return verification_code_override() or f"{secrets.randbelow(10**6):06d}"


def serialize_user(user: User) -> Dict[str, Any]:
    """The profile object shared by login, verification and the settings routes."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "avatar": user.avatar,
        "isEmailVerified": user.is_email_verified,
        "disabilityProfile": {
            "type": user.disability_type,
            "severity": user.disability_severity,
            "triggerWords": json.loads(user.trigger_words or "[]"),
            "description": user.disability_description,
        },
        "settings": {
            "voiceId": user.voice_id,
            "speed": user.speed,
            "fontMode": user.font_mode,
            "textSize": user.text_size,
            "highContrast": user.high_contrast,
            "reducedMotion": user.reduced_motion,
        },
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
    }


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    q = select(User).where(User.email == normalize_email(email))
    res = await db.execute(q)
    return res.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await db.get(User, user_id)


async def authenticate(db: AsyncSession, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)

    if not user.is_email_verified:
        raise VerificationRequiredError()

    return serialize_user(user)


async def register_user(
    db: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    name: Optional[str],
    *,
    disability_type: Optional[str] = None,
    severity: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    if not email or not password or not name:
        raise ValidationError("Email, password, and name are required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if await get_user_by_email(db, email):
        raise ConflictError("An account with this email already exists")

    now = now or datetime.now(timezone.utc)
    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        name=name,
        disability_type=disability_type or "other",
        disability_severity=severity or 5,
        verification_code=new_verification_code(),
        verification_code_expires_at=now + timedelta(hours=VERIFICATION_CODE_TTL_HOURS),
        is_email_verified=False,
    )
    db.add(user)
    await db.commit()
    logger.info("Registered user %s", user.id)

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "isEmailVerified": user.is_email_verified,
    }


async def verify_email(
    db: AsyncSession,
    email: Optional[str],
    code: Optional[str],
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Check the emailed code and mark the account verified.

    Preconditions are checked in order (account exists, not yet verified, code
    matches, not expired) and the row is only touched once all of them pass.
    """
    if not email or not code:
        raise ValidationError("Email and verification code are required")

    user = await get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User not found")

    if user.is_email_verified:
        raise AlreadyVerifiedError()

    stored = user.verification_code
    if stored is None or not secrets.compare_digest(stored.encode(), code.encode()):
        raise CodeMismatchError()

    now = now or datetime.now(timezone.utc)
    expires_at = as_utc(user.verification_code_expires_at)
    if expires_at is not None and now > expires_at:
        raise CodeExpiredError()

    # Conditional update: when two requests race, only one flips the flag.
    res = await db.execute(
        update(User)
        .where(User.id == user.id, User.is_email_verified.is_(False))
        .values(
            is_email_verified=True,
            verification_code=None,
            verification_code_expires_at=None,
            updated_at=now,
        )
    )
    if res.rowcount == 0:
        await db.rollback()
        raise AlreadyVerifiedError()

    await db.commit()
    await db.refresh(user)
    logger.info("Verified email for user %s", user.id)
    return serialize_user(user)
