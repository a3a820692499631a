import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.db import get_db
from voicebridge.errors import AppError, ConflictError, NotFoundError, UnknownError, ValidationError
from voicebridge.models import User
from voicebridge.schemas import DisabilityProfileUpdate, ProfileUpdate, SettingsUpdate
from voicebridge.services.auth_service import (
    get_user_by_email, get_user_by_id, is_valid_email, normalize_email, serialize_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["user"])


async def _load_user(db: AsyncSession, user_id: Optional[str]) -> User:
    if not user_id:
        raise ValidationError("User ID is required")
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _save(db: AsyncSession, user: User, failure_message: str):
    try:
        await db.commit()
        await db.refresh(user)
    except Exception:
        await db.rollback()
        logger.exception("Updating user %s failed", user.id)
        raise UnknownError(failure_message)
    return serialize_user(user)


@router.patch("/profile")
async def update_profile(req: ProfileUpdate, db: AsyncSession = Depends(get_db)):
    if not req.user_id:
        raise ValidationError("User ID is required")
    if not req.name and not req.email:
        raise ValidationError("At least one field (name or email) must be provided")

    try:
        user = await _load_user(db, req.user_id)
        if req.name:
            user.name = req.name
        if req.email:
            if not is_valid_email(req.email):
                raise ValidationError("Invalid email format")
            existing = await get_user_by_email(db, req.email)
            if existing is not None and existing.id != user.id:
                raise ConflictError("Email is already in use")
            user.email = normalize_email(req.email)
    except AppError:
        raise
    except Exception:
        logger.exception("Profile update failed")
        raise UnknownError("An error occurred while updating profile")

    data = await _save(db, user, "An error occurred while updating profile")
    return {"success": True, "message": "Profile updated successfully", "data": data}


@router.patch("/settings")
async def update_settings(req: SettingsUpdate, db: AsyncSession = Depends(get_db)):
    try:
        user = await _load_user(db, req.user_id)
    except AppError:
        raise
    except Exception:
        logger.exception("Settings update failed")
        raise UnknownError("An error occurred while updating settings")

    # Ranges and enumerations are enforced by SettingsUpdate.
    if "voice_id" in req.model_fields_set:
        user.voice_id = req.voice_id
    if req.speed is not None:
        user.speed = req.speed
    if req.font_mode is not None:
        user.font_mode = req.font_mode
    if req.text_size is not None:
        user.text_size = req.text_size
    if req.high_contrast is not None:
        user.high_contrast = req.high_contrast
    if req.reduced_motion is not None:
        user.reduced_motion = req.reduced_motion

    data = await _save(db, user, "An error occurred while updating settings")
    return {"success": True, "message": "Settings updated successfully", "data": data}


@router.patch("/disability-profile")
async def update_disability_profile(req: DisabilityProfileUpdate, db: AsyncSession = Depends(get_db)):
    try:
        user = await _load_user(db, req.user_id)
    except AppError:
        raise
    except Exception:
        logger.exception("Disability profile update failed")
        raise UnknownError("An error occurred while updating disability profile")

    if req.type is not None:
        user.disability_type = req.type
    if req.severity is not None:
        user.disability_severity = req.severity
    if req.trigger_words is not None:
        user.trigger_words = json.dumps(req.trigger_words)
    if "description" in req.model_fields_set:
        user.disability_description = req.description

    data = await _save(db, user, "An error occurred while updating disability profile")
    return {"success": True, "message": "Disability profile updated successfully", "data": data}
