import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.db import get_db
from voicebridge.errors import NotFoundError, UnknownError, ValidationError
from voicebridge.models import PhonemeProgress
from voicebridge.schemas import ProgressUpdate
from voicebridge.services.auth_service import isoformat
from voicebridge.services.phoneme_data import filter_guides, get_phoneme_by_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guides", tags=["guides"])

DEMO_USER = "demo-user"
ACCURACY_HISTORY_LIMIT = 10


def serialize_progress(p: PhonemeProgress):
    return {
        "userId": p.user_id,
        "phonemeId": p.phoneme_id,
        "progress": p.progress,
        "practiceCount": p.practice_count,
        "lastPracticedAt": isoformat(p.last_practiced_at),
        "accuracyHistory": list(p.accuracy_history or []),
        "createdAt": isoformat(p.created_at),
        "updatedAt": isoformat(p.updated_at),
    }


@router.get("")
async def list_guides(category: Optional[str] = None, difficulty: Optional[str] = None):
    guides = filter_guides(category, difficulty)
    return {"success": True, "data": guides, "count": len(guides)}


@router.get("/progress")
async def get_progress(
    user_id: str = Query(DEMO_USER, alias="userId"),
    phoneme_id: Optional[str] = Query(None, alias="phonemeId"),
    db: AsyncSession = Depends(get_db),
):
    try:
        q = select(PhonemeProgress).where(PhonemeProgress.user_id == user_id)
        if phoneme_id:
            q = q.where(PhonemeProgress.phoneme_id == phoneme_id)
        rows = (await db.execute(q.order_by(PhonemeProgress.phoneme_id))).scalars().all()
    except Exception:
        logger.exception("Fetching phoneme progress failed")
        raise UnknownError("Failed to fetch phoneme progress")

    if phoneme_id:
        return {"success": True, "data": serialize_progress(rows[0]) if rows else None}

    items = [serialize_progress(r) for r in rows]
    return {"success": True, "data": items, "count": len(items)}


@router.post("/progress")
async def update_progress(req: ProgressUpdate, db: AsyncSession = Depends(get_db)):
    if not req.phoneme_id or req.progress is None:
        raise ValidationError("phonemeId and progress are required")
    if req.progress < 0 or req.progress > 100:
        raise ValidationError("Progress must be between 0 and 100")

    now = datetime.now(timezone.utc)
    score = req.accuracy if req.accuracy else req.progress

    try:
        res = await db.execute(
            select(PhonemeProgress).where(
                PhonemeProgress.user_id == req.user_id,
                PhonemeProgress.phoneme_id == req.phoneme_id,
            )
        )
        row = res.scalar_one_or_none()
        if row is None:
            row = PhonemeProgress(
                user_id=req.user_id,
                phoneme_id=req.phoneme_id,
                progress=req.progress,
                practice_count=0,
                accuracy_history=[],
                created_at=now,
            )
            db.add(row)

        row.progress = req.progress
        row.practice_count = (row.practice_count or 0) + 1
        row.last_practiced_at = now
        # reassigned, not appended: in-place mutation of a JSON column is not tracked
        row.accuracy_history = (list(row.accuracy_history or []) + [score])[-ACCURACY_HISTORY_LIMIT:]
        row.updated_at = now

        await db.commit()
        await db.refresh(row)
    except Exception:
        await db.rollback()
        logger.exception("Updating phoneme progress failed")
        raise UnknownError("Failed to update phoneme progress")

    return {"success": True, "data": serialize_progress(row), "message": "Progress updated successfully"}


@router.delete("/progress")
async def reset_progress(
    user_id: str = Query(DEMO_USER, alias="userId"),
    phoneme_id: Optional[str] = Query(None, alias="phonemeId"),
    db: AsyncSession = Depends(get_db),
):
    try:
        stmt = delete(PhonemeProgress).where(PhonemeProgress.user_id == user_id)
        if phoneme_id:
            stmt = stmt.where(PhonemeProgress.phoneme_id == phoneme_id)
        await db.execute(stmt)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Resetting phoneme progress failed")
        raise UnknownError("Failed to reset phoneme progress")

    message = f"Progress reset for phoneme {phoneme_id}" if phoneme_id else "All progress reset"
    return {"success": True, "message": message}


@router.get("/{guide_id}")
async def get_guide(guide_id: str):
    guide = get_phoneme_by_id(guide_id)
    if guide is None:
        raise NotFoundError("Phoneme guide not found")
    return {"success": True, "data": guide}
