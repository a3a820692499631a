import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.db import get_db
from voicebridge.errors import AppError, UnknownError, ValidationError
from voicebridge.models import BridgeExchange
from voicebridge.schemas import BridgeCorrectReq, BridgeExchangeCreate
from voicebridge.services.auth_service import isoformat
from voicebridge.services.speech_ai import correct_speech, transcribe_and_correct_speech
from voicebridge.services.stats import round_half_up

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bridge", tags=["bridge"])


def serialize_exchange(e: BridgeExchange):
    return {
        "id": e.id,
        "userId": e.user_id,
        "originalText": e.original_text,
        "correctedText": e.corrected_text,
        "confidence": e.confidence,
        "intent": e.intent,
        "corrections": json.loads(e.corrections or "[]"),
        "context": e.context,
        "createdAt": isoformat(e.created_at),
    }


@router.post("/correct")
async def correct(req: BridgeCorrectReq):
    # Audio wins over a transcript when both are sent.
    if not req.audio_base64 and not req.raw_transcript:
        raise ValidationError("Either rawTranscript or audioBase64 is required")

    try:
        if req.audio_base64:
            result = await transcribe_and_correct_speech(req.audio_base64, req.mime_type or "audio/webm")
        else:
            result = await correct_speech(req.raw_transcript, req.context)
    except AppError:
        raise
    except Exception:
        logger.exception("Bridge correction failed")
        raise UnknownError("Failed to correct speech")

    return {"success": True, "data": result}


@router.post("/exchange")
async def save_exchange(req: BridgeExchangeCreate, db: AsyncSession = Depends(get_db)):
    if not req.user_id or not req.original_text or not req.corrected_text:
        raise ValidationError("userId, originalText, and correctedText are required")

    try:
        exchange = BridgeExchange(
            user_id=req.user_id,
            original_text=req.original_text,
            corrected_text=req.corrected_text,
            confidence=req.confidence or 0,
            intent=req.intent or None,
            corrections=json.dumps(req.corrections or []),
            context=req.context or None,
        )
        db.add(exchange)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Saving bridge exchange failed")
        raise UnknownError("Failed to save exchange")

    return {"success": True, "data": {"id": exchange.id, "createdAt": isoformat(exchange.created_at)}}


@router.get("/exchange")
async def list_exchanges(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: int = Query(20, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise ValidationError("User ID is required")

    try:
        res = await db.execute(
            select(BridgeExchange)
            .where(BridgeExchange.user_id == user_id)
            .order_by(BridgeExchange.created_at.desc())
            .limit(limit)
        )
        exchanges = res.scalars().all()

        count, avg_confidence = (await db.execute(
            select(func.count(BridgeExchange.id), func.avg(BridgeExchange.confidence))
            .where(BridgeExchange.user_id == user_id)
        )).one()
    except Exception:
        logger.exception("Listing bridge exchanges failed")
        raise UnknownError("Failed to get exchanges")

    return {
        "success": True,
        "data": {
            "exchanges": [serialize_exchange(e) for e in exchanges],
            "stats": {
                "totalExchanges": count,
                "averageConfidence": round_half_up(avg_confidence or 0, 2),
            },
        },
    }


@router.delete("/exchange")
async def clear_exchanges(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise ValidationError("User ID is required")

    try:
        await db.execute(delete(BridgeExchange).where(BridgeExchange.user_id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Clearing bridge history failed")
        raise UnknownError("Failed to clear history")

    return {"success": True, "message": "History cleared"}
