import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.db import get_db
from voicebridge.errors import AppError, UnknownError, ValidationError
from voicebridge.models import TherapySession
from voicebridge.schemas import AnalyzeReq, EmotionReq, PromptsReq, SessionCreate, TherapyTTSReq
from voicebridge.services.auth_service import isoformat
from voicebridge.services.elevenlabs_client import resolve_voice_id, text_to_speech_base64
from voicebridge.services.export import export_filename, sessions_to_csv, sessions_to_json
from voicebridge.services.prompts import default_practice_prompts
from voicebridge.services.speech_ai import (
    analyze_emotion_from_audio, analyze_speech, generate_practice_prompts,
)
from voicebridge.services.stats import day_window, round_half_up, serialize_session, summarize_sessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/therapy", tags=["therapy"])

DIFFICULTIES = ("easy", "medium", "hard")

NO_SPEECH_RECOMMENDATIONS = [
    "We couldn't detect any speech. Please try again.",
    "Make sure your microphone is working properly.",
    "Try speaking louder and clearer.",
]

THERAPY_STABILITY = 0.7
THERAPY_SIMILARITY_BOOST = 0.8


def _number_prompts(prompts, prefix: str, difficulty: str):
    return [
        {
            "id": f"{prefix}_{difficulty}_{i}",
            "text": p.get("text"),
            "difficulty": difficulty,
            "category": p.get("category"),
            "targetPhonemes": p.get("targetPhonemes") or [],
        }
        for i, p in enumerate(prompts)
    ]


@router.post("/analyze")
async def analyze(req: AnalyzeReq):
    if not req.target_text:
        raise ValidationError("Target text is required")

    # Nothing was heard: answer without calling the model.
    if not req.transcribed_text or not req.transcribed_text.strip():
        return {
            "success": True,
            "data": {
                "transcribedText": "",
                "targetText": req.target_text,
                "accuracy": 0,
                "clarityScore": 0,
                "wordAnalysis": [],
                "phonemeIssues": [],
                "overallScore": 0,
                "recommendations": list(NO_SPEECH_RECOMMENDATIONS),
                "emotion": "neutral",
            },
        }

    try:
        analysis = await analyze_speech(
            req.target_text,
            req.transcribed_text,
            audio_b64=req.audio_data,
            audience=req.audience or "adult",
            persona=req.persona,
        )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Speech analysis failed")
        raise UnknownError(f"Failed to analyze speech: {str(e) or 'Unknown error'}")

    return {"success": True, "data": analysis}


@router.post("/emotion")
async def emotion(req: EmotionReq):
    if not req.audio_base64:
        raise ValidationError("Audio data is required")

    try:
        result = await analyze_emotion_from_audio(req.audio_base64, req.mime_type or "audio/webm")
    except AppError:
        raise
    except Exception:
        logger.exception("Emotion analysis failed")
        raise UnknownError("Failed to analyze emotion from audio")

    return {"success": True, "data": result}


@router.get("/prompts")
async def get_prompts(
    difficulty: str = Query("easy"),
    category: Optional[str] = Query(None),
    phonemes: Optional[str] = Query(None),
):
    if difficulty not in DIFFICULTIES:
        difficulty = "easy"
    phoneme_list = [p.strip() for p in (phonemes or "").split(",") if p.strip()]

    # Only tailored requests go to the model; failures fall back to the defaults.
    if phoneme_list or category:
        try:
            generated = await generate_practice_prompts(difficulty, phoneme_list, category)
        except Exception:
            logger.exception("Practice prompt generation failed")
            generated = []
        if generated:
            return {"success": True, "data": _number_prompts(generated, "ai", difficulty)}

    return {"success": True, "data": default_practice_prompts(difficulty)}


@router.post("/prompts")
async def create_prompts(req: PromptsReq):
    try:
        generated = await generate_practice_prompts(req.difficulty, req.target_phonemes, req.category)
    except AppError:
        raise
    except Exception:
        logger.exception("Practice prompt generation failed")
        raise UnknownError("Failed to generate prompts")

    if not generated:
        return {"success": True, "data": default_practice_prompts(req.difficulty)}
    return {"success": True, "data": _number_prompts(generated, "gen", req.difficulty)}


@router.post("/session")
async def save_session(req: SessionCreate, db: AsyncSession = Depends(get_db)):
    if not req.user_id or not req.target_text:
        raise ValidationError("User ID and target text are required")

    try:
        session = TherapySession(
            user_id=req.user_id,
            target_text=req.target_text,
            transcribed_text=req.transcribed_text or "",
            duration=req.duration or 0,
            accuracy=req.accuracy or 0,
            clarity_score=req.clarity_score or 0,
            overall_score=req.overall_score or 0,
            word_analysis=json.dumps(req.word_analysis or []),
            phoneme_issues=json.dumps(req.phoneme_issues or []),
            recommendations=json.dumps(req.recommendations or []),
            difficulty=req.difficulty or "easy",
            category=req.category or "General",
            emotion=req.emotion or "neutral",
        )
        db.add(session)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Saving therapy session failed")
        raise UnknownError("Failed to save session")

    return {"success": True, "data": {"id": session.id, "createdAt": isoformat(session.created_at)}}


@router.get("/session")
async def list_sessions(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: int = Query(10, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise ValidationError("User ID is required")

    try:
        res = await db.execute(
            select(TherapySession)
            .where(TherapySession.user_id == user_id)
            .order_by(TherapySession.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        sessions = res.scalars().all()

        total, total_duration, avg_acc, avg_clarity, avg_overall = (await db.execute(
            select(
                func.count(TherapySession.id),
                func.sum(TherapySession.duration),
                func.avg(TherapySession.accuracy),
                func.avg(TherapySession.clarity_score),
                func.avg(TherapySession.overall_score),
            ).where(TherapySession.user_id == user_id)
        )).one()
    except Exception:
        logger.exception("Listing therapy sessions failed")
        raise UnknownError("Failed to get sessions")

    return {
        "success": True,
        "data": {
            "sessions": [serialize_session(s) for s in sessions],
            "total": total,
            "stats": {
                "totalSessions": total,
                "totalDuration": total_duration or 0,
                "averageAccuracy": round_half_up(avg_acc or 0, 2),
                "averageClarityScore": round_half_up(avg_clarity or 0, 2),
                "averageOverallScore": round_half_up(avg_overall or 0, 2),
            },
        },
    }


@router.get("/export")
async def export_sessions(
    user_id: Optional[str] = Query(None, alias="userId"),
    format: str = Query("json"),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise ValidationError("User ID is required")

    try:
        res = await db.execute(
            select(TherapySession)
            .where(TherapySession.user_id == user_id)
            .order_by(TherapySession.created_at.desc())
        )
        sessions = res.scalars().all()

        if format == "csv":
            body, media_type, fmt = sessions_to_csv(sessions), "text/csv", "csv"
        else:
            body, media_type, fmt = sessions_to_json(sessions), "application/json", "json"
    except Exception:
        logger.exception("Exporting therapy sessions failed")
        raise UnknownError("Failed to export data")

    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(fmt)}"'},
    )


@router.get("/stats")
async def daily_stats(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise ValidationError("User ID is required")

    start, end = day_window()
    try:
        res = await db.execute(
            select(TherapySession).where(
                TherapySession.user_id == user_id,
                TherapySession.created_at >= start,
                TherapySession.created_at < end,
            )
        )
        rows = res.scalars().all()
    except Exception:
        logger.exception("Fetching therapy stats failed")
        raise UnknownError("Failed to fetch stats")

    return {"success": True, "data": summarize_sessions(rows)}


@router.post("/tts")
async def therapy_tts(req: TherapyTTSReq):
    if not req.text:
        raise ValidationError("Text is required")

    try:
        audio = await text_to_speech_base64(
            req.text,
            resolve_voice_id(req.voice_id or "THERAPY"),
            stability=THERAPY_STABILITY,
            similarity_boost=THERAPY_SIMILARITY_BOOST,
            speed=req.speed,
        )
    except Exception:
        logger.exception("Therapy TTS failed")
        raise UnknownError("Failed to generate speech")

    return {"success": True, "data": {"audio": audio, "contentType": "audio/mpeg"}}
