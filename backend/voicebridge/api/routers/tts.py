import logging

from fastapi import APIRouter

from voicebridge.errors import UnknownError, ValidationError
from voicebridge.schemas import TTSReq
from voicebridge.services.elevenlabs_client import (
    DEFAULT_SIMILARITY_BOOST, DEFAULT_STABILITY, get_voices, text_to_speech_base64,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tts"])


@router.post("/tts")
async def tts(req: TTSReq):
    if not req.text:
        raise ValidationError("Text is required")

    try:
        audio = await text_to_speech_base64(
            req.text,
            req.voice_id,
            stability=req.stability or DEFAULT_STABILITY,
            similarity_boost=req.similarity_boost or DEFAULT_SIMILARITY_BOOST,
        )
    except Exception:
        logger.exception("TTS failed")
        raise UnknownError("Failed to generate speech")

    return {"success": True, "data": {"audio": audio, "contentType": "audio/mpeg"}}


@router.get("/voices")
async def voices():
    try:
        items = await get_voices()
    except Exception:
        logger.exception("Fetching voices failed")
        raise UnknownError("Failed to fetch voices")

    return {"success": True, "voices": items}
