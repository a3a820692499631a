import logging

from fastapi import APIRouter

from voicebridge.errors import AppError, UnknownError, ValidationError
from voicebridge.schemas import ColorReporterReq, MirrorReq, PlayReq, WorldBuildReq
from voicebridge.services.kids_ai import (
    analyze_color_emotion, analyze_emotion_and_reframe, generate_illustration,
    generate_play_response, generate_world,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/kids", tags=["kids"])


@router.post("/color-reporter")
async def color_reporter(req: ColorReporterReq):
    if not req.color or not req.audio_data:
        raise ValidationError("Missing color or audio data")

    try:
        result = await analyze_color_emotion(req.color, req.audio_data, req.persona)
    except AppError:
        raise
    except Exception:
        logger.exception("Color reporter failed")
        raise UnknownError("Failed to analyze color emotion")

    return {"success": True, "data": result}


@router.post("/mirror")
async def mirror(req: MirrorReq):
    if not req.text and not req.audio_data:
        raise ValidationError("Missing text or audio data")

    try:
        result = await analyze_emotion_and_reframe(req.text or "Audio input", req.audio_data, req.persona)
    except AppError:
        raise
    except Exception:
        logger.exception("Emotion mirror failed")
        raise UnknownError("Failed to analyze emotion")

    return {"success": True, "data": result}


@router.post("/play")
async def play(req: PlayReq):
    if not req.scenario or not req.child_input:
        raise ValidationError("Missing scenario or child input")

    try:
        result = await generate_play_response(req.scenario, req.child_input, req.history or [], req.persona)
    except AppError:
        raise
    except Exception:
        logger.exception("Play response failed")
        raise UnknownError("Failed to generate play response")

    return {"success": True, "data": result}


@router.post("/world-build")
async def world_build(req: WorldBuildReq):
    if not req.text and not req.audio_data:
        raise ValidationError("Missing input")

    try:
        world = await generate_world(req.text or "A magical place", req.audio_data, req.persona)
        image = await generate_illustration(world.get("imagePrompt"))
    except AppError:
        raise
    except Exception:
        logger.exception("World build failed")
        raise UnknownError("Failed to build world")

    data = dict(world)
    if image:
        data["image"] = image
    return {"success": True, "data": data}
