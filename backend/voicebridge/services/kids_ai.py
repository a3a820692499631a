from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from voicebridge.services.genai_client import (
    PARSE_ERRORS, VENDOR_ERRORS, complete_json, generate_image,
)
from voicebridge.services.prompts import (
    PLAY_SCENARIOS, color_prompt, mirror_prompt, play_prompt, world_prompt,
)

logger = logging.getLogger(__name__)

KIDS_AUDIO_MIME = "audio/webm"


def _str_fields(data: Dict[str, Any], defaults: Dict[str, str]) -> Dict[str, Any]:
    return {key: data.get(key) or value for key, value in defaults.items()}


async def analyze_emotion_and_reframe(
    text: str,
    audio_b64: Optional[str] = None,
    persona: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Emotion mirror: name the feeling and offer a kinder way to say it.

    Vendor errors propagate to the caller; only an unreadable reply is
    replaced by the default.
    """
    default = {
        "emotion": "Neutral",
        "reframe": "I am doing my best.",
        "comfortingMessage": "I'm listening.",
        "emoji": "🙂",
    }
    try:
        data = await complete_json(
            mirror_prompt(text, persona, bool(audio_b64)),
            audio_b64=audio_b64,
            mime_type=KIDS_AUDIO_MIME,
        )
    except PARSE_ERRORS as e:
        logger.warning("Mirror reply unreadable, using default: %s", e)
        return default
    return _str_fields(data, default)


async def generate_world(
    description: str,
    audio_b64: Optional[str] = None,
    persona: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        data = await complete_json(
            world_prompt(description, persona, bool(audio_b64)),
            audio_b64=audio_b64,
            mime_type=KIDS_AUDIO_MIME,
        )
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("World generation failed: %s", e)
        return {
            "story": "A magical place appears in the mist... but the story is hiding right now.",
            "imagePrompt": "A magical landscape in soft colors",
        }
    return {
        "story": data.get("story") or "",
        "imagePrompt": data.get("imagePrompt") or description,
    }


async def generate_illustration(image_prompt: str) -> Optional[str]:
    if not image_prompt:
        return None
    return await generate_image(
        f"A cute, magical, child-friendly illustration of: {image_prompt}. Soft colors, storybook style."
    )


async def generate_play_response(
    scenario: str,
    child_input: str,
    history: Optional[List[str]] = None,
    persona: Optional[str] = None,
) -> Dict[str, Any]:
    if scenario not in PLAY_SCENARIOS:
        logger.info("Unknown play scenario %r, playing without a script", scenario)
    try:
        data = await complete_json(play_prompt(scenario, child_input, history or [], persona))
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Play response failed: %s", e)
        return {
            "message": "That sounds fun! What happens next?",
            "action": "*smiles*",
            "therapeuticTheme": "Engagement",
        }
    return {
        "message": data.get("message") or "That sounds fun! What happens next?",
        "action": data.get("action"),
        "therapeuticTheme": data.get("therapeuticTheme"),
    }


async def analyze_color_emotion(
    color: str,
    audio_b64: str,
    persona: Optional[str] = None,
) -> Dict[str, Any]:
    default = {
        "emotion": "Feeling",
        "validation": "I hear you. That sounds important.",
        "summary": "Child spoke but analysis failed.",
        "copingStrategy": "Let's take a deep breath together.",
    }
    try:
        data = await complete_json(
            color_prompt(color, persona),
            audio_b64=audio_b64,
            mime_type=KIDS_AUDIO_MIME,
        )
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Color reporter analysis failed: %s", e)
        return default
    return _str_fields(data, default)
