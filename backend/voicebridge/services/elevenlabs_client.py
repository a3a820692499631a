from __future__ import annotations
import base64
import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from httpx import Timeout

from voicebridge.config import (
    eleven_api_key, eleven_base_url, eleven_default_voice_id,
    eleven_model_id, eleven_timeout,
)
from voicebridge.errors import VendorError

logger = logging.getLogger(__name__)

# Named voices the client may ask for instead of a raw voice id.
VOICE_PRESETS: Dict[str, str] = {
    "THERAPY": "21m00Tcm4TlvDq8ikWAM",
    "EMPATHETIC": "EXAVITQu4vr4xnSDxMaL",
    "PROFESSIONAL": "pNInz6obpgDQGcFmaJgB",
    "CALM": "ThT5KcBeYPX3keUQqHPh",
}

DEFAULT_STABILITY = 0.5
DEFAULT_SIMILARITY_BOOST = 0.75


class ElevenLabsError(VendorError):
    pass


def _headers(accept: str = "application/json") -> Dict[str, str]:
    key = eleven_api_key()
    if not key:
        raise ElevenLabsError("ELEVEN_API_KEY is not set")

    key = key.replace("Bearer ", "").strip().strip('"').strip("'")

    return {
        "xi-api-key": key,
        "Content-Type": "application/json",
        "Accept": accept,
    }


def _url(path: str) -> str:
    return f"{eleven_base_url().rstrip('/')}{path}"


def _timeout() -> Timeout:
    return Timeout(10.0, read=eleven_timeout())


def resolve_voice_id(voice: Optional[str]) -> str:
    """
    Map a preset name (``"CALM"``, matched exactly) to its voice id; anything
    else is taken to be a voice id already. No voice at all falls back to the
    configured default, then to the THERAPY preset.
    """
    if not voice:
        return eleven_default_voice_id() or VOICE_PRESETS["THERAPY"]
    return VOICE_PRESETS.get(voice, voice)


def build_voice_settings(
    stability: Optional[float] = None,
    similarity_boost: Optional[float] = None,
    *,
    speed: Optional[float] = None,
) -> Dict[str, Any]:
    settings: Dict[str, Any] = {
        "stability": DEFAULT_STABILITY if stability is None else stability,
        "similarity_boost": DEFAULT_SIMILARITY_BOOST if similarity_boost is None else similarity_boost,
        "style": 0.0,
        "use_speaker_boost": True,
    }
    if speed is not None:
        settings["speed"] = speed
    return settings


async def text_to_speech(
    text: str,
    voice: Optional[str] = None,
    *,
    stability: Optional[float] = None,
    similarity_boost: Optional[float] = None,
    speed: Optional[float] = None,
) -> bytes:
    """Synthesize ``text`` and return the MP3 bytes."""
    voice_id = resolve_voice_id(voice)
    payload = {
        "text": text,
        "model_id": eleven_model_id(),
        "voice_settings": build_voice_settings(stability, similarity_boost, speed=speed),
    }

    async with httpx.AsyncClient(timeout=_timeout()) as client:
        r = await client.post(
            _url(f"/v1/text-to-speech/{voice_id}"),
            headers=_headers(accept="audio/mpeg"),
            json=payload,
        )
        if r.status_code >= 400:
            raise ElevenLabsError(f"tts failed {r.status_code}: {r.text}")
        if not r.content:
            raise ElevenLabsError("tts returned no audio")
        logger.debug("Synthesized %d bytes with voice %s", len(r.content), voice_id)
        return r.content


async def text_to_speech_base64(text: str, voice: Optional[str] = None, **kwargs: Any) -> str:
    audio = await text_to_speech(text, voice, **kwargs)
    return base64.b64encode(audio).decode("ascii")


async def get_voices() -> List[Dict[str, Any]]:
    async with httpx.AsyncClient(timeout=_timeout()) as client:
        r = await client.get(_url("/v1/voices"), headers=_headers())
        if r.status_code >= 400:
            raise ElevenLabsError(f"voices failed {r.status_code}: {r.text}")
        try:
            data = r.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ElevenLabsError(
                f"Failed to decode JSON response (Error: {e}). "
                f"Response text: {r.text!r}"
            )
        return data.get("voices", [])
