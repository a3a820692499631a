from __future__ import annotations
import asyncio
import base64
import binascii
import io
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from openai import OpenAI, OpenAIError
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from voicebridge.config import (
    openai_api_key, openai_audio_model, openai_image_model,
    openai_model, openai_timeout,
)

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None

# Container names for common MIME subtypes.
_AUDIO_FORMATS = {
    "mpeg": "mp3",
    "mp3": "mp3",
    "wav": "wav",
    "wave": "wav",
    "x-wav": "wav",
}

# The only formats ``input_audio`` accepts; anything else is transcoded to WAV.
INPUT_AUDIO_FORMATS = ("wav", "mp3")
DEFAULT_AUDIO_MIME = "audio/webm"


class GenAIError(RuntimeError):
    pass


# Errors after which the AI helpers fall back to a default reply.
VENDOR_ERRORS = (OpenAIError, GenAIError)
PARSE_ERRORS = (json.JSONDecodeError, IndexError, AttributeError, TypeError, ValueError)


def get_client() -> OpenAI:
    """Created on first use so the app starts without an OpenAI key."""
    global _client
    if _client is None:
        key = openai_api_key()
        if not key:
            raise GenAIError("OPENAI_API_KEY is not configured")
        _client = OpenAI(api_key=key)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def audio_format(mime_type: Optional[str]) -> str:
    if not mime_type:
        return "webm"
    subtype = mime_type.split("/", 1)[-1].split(";", 1)[0].strip().lower()
    return _AUDIO_FORMATS.get(subtype, subtype)


def prepare_audio(audio_b64: str, mime_type: Optional[str] = DEFAULT_AUDIO_MIME) -> Tuple[str, str]:
    """
    Return ``(base64 audio, format)`` ready for an ``input_audio`` part.

    WAV and MP3 pass through untouched. Browser recordings (WebM/Ogg/MP4) are
    decoded with pydub, which needs ffmpeg on the PATH, and re-encoded as WAV.
    """
    fmt = audio_format(mime_type)
    if fmt in INPUT_AUDIO_FORMATS:
        return audio_b64, fmt

    try:
        raw = base64.b64decode(audio_b64)
        segment = AudioSegment.from_file(io.BytesIO(raw), format=fmt)
        out = io.BytesIO()
        segment.export(out, format="wav")
    except (binascii.Error, CouldntDecodeError, OSError) as e:
        raise GenAIError(f"could not convert {fmt} audio to wav: {e}") from e

    logger.debug("Transcoded %d bytes of %s audio to wav", len(raw), fmt)
    return base64.b64encode(out.getvalue()).decode("ascii"), "wav"


def audio_part(audio_b64: str, fmt: str) -> Dict[str, Any]:
    if fmt not in INPUT_AUDIO_FORMATS:
        raise ValueError(f"input_audio does not accept {fmt!r}; run prepare_audio first")
    return {
        "type": "input_audio",
        "input_audio": {"data": audio_b64, "format": fmt},
    }


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def extract_json(raw_json_text: Optional[str]) -> Dict[str, Any]:
    """Parse a model reply that may be wrapped in a code fence or prose."""
    if not raw_json_text:
        raise json.JSONDecodeError("model returned empty content", "", 0)

    raw_json_text = raw_json_text.strip()
    if raw_json_text.startswith("```json"):
        raw_json_text = raw_json_text[7:].strip()
    elif raw_json_text.startswith("```"):
        raw_json_text = raw_json_text[3:].strip()
    if raw_json_text.endswith("```"):
        raw_json_text = raw_json_text[:-3].strip()

    json_start = raw_json_text.find("{")
    json_end = raw_json_text.rfind("}")
    if json_start != -1 and json_end != -1 and json_end > json_start:
        raw_json_text = raw_json_text[json_start:json_end + 1]

    parsed = json.loads(raw_json_text)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


async def complete_json(
    prompt: str,
    *,
    audio_b64: Optional[str] = None,
    mime_type: Optional[str] = None,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """
    One chat-completion round trip that must answer with a JSON object.

    When ``audio_b64`` is given the recording travels in the same message as
    the prompt and the audio-capable model is used.
    """
    client = get_client()

    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})

    if audio_b64:
        data, fmt = await asyncio.to_thread(prepare_audio, audio_b64, mime_type or DEFAULT_AUDIO_MIME)
        content: Any = [text_part(prompt), audio_part(data, fmt)]
        kwargs: Dict[str, Any] = {"model": openai_audio_model(), "modalities": ["text"]}
    else:
        content = prompt
        kwargs = {"model": openai_model(), "response_format": {"type": "json_object"}}
    messages.append({"role": "user", "content": content})

    def _call():
        return client.chat.completions.create(
            messages=messages,
            timeout=openai_timeout(),
            **kwargs,
        )

    resp = await asyncio.to_thread(_call)
    return extract_json(resp.choices[0].message.content)


async def generate_image(image_prompt: str) -> Optional[str]:
    """Render ``image_prompt``; returns a data URL, or None when unavailable."""
    if not openai_api_key() or not image_prompt:
        return None

    try:
        client = get_client()

        def _call():
            return client.images.generate(
                model=openai_image_model(),
                prompt=image_prompt,
                n=1,
                size="1024x1024",
                response_format="b64_json",
                timeout=openai_timeout(),
            )

        resp = await asyncio.to_thread(_call)
        b64 = resp.data[0].b64_json
        if not b64:
            return None
        return f"data:image/png;base64,{b64}"
    except Exception as e:
        logger.warning("Image generation failed: %s", e)
        return None
