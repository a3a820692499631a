from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from voicebridge.services.genai_client import PARSE_ERRORS, VENDOR_ERRORS, complete_json
from voicebridge.services.prompts import (
    EMOTION_PROMPT, EMOTIONS, TRANSCRIBE_AND_CORRECT_PROMPT,
    adult_analysis_prompt, child_analysis_prompt, correction_prompt,
    practice_prompts_prompt,
)

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATIONS = ["Keep practicing!", "Try speaking slowly and clearly."]


def _correction_result(data: Dict[str, Any], original_text: str, fallback_corrected: str) -> Dict[str, Any]:
    return {
        "originalText": original_text,
        "correctedText": data.get("correctedText") or fallback_corrected,
        "confidence": data.get("confidence") or 50,
        "corrections": data.get("corrections") or [],
        "intent": data.get("intent") or "Communication",
    }


async def correct_speech(raw_transcript: str, context: Optional[str] = None) -> Dict[str, Any]:
    """Turn a disfluent transcript into a clean sentence with the same meaning."""
    try:
        data = await complete_json(correction_prompt(raw_transcript, context))
        return _correction_result(data, raw_transcript, raw_transcript)
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Speech correction failed, returning transcript unchanged: %s", e)
        return {
            "originalText": raw_transcript,
            "correctedText": raw_transcript,
            "confidence": 0,
            "corrections": [],
            "intent": "Unable to determine intent",
        }


async def transcribe_and_correct_speech(audio_b64: str, mime_type: Optional[str] = "audio/webm") -> Dict[str, Any]:
    """Transcribe and correct in a single round trip."""
    try:
        data = await complete_json(
            TRANSCRIBE_AND_CORRECT_PROMPT, audio_b64=audio_b64, mime_type=mime_type or "audio/webm"
        )
        original = data.get("originalText") or ""
        return _correction_result(data, original, original)
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Transcribe and correct failed: %s", e)
        return {
            "originalText": "",
            "correctedText": "",
            "confidence": 0,
            "corrections": [],
            "intent": "Unable to process audio",
        }


async def analyze_speech(
    target_text: str,
    transcribed_text: str,
    audio_b64: Optional[str] = None,
    audience: Optional[str] = "adult",
    persona: Optional[str] = None,
) -> Dict[str, Any]:
    with_audio = bool(audio_b64)
    if audience == "child":
        prompt = child_analysis_prompt(target_text, transcribed_text, persona, with_audio)
    else:
        prompt = adult_analysis_prompt(target_text, transcribed_text, with_audio)

    try:
        data = await complete_json(prompt, audio_b64=audio_b64)
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Speech analysis failed, returning zero scores: %s", e)
        return {
            "transcribedText": transcribed_text,
            "targetText": target_text,
            "accuracy": 0,
            "clarityScore": 0,
            "wordAnalysis": [],
            "phonemeIssues": [],
            "overallScore": 0,
            "recommendations": list(FALLBACK_RECOMMENDATIONS),
            "emotion": "neutral",
        }

    return {
        "transcribedText": transcribed_text,
        "targetText": target_text,
        "accuracy": data.get("accuracy") or 0,
        "clarityScore": data.get("clarityScore") or 0,
        "fluencyScore": data.get("fluencyScore"),
        "prosody": data.get("prosody"),
        "wordAnalysis": data.get("wordAnalysis") or [],
        "phonemeIssues": data.get("phonemeIssues") or [],
        "overallScore": data.get("overallScore") or 0,
        "recommendations": data.get("recommendations") or [],
        "emotion": data.get("emotion") or "neutral",
    }


def normalize_emotion(label: Any) -> str:
    return label if label in EMOTIONS else "neutral"


async def analyze_emotion_from_audio(audio_b64: str, mime_type: Optional[str] = "audio/webm") -> Dict[str, Any]:
    try:
        data = await complete_json(EMOTION_PROMPT, audio_b64=audio_b64, mime_type=mime_type or "audio/webm")
        details = data.get("details") or {}
        return {
            "emotion": normalize_emotion(data.get("emotion")),
            "confidence": data.get("confidence") or 50,
            "details": {
                "tone": details.get("tone") or "unknown",
                "energy": details.get("energy") or "medium",
                "description": details.get("description") or "Unable to determine emotional state",
            },
        }
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Emotion analysis failed: %s", e)
        return {
            "emotion": "neutral",
            "confidence": 0,
            "details": {
                "tone": "unknown",
                "energy": "medium",
                "description": "Could not analyze audio for emotion",
            },
        }


async def generate_practice_prompts(
    difficulty: str,
    phonemes: List[str],
    category: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Returns ``[]`` when generation fails so callers can serve the defaults."""
    try:
        data = await complete_json(practice_prompts_prompt(difficulty, phonemes, category))
        prompts = data.get("prompts") or []
        return [p for p in prompts if isinstance(p, dict) and p.get("text")]
    except VENDOR_ERRORS + PARSE_ERRORS as e:
        logger.warning("Practice prompt generation failed: %s", e)
        return []
