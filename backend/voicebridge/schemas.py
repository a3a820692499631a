from __future__ import annotations
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field

from voicebridge.models import DisabilityType, FontMode, TextSize


class RequestModel(BaseModel):
    """
    Base for every JSON request body.

    Fields use the camelCase names the web client sends (as aliases) and
    unknown keys are rejected. Required inputs are declared Optional and
    checked by the routes so that an empty string counts as missing.
    """
    class Config:
        extra = "forbid"
        populate_by_name = True


# --- auth ---
class LoginReq(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupReq(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    disability_type: Optional[DisabilityType] = Field(None, alias="disabilityType")
    severity: Optional[int] = Field(None, ge=1, le=10)


class VerifyEmailReq(RequestModel):
    email: Optional[str] = None
    code: Optional[str] = None


# --- bridge mode ---
class BridgeCorrectReq(RequestModel):
    raw_transcript: Optional[str] = Field(None, alias="rawTranscript")
    audio_base64: Optional[str] = Field(None, alias="audioBase64")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    context: Optional[str] = None


class BridgeExchangeCreate(RequestModel):
    user_id: Optional[str] = Field(None, alias="userId")
    original_text: Optional[str] = Field(None, alias="originalText")
    corrected_text: Optional[str] = Field(None, alias="correctedText")
    confidence: Optional[float] = None
    intent: Optional[str] = None
    corrections: Optional[List[Dict[str, Any]]] = None
    context: Optional[str] = None


# --- kids mode ---
class ColorReporterReq(RequestModel):
    color: Optional[str] = None
    audio_data: Optional[str] = Field(None, alias="audioData")
    persona: Optional[str] = None


class MirrorReq(RequestModel):
    text: Optional[str] = None
    audio_data: Optional[str] = Field(None, alias="audioData")
    persona: Optional[str] = None


class PlayReq(RequestModel):
    scenario: Optional[str] = None
    child_input: Optional[str] = Field(None, alias="childInput")
    history: Optional[List[str]] = None
    persona: Optional[str] = None


class WorldBuildReq(RequestModel):
    text: Optional[str] = None
    audio_data: Optional[str] = Field(None, alias="audioData")
    persona: Optional[str] = None


# --- therapy ---
class AnalyzeReq(RequestModel):
    target_text: Optional[str] = Field(None, alias="targetText")
    transcribed_text: Optional[str] = Field(None, alias="transcribedText")
    audio_data: Optional[str] = Field(None, alias="audioData")
    audience: Optional[Literal["adult", "child"]] = None
    persona: Optional[str] = None


class EmotionReq(RequestModel):
    audio_base64: Optional[str] = Field(None, alias="audioBase64")
    mime_type: Optional[str] = Field(None, alias="mimeType")


class PromptsReq(RequestModel):
    difficulty: Literal["easy", "medium", "hard"] = "easy"
    target_phonemes: List[str] = Field(default_factory=list, alias="targetPhonemes")
    category: Optional[str] = None


class SessionCreate(RequestModel):
    user_id: Optional[str] = Field(None, alias="userId")
    target_text: Optional[str] = Field(None, alias="targetText")
    transcribed_text: Optional[str] = Field(None, alias="transcribedText")
    duration: Optional[int] = Field(None, ge=0)
    accuracy: Optional[float] = None
    clarity_score: Optional[float] = Field(None, alias="clarityScore")
    overall_score: Optional[float] = Field(None, alias="overallScore")
    word_analysis: Optional[List[Dict[str, Any]]] = Field(None, alias="wordAnalysis")
    phoneme_issues: Optional[List[Dict[str, Any]]] = Field(None, alias="phonemeIssues")
    recommendations: Optional[List[str]] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None
    emotion: Optional[str] = None


class TherapyTTSReq(RequestModel):
    text: Optional[str] = None
    voice_id: Optional[str] = Field(None, alias="voiceId")
    speed: Optional[float] = Field(None, gt=0)


# --- generic tts ---
class TTSReq(RequestModel):
    text: Optional[str] = None
    voice_id: Optional[str] = Field(None, alias="voiceId")
    stability: Optional[float] = Field(None, ge=0, le=1)
    similarity_boost: Optional[float] = Field(None, alias="similarityBoost", ge=0, le=1)


# --- phoneme guides ---
class ProgressUpdate(RequestModel):
    user_id: str = Field("demo-user", alias="userId")
    phoneme_id: Optional[str] = Field(None, alias="phonemeId")
    progress: Optional[float] = None
    accuracy: Optional[float] = None


# --- user ---
class ProfileUpdate(RequestModel):
    user_id: Optional[str] = Field(None, alias="userId")
    name: Optional[str] = None
    email: Optional[str] = None


class SettingsUpdate(RequestModel):
    user_id: Optional[str] = Field(None, alias="userId")
    voice_id: Optional[str] = Field(None, alias="voiceId")
    speed: Optional[float] = Field(None, ge=0.5, le=1.5)
    font_mode: Optional[FontMode] = Field(None, alias="fontMode")
    text_size: Optional[TextSize] = Field(None, alias="textSize")
    high_contrast: Optional[bool] = Field(None, alias="highContrast")
    reduced_motion: Optional[bool] = Field(None, alias="reducedMotion")


class DisabilityProfileUpdate(RequestModel):
    user_id: Optional[str] = Field(None, alias="userId")
    type: Optional[DisabilityType] = None
    severity: Optional[int] = Field(None, ge=1, le=10)
    trigger_words: Optional[List[str]] = Field(None, alias="triggerWords")
    description: Optional[str] = None
