# backend/voicebridge/config.py
import os

DEFAULT_DB_URL = "sqlite+aiosqlite:///./voicebridge.db"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_AUDIO_MODEL = "gpt-4o-audio-preview"
DEFAULT_OPENAI_IMAGE_MODEL = "dall-e-3"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

VERIFICATION_CODE_TTL_HOURS = 24


# Values are read on every call so a changed .env or test monkeypatch applies
# without re-importing the module.
def database_url() -> str:
    return os.getenv("ASYNC_DATABASE_URL") or DEFAULT_DB_URL


def openai_api_key() -> str | None:
    return os.getenv("OPENAI_API_KEY") or None


def openai_model() -> str:
    return os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL


def openai_audio_model() -> str:
    return os.getenv("OPENAI_AUDIO_MODEL") or DEFAULT_OPENAI_AUDIO_MODEL


def openai_image_model() -> str:
    return os.getenv("OPENAI_IMAGE_MODEL") or DEFAULT_OPENAI_IMAGE_MODEL


def openai_timeout() -> float:
    return float(os.getenv("OPENAI_TIMEOUT_S", "30"))


def eleven_api_key() -> str:
    return os.getenv("ELEVEN_API_KEY", "")


def eleven_base_url() -> str:
    return os.getenv("ELEVEN_BASE", "https://api.elevenlabs.io")


def eleven_default_voice_id() -> str | None:
    return os.getenv("ELEVENLABS_DEFAULT_VOICE_ID") or None


def eleven_model_id() -> str:
    return os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1")


def eleven_timeout() -> float:
    return float(os.getenv("ELEVEN_TIMEOUT_S", "30"))


def verification_code_override() -> str | None:
    return os.getenv("VERIFICATION_CODE_OVERRIDE") or None


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
