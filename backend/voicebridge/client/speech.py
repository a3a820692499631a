"""
Speech output for the client side of the app.

Two paths: vendor voices fetched through the backend ``/api/tts`` route and
played by an ``AudioPlayer``, and the platform synthesizer driven by
``SpeechSynthesisController``. ``VendorSpeaker.speak_with_fallback`` chains
them so speech still comes out when the vendor call fails.
"""
from __future__ import annotations
import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

FALLBACK_RATE = 0.7
PYTTSX3_BASE_RATE = 200  # pyttsx3 default, words per minute


class SpeechError(RuntimeError):
    pass


@dataclass
class Voice:
    id: str
    name: str
    lang: Optional[str] = None


@dataclass
class Utterance:
    text: str
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0
    voice: Optional[Voice] = None
    on_start: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_end: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_pause: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_resume: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_error: Optional[Callable[[Exception], None]] = field(default=None, repr=False)


def _fire(callback: Optional[Callable], *args) -> None:
    if callback is not None:
        callback(*args)


class SpeechEngine(Protocol):
    def speak(self, utterance: Utterance) -> None: ...
    def cancel(self) -> None: ...
    def pause(self) -> None: ...
    def resume(self) -> None: ...
    def get_voices(self) -> List[Voice]: ...
    def set_voices_changed_handler(self, handler: Optional[Callable[[], None]]) -> None: ...


class AudioPlayer(Protocol):
    def play(self, audio: bytes, on_end: Callable[[], None]) -> None: ...
    def stop(self) -> None: ...


class PlaybackStrategy(Protocol):
    name: str

    def play(self, text: str, **options: Any) -> None: ...
    def cancel(self) -> None: ...


# --- backend TTS ---
class BackendTTSClient:
    """Calls ``POST /api/tts`` and returns the decoded MP3 bytes."""

    def __init__(self, base_url: str = "http://localhost:8000", client: Optional[httpx.Client] = None,
                 timeout: float = 30.0):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def synthesize(self, text: str, voice_id: Optional[str] = None,
                   stability: Optional[float] = None, similarity_boost: Optional[float] = None) -> bytes:
        payload = {"text": text}
        if voice_id is not None:
            payload["voiceId"] = voice_id
        if stability is not None:
            payload["stability"] = stability
        if similarity_boost is not None:
            payload["similarityBoost"] = similarity_boost

        r = self._client.post("/api/tts", json=payload)
        if r.status_code >= 400:
            raise SpeechError("Failed to generate speech")
        body = r.json()
        if not body.get("success"):
            raise SpeechError(body.get("error") or "Failed to generate speech")
        return base64.b64decode(body["data"]["audio"])

    def close(self) -> None:
        self._client.close()


# --- platform synthesizer ---
class SpeechSynthesisController:
    """Direct control over a platform speech engine; one utterance at a time."""

    def __init__(self, engine: Optional[SpeechEngine] = None, *, rate: float = 1.0, pitch: float = 1.0,
                 volume: float = 1.0, voice_uri: Optional[str] = None):
        self._engine = engine
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.voice_uri = voice_uri
        self.is_speaking = False
        self.is_paused = False
        self.voices: List[Voice] = []
        self._utterance: Optional[Utterance] = None

        if self._engine is not None:
            self._load_voices()
            self._engine.set_voices_changed_handler(self._load_voices)

    @property
    def is_supported(self) -> bool:
        return self._engine is not None

    def _load_voices(self) -> None:
        self.voices = list(self._engine.get_voices())

    def _on_start(self) -> None:
        self.is_speaking = True
        self.is_paused = False

    def _on_end(self) -> None:
        self.is_speaking = False
        self.is_paused = False

    def _on_pause(self) -> None:
        self.is_paused = True

    def _on_resume(self) -> None:
        self.is_paused = False

    def _on_error(self, exc: Exception) -> None:
        logger.error("Speech synthesis error: %s", exc)
        self.is_speaking = False
        self.is_paused = False

    def speak(self, text: str, *, rate: Optional[float] = None) -> Optional[Utterance]:
        if not self.is_supported:
            return None

        self._engine.cancel()

        voice = None
        if self.voice_uri:
            voice = next((v for v in self.voices if v.id == self.voice_uri), None)

        utterance = Utterance(
            text=text,
            rate=self.rate if rate is None else rate,
            pitch=self.pitch,
            volume=self.volume,
            voice=voice,
            on_start=self._on_start,
            on_end=self._on_end,
            on_pause=self._on_pause,
            on_resume=self._on_resume,
            on_error=self._on_error,
        )
        self._utterance = utterance
        self._engine.speak(utterance)
        return utterance

    def cancel(self) -> None:
        if self.is_supported:
            self._engine.cancel()
            self.is_speaking = False
            self.is_paused = False

    def pause(self) -> None:
        if self.is_supported and self.is_speaking:
            self._engine.pause()

    def resume(self) -> None:
        if self.is_supported and self.is_paused:
            self._engine.resume()

    def close(self) -> None:
        if self._engine is not None:
            self._engine.set_voices_changed_handler(None)


class Pyttsx3Engine:
    """
    ``SpeechEngine`` on top of pyttsx3 (install the ``speech`` extra).

    pyttsx3 speaks synchronously and cannot pause, so ``pause`` and ``resume``
    only log. It never reports voice changes.
    """

    def __init__(self, driver: Optional[str] = None):
        import pyttsx3

        self._engine = pyttsx3.init(driverName=driver)
        self._voices_changed: Optional[Callable[[], None]] = None

    def speak(self, utterance: Utterance) -> None:
        try:
            self._engine.setProperty("rate", int(PYTTSX3_BASE_RATE * utterance.rate))
            self._engine.setProperty("volume", utterance.volume)
            if utterance.voice is not None:
                self._engine.setProperty("voice", utterance.voice.id)
            self._engine.say(utterance.text)
            _fire(utterance.on_start)
            self._engine.runAndWait()
        except Exception as e:
            _fire(utterance.on_error, e)
            return
        _fire(utterance.on_end)

    def cancel(self) -> None:
        self._engine.stop()

    def pause(self) -> None:
        logger.debug("pyttsx3 cannot pause speech")

    def resume(self) -> None:
        logger.debug("pyttsx3 cannot resume speech")

    def get_voices(self) -> List[Voice]:
        voices = self._engine.getProperty("voices") or []
        return [
            Voice(id=v.id, name=getattr(v, "name", v.id), lang=(getattr(v, "languages", None) or [None])[0])
            for v in voices
        ]

    def set_voices_changed_handler(self, handler: Optional[Callable[[], None]]) -> None:
        self._voices_changed = handler


# --- fallback chain ---
class FallbackChain:
    """Tries each strategy in order; the first one that plays wins."""

    def __init__(self, strategies: Iterable[PlaybackStrategy]):
        self.strategies = list(strategies)
        self.active: Optional[PlaybackStrategy] = None

    def play(self, text: str, **options: Any) -> PlaybackStrategy:
        self.cancel()
        last_error: Optional[Exception] = None
        for strategy in self.strategies:
            try:
                strategy.play(text, **options)
            except Exception as e:
                logger.warning("%s playback failed, trying next: %s", strategy.name, e)
                last_error = e
                continue
            self.active = strategy
            return strategy
        raise SpeechError(f"all playback strategies failed: {last_error}")

    def cancel(self) -> None:
        if self.active is not None:
            self.active.cancel()
            self.active = None


class PlatformPlayback:
    name = "platform"

    def __init__(self, controller: SpeechSynthesisController, rate: float = FALLBACK_RATE):
        self._controller = controller
        self.rate = rate

    def play(self, text: str, **options: Any) -> None:
        if not self._controller.is_supported:
            raise SpeechError("platform speech synthesis is not available")
        self._controller.speak(text, rate=self.rate)

    def cancel(self) -> None:
        self._controller.cancel()


class _VendorPlayback:
    name = "vendor"

    def __init__(self, speaker: "VendorSpeaker"):
        self._speaker = speaker

    def play(self, text: str, **options: Any) -> None:
        self._speaker.speak(text, **options)

    def cancel(self) -> None:
        self._speaker.stop()


class VendorSpeaker:
    """Plays vendor-voiced speech; at most one clip plays at a time."""

    def __init__(self, api: BackendTTSClient, player: AudioPlayer,
                 fallback: Optional[SpeechSynthesisController] = None):
        self._api = api
        self._player = player
        self.is_playing = False
        self.is_loading = False
        self.error: Optional[str] = None

        strategies: List[PlaybackStrategy] = [_VendorPlayback(self)]
        if fallback is not None:
            strategies.append(PlatformPlayback(fallback, rate=FALLBACK_RATE))
        self._chain = FallbackChain(strategies)

    def _on_end(self) -> None:
        self.is_playing = False

    def speak(self, text: str, voice_id: Optional[str] = None, stability: Optional[float] = None,
              similarity_boost: Optional[float] = None) -> None:
        self.is_loading = True
        self.error = None
        self.stop()
        try:
            audio = self._api.synthesize(text, voice_id, stability, similarity_boost)
            self.is_playing = True
            self._player.play(audio, on_end=self._on_end)
        except Exception as e:
            self.error = str(e) or "Failed to generate speech"
            self.is_playing = False
            raise
        finally:
            self.is_loading = False

    def speak_with_fallback(self, text: str, voice_id: Optional[str] = None,
                            stability: Optional[float] = None,
                            similarity_boost: Optional[float] = None) -> str:
        """Returns the name of the strategy that spoke."""
        strategy = self._chain.play(
            text, voice_id=voice_id, stability=stability, similarity_boost=similarity_boost
        )
        return strategy.name

    def stop(self) -> None:
        self._player.stop()
        self.is_playing = False
