import asyncio
import base64
import json

import pytest
from pydub.exceptions import CouldntDecodeError

from voicebridge.services import genai_client
from voicebridge.services.genai_client import GenAIError, audio_format, audio_part, extract_json, prepare_audio


def test_extract_json_strips_fences_and_prose():
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json('```\n{"a": 2}```') == {"a": 2}
    assert extract_json('Sure! Here it is: {"emotion": "calm", "nested": {"x": [1]}} Hope that helps.') == {
        "emotion": "calm",
        "nested": {"x": [1]},
    }


def test_extract_json_rejects_non_objects():
    with pytest.raises(json.JSONDecodeError):
        extract_json("")
    with pytest.raises(json.JSONDecodeError):
        extract_json("no json here")
    with pytest.raises(ValueError):
        extract_json("[1, 2, 3]")


def test_audio_format():
    assert audio_format("audio/webm;codecs=opus") == "webm"
    assert audio_format("audio/mpeg") == "mp3"
    assert audio_format("audio/x-wav") == "wav"
    assert audio_format(None) == "webm"
    assert audio_part("QUJD", "wav") == {
        "type": "input_audio",
        "input_audio": {"data": "QUJD", "format": "wav"},
    }
    with pytest.raises(ValueError):
        audio_part("QUJD", "webm")


class _FakeSegment:
    """Stands in for pydub.AudioSegment; ``export`` writes a fixed WAV payload."""

    decoded = []

    @classmethod
    def from_file(cls, file, format=None):
        if format == "broken":
            raise CouldntDecodeError("bad header")
        cls.decoded.append((file.read(), format))
        return cls()

    def export(self, out, format=None):
        assert format == "wav"
        out.write(b"RIFFwav")


@pytest.fixture
def fake_segment(monkeypatch):
    _FakeSegment.decoded = []
    monkeypatch.setattr(genai_client, "AudioSegment", _FakeSegment)
    return _FakeSegment


def test_prepare_audio_transcodes_browser_recordings(fake_segment):
    data, fmt = prepare_audio(base64.b64encode(b"webmbytes").decode(), "audio/webm;codecs=opus")
    assert fmt == "wav"
    assert base64.b64decode(data) == b"RIFFwav"
    assert fake_segment.decoded == [(b"webmbytes", "webm")]


def test_prepare_audio_passes_wav_and_mp3_through(fake_segment):
    assert prepare_audio("QUJD", "audio/wav") == ("QUJD", "wav")
    assert prepare_audio("QUJD", "audio/mpeg") == ("QUJD", "mp3")
    assert fake_segment.decoded == []


def test_prepare_audio_failure_is_a_vendor_error(fake_segment):
    with pytest.raises(GenAIError):
        prepare_audio("QUJD", "audio/broken")
    with pytest.raises(GenAIError):
        prepare_audio("not base64!", "audio/ogg")


def test_client_requires_key():
    with pytest.raises(GenAIError):
        genai_client.get_client()
    assert asyncio.run(genai_client.generate_image("a cat")) is None


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = type("Message", (), {"content": self.content})()
        choice = type("Choice", (), {"message": message})()
        return type("Completion", (), {"choices": [choice]})()


class _FakeClient:
    def __init__(self, content):
        self.completions = _FakeCompletions(content)
        self.chat = type("Chat", (), {"completions": self.completions})()


def test_complete_json_text_and_audio(monkeypatch):
    fake = _FakeClient('{"ok": true}')
    monkeypatch.setattr(genai_client, "get_client", lambda: fake)

    assert asyncio.run(genai_client.complete_json("prompt", system_prompt="be kind")) == {"ok": True}
    kwargs = fake.completions.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": "be kind"}
    assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}

    asyncio.run(genai_client.complete_json("listen", audio_b64="QUJD", mime_type="audio/mpeg"))
    kwargs = fake.completions.kwargs
    assert kwargs["modalities"] == ["text"]
    assert "response_format" not in kwargs
    content = kwargs["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "listen"}
    assert content[1]["input_audio"]["format"] == "mp3"


class _StrictCompletions(_FakeCompletions):
    """Rejects audio the chat API would refuse."""

    def __init__(self, content):
        super().__init__(content)
        self.formats = []

    def create(self, **kwargs):
        for part in kwargs["messages"][-1]["content"]:
            if part["type"] == "input_audio":
                fmt = part["input_audio"]["format"]
                if fmt not in ("wav", "mp3"):
                    raise genai_client.OpenAIError(f"Unsupported audio format: {fmt}")
                self.formats.append(fmt)
        return super().create(**kwargs)


def test_recorded_audio_reaches_model_as_wav(client, monkeypatch, fake_segment):
    fake = _FakeClient('{"originalText": "hi", "correctedText": "Hi.", "emotion": "Happy", "validation": "Nice!"}')
    fake.completions = _StrictCompletions(fake.completions.content)
    fake.chat.completions = fake.completions
    monkeypatch.setattr(genai_client, "get_client", lambda: fake)

    r = client.post("/api/bridge/correct", json={"audioBase64": "QUJD"})
    assert r.json()["data"]["correctedText"] == "Hi."

    r = client.post("/api/kids/color-reporter", json={"color": "Red", "audioData": "QUJD"})
    assert r.json()["data"]["emotion"] == "Happy"

    assert fake.completions.formats == ["wav", "wav"]
