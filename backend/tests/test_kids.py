import asyncio

from voicebridge.api.routers import kids
from voicebridge.services import kids_ai


def test_inputs_checked_before_model(client, monkeypatch, recorder):
    fake = recorder(result={})
    for name in ("analyze_color_emotion", "analyze_emotion_and_reframe", "generate_play_response", "generate_world"):
        monkeypatch.setattr(kids, name, fake)

    cases = [
        ("/api/kids/color-reporter", {"color": "Blue"}, "Missing color or audio data"),
        ("/api/kids/mirror", {"persona": "robot"}, "Missing text or audio data"),
        ("/api/kids/play", {"scenario": "picnic"}, "Missing scenario or child input"),
        ("/api/kids/world-build", {}, "Missing input"),
    ]
    for path, payload, message in cases:
        r = client.post(path, json=payload)
        assert r.status_code == 400, path
        assert r.json()["error"] == message
    assert fake.calls == []


def test_color_reporter(client, monkeypatch, recorder):
    fake = recorder(result={"emotion": "Calm", "validation": "Blue is peaceful."})
    monkeypatch.setattr(kids, "analyze_color_emotion", fake)
    r = client.post("/api/kids/color-reporter", json={"color": "Blue", "audioData": "AAAA", "persona": "guide"})
    assert r.json() == {"success": True, "data": {"emotion": "Calm", "validation": "Blue is peaceful."}}
    assert fake.calls == [(("Blue", "AAAA", "guide"), {})]


def test_mirror_audio_only_uses_placeholder_text(client, monkeypatch, recorder):
    fake = recorder(result={"emotion": "Sad"})
    monkeypatch.setattr(kids, "analyze_emotion_and_reframe", fake)
    client.post("/api/kids/mirror", json={"audioData": "AAAA"})
    assert fake.calls[0][0] == ("Audio input", "AAAA", None)


def test_mirror_vendor_failure_is_an_error(client):
    # no OpenAI key configured
    r = client.post("/api/kids/mirror", json={"text": "I hate my homework"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to analyze emotion"}


def test_mirror_unreadable_reply_uses_default(monkeypatch, recorder):
    monkeypatch.setattr(kids_ai, "complete_json", recorder(exc=ValueError("not json")))
    result = asyncio.run(kids_ai.analyze_emotion_and_reframe("I'm mad"))
    assert result == {
        "emotion": "Neutral",
        "reframe": "I am doing my best.",
        "comfortingMessage": "I'm listening.",
        "emoji": "🙂",
    }


def test_play_passes_history(client, monkeypatch, recorder):
    fake = recorder(result={"message": "Would you like more tea?", "action": "*pours tea*"})
    monkeypatch.setattr(kids, "generate_play_response", fake)
    r = client.post(
        "/api/kids/play",
        json={"scenario": "picnic", "childInput": "more cookies", "history": ["hi", "hello"]},
    )
    assert r.json()["data"]["action"] == "*pours tea*"
    assert fake.calls[0][0] == ("picnic", "more cookies", ["hi", "hello"], None)


def test_play_falls_back_without_model(client):
    r = client.post("/api/kids/play", json={"scenario": "grumpy_dragon", "childInput": "blast off"})
    assert r.status_code == 200
    assert r.json()["data"]["message"] == "That sounds fun! What happens next?"


def test_world_build_with_and_without_image(client, monkeypatch, recorder):
    monkeypatch.setattr(kids, "generate_world", recorder(result={"story": "A candy castle.", "imagePrompt": "candy castle"}))

    illustration = recorder(result=None)
    monkeypatch.setattr(kids, "generate_illustration", illustration)
    r = client.post("/api/kids/world-build", json={"text": "candy castle"})
    assert r.json()["data"] == {"story": "A candy castle.", "imagePrompt": "candy castle"}
    assert illustration.calls == [(("candy castle",), {})]

    monkeypatch.setattr(kids, "generate_illustration", recorder(result="data:image/png;base64,AAAA"))
    r = client.post("/api/kids/world-build", json={"audioData": "AAAA"})
    assert r.json()["data"]["image"] == "data:image/png;base64,AAAA"


def test_world_falls_back_without_model():
    world = asyncio.run(kids_ai.generate_world("a floating island"))
    assert world["story"].startswith("A magical place appears in the mist")
    assert asyncio.run(kids_ai.generate_illustration(world["imagePrompt"])) is None


def test_illustration_prompt(monkeypatch, recorder):
    fake = recorder(result="data:image/png;base64,QQ==")
    monkeypatch.setattr(kids_ai, "generate_image", fake)
    assert asyncio.run(kids_ai.generate_illustration("")) is None
    assert asyncio.run(kids_ai.generate_illustration("a dragon")) == "data:image/png;base64,QQ=="
    assert fake.calls[0][0][0].startswith("A cute, magical, child-friendly illustration of: a dragon.")
