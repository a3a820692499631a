import csv
import io
import json

from voicebridge.api.routers import therapy
from voicebridge.services.elevenlabs_client import VOICE_PRESETS
from voicebridge.services.export import CSV_HEADERS


def _save(client, user_id, accuracy, duration=10, target="the cat sat", **extra):
    payload = {
        "userId": user_id,
        "targetText": target,
        "transcribedText": target,
        "duration": duration,
        "accuracy": accuracy,
        "clarityScore": accuracy,
        "overallScore": accuracy,
        "recommendations": ["Slow down"],
    }
    payload.update(extra)
    r = client.post("/api/therapy/session", json=payload)
    assert r.status_code == 200
    return r.json()["data"]


def test_analyze_requires_target_text(client, monkeypatch, recorder):
    fake = recorder(result={})
    monkeypatch.setattr(therapy, "analyze_speech", fake)
    r = client.post("/api/therapy/analyze", json={"transcribedText": "hello"})
    assert r.status_code == 400
    assert r.json()["error"] == "Target text is required"
    assert fake.calls == []


def test_analyze_empty_transcript_skips_model(client, monkeypatch, recorder):
    fake = recorder(result={})
    monkeypatch.setattr(therapy, "analyze_speech", fake)
    r = client.post("/api/therapy/analyze", json={"targetText": "Hello there", "transcribedText": "   "})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["overallScore"] == 0
    assert data["targetText"] == "Hello there"
    assert data["recommendations"][0] == "We couldn't detect any speech. Please try again."
    assert fake.calls == []


def test_analyze_passes_audience_and_persona(client, monkeypatch, recorder):
    fake = recorder(result={"accuracy": 92, "overallScore": 90})
    monkeypatch.setattr(therapy, "analyze_speech", fake)
    r = client.post(
        "/api/therapy/analyze",
        json={"targetText": "red ball", "transcribedText": "wed ball", "audience": "child", "persona": "robot"},
    )
    assert r.status_code == 200
    assert r.json()["data"]["accuracy"] == 92
    assert fake.calls[0][1] == {"audio_b64": None, "audience": "child", "persona": "robot"}


def test_analyze_failure_message(client, monkeypatch, recorder):
    monkeypatch.setattr(therapy, "analyze_speech", recorder(exc=RuntimeError("quota exceeded")))
    r = client.post("/api/therapy/analyze", json={"targetText": "a", "transcribedText": "a"})
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to analyze speech: quota exceeded"


def test_analyze_without_model_returns_zero_scores(client):
    r = client.post("/api/therapy/analyze", json={"targetText": "sun", "transcribedText": "thun"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["accuracy"] == 0
    assert data["recommendations"] == ["Keep practicing!", "Try speaking slowly and clearly."]


def test_emotion_requires_audio(client):
    r = client.post("/api/therapy/emotion", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Audio data is required"


def test_emotion_without_model_is_neutral(client):
    r = client.post("/api/therapy/emotion", json={"audioBase64": "AAAA"})
    assert r.status_code == 200
    assert r.json()["data"]["emotion"] == "neutral"
    assert r.json()["data"]["confidence"] == 0


def test_default_prompts(client, monkeypatch, recorder):
    fake = recorder(result=[])
    monkeypatch.setattr(therapy, "generate_practice_prompts", fake)

    r = client.get("/api/therapy/prompts", params={"difficulty": "hard"})
    assert [p["id"] for p in r.json()["data"]] == ["h1", "h2", "h3", "h4", "h5"]
    assert fake.calls == []

    r = client.get("/api/therapy/prompts", params={"difficulty": "impossible"})
    assert r.json()["data"][0]["id"] == "e1"


def test_tailored_prompts(client, monkeypatch, recorder):
    fake = recorder(result=[{"text": "Rabbits run round rocks.", "category": "R Sounds", "targetPhonemes": ["r"]}])
    monkeypatch.setattr(therapy, "generate_practice_prompts", fake)

    r = client.get("/api/therapy/prompts", params={"difficulty": "medium", "phonemes": "r, l ,"})
    data = r.json()["data"]
    assert data == [{
        "id": "ai_medium_0",
        "text": "Rabbits run round rocks.",
        "difficulty": "medium",
        "category": "R Sounds",
        "targetPhonemes": ["r"],
    }]
    assert fake.calls == [(("medium", ["r", "l"], None), {})]


def test_tailored_prompts_fall_back_to_defaults(client, monkeypatch, recorder):
    monkeypatch.setattr(therapy, "generate_practice_prompts", recorder(result=[]))
    r = client.get("/api/therapy/prompts", params={"category": "Greetings"})
    assert r.json()["data"][0]["id"] == "e1"


def test_generate_prompts_post(client, monkeypatch, recorder):
    monkeypatch.setattr(therapy, "generate_practice_prompts", recorder(result=[{"text": "Sip soup."}]))
    r = client.post("/api/therapy/prompts", json={"difficulty": "easy", "targetPhonemes": ["s"]})
    assert r.json()["data"][0]["id"] == "gen_easy_0"
    assert r.json()["data"][0]["targetPhonemes"] == []


def test_save_session_requires_fields(client):
    r = client.post("/api/therapy/session", json={"targetText": "hi"})
    assert r.status_code == 400
    assert r.json()["error"] == "User ID and target text are required"


def test_session_history_and_stats(client, make_user):
    user = make_user()
    for accuracy, duration in ((80, 10), (90, 20), (100, 30)):
        _save(client, user.id, accuracy, duration)

    r = client.get("/api/therapy/session", params={"userId": user.id, "limit": 2})
    data = r.json()["data"]
    assert len(data["sessions"]) == 2
    assert data["total"] == 3
    assert data["stats"]["totalDuration"] == 60
    assert data["stats"]["averageAccuracy"] == 90.0
    assert data["sessions"][0]["recommendations"] == ["Slow down"]

    r = client.get("/api/therapy/stats", params={"userId": user.id})
    assert r.json()["data"] == {
        "sessionsToday": 3,
        "totalSpeakingTime": 60,
        "wordsPracticed": 9,
        "avgAccuracy": 90,
        "avgClarityScore": 90,
        "avgOverallScore": 90,
    }


def test_stats_for_new_user_are_zero(client, make_user):
    user = make_user()
    r = client.get("/api/therapy/stats", params={"userId": user.id})
    assert r.json()["data"]["sessionsToday"] == 0
    assert r.json()["data"]["avgAccuracy"] == 0


def test_history_requires_user_id(client):
    for path in ("/api/therapy/session", "/api/therapy/stats", "/api/therapy/export"):
        r = client.get(path)
        assert r.status_code == 400
        assert r.json()["error"] == "User ID is required"


def test_export_csv(client, make_user):
    user = make_user()
    _save(client, user.id, 75, target='say "hello", please')

    r = client.get("/api/therapy/export", params={"userId": user.id, "format": "csv"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.headers["content-disposition"].startswith('attachment; filename="voicebridge-sessions-')
    assert r.headers["content-disposition"].endswith('.csv"')

    rows = list(csv.reader(io.StringIO(r.text)))
    assert rows[0] == CSV_HEADERS
    assert rows[1][1] == 'say "hello", please'
    assert rows[1][4] == "75.0"


def test_export_json(client, make_user):
    user = make_user()
    _save(client, user.id, 80)
    _save(client, user.id, 100)

    r = client.get("/api/therapy/export", params={"userId": user.id})
    assert r.headers["content-disposition"].endswith('.json"')
    body = json.loads(r.content)
    assert body["summary"]["totalSessions"] == 2
    assert body["summary"]["averageAccuracy"] == 90.0
    assert body["summary"]["totalPracticeTime"] == 20
    assert len(body["sessions"]) == 2


def test_therapy_tts_uses_preset_voice(client, monkeypatch, recorder):
    fake = recorder(result="QUJD")
    monkeypatch.setattr(therapy, "text_to_speech_base64", fake)

    r = client.post("/api/therapy/tts", json={"text": "Breathe in slowly", "speed": 0.9})
    assert r.json() == {"success": True, "data": {"audio": "QUJD", "contentType": "audio/mpeg"}}
    args, kwargs = fake.calls[0]
    assert args == ("Breathe in slowly", VOICE_PRESETS["THERAPY"])
    assert kwargs == {"stability": 0.7, "similarity_boost": 0.8, "speed": 0.9}

    client.post("/api/therapy/tts", json={"text": "Hi", "voiceId": "CALM"})
    assert fake.calls[1][0][1] == VOICE_PRESETS["CALM"]

    client.post("/api/therapy/tts", json={"text": "Hi", "voiceId": "calm"})
    assert fake.calls[2][0][1] == "calm"


def test_therapy_tts_requires_text(client):
    r = client.post("/api/therapy/tts", json={"text": ""})
    assert r.status_code == 400
    assert r.json()["error"] == "Text is required"
