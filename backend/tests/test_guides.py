from voicebridge.services.phoneme_data import CATEGORIES, PHONEME_GUIDES, filter_guides


def test_catalog_shape():
    ids = [g["id"] for g in PHONEME_GUIDES]
    assert len(ids) == 15
    assert len(set(ids)) == len(ids)
    for guide in PHONEME_GUIDES:
        assert guide["category"] in CATEGORIES
        assert guide["difficulty"] in ("easy", "medium", "hard")
        assert guide["examples"]


def test_filter_guides():
    fricatives = filter_guides(category="fricatives")
    assert fricatives
    assert all(g["category"] == "Fricatives" for g in fricatives)
    assert all(g["difficulty"] == "hard" for g in filter_guides(difficulty="hard"))
    assert filter_guides(category="Clicks") == []


def test_list_and_get_guides(client):
    r = client.get("/api/guides")
    assert r.json()["count"] == 15

    r = client.get("/api/guides", params={"category": "Nasals", "difficulty": "easy"})
    assert {g["id"] for g in r.json()["data"]} == {"m", "n"}

    r = client.get("/api/guides/sh")
    assert r.json()["data"]["phoneme"] == "/ʃ/"

    r = client.get("/api/guides/xx")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Phoneme guide not found"}


def test_progress_validation(client):
    r = client.post("/api/guides/progress", json={"phonemeId": "s"})
    assert r.status_code == 400
    assert r.json()["error"] == "phonemeId and progress are required"

    r = client.post("/api/guides/progress", json={"phonemeId": "s", "progress": 101})
    assert r.status_code == 400
    assert r.json()["error"] == "Progress must be between 0 and 100"


def test_progress_tracking(client):
    r = client.post("/api/guides/progress", json={"userId": "u1", "phonemeId": "s", "progress": 40, "accuracy": 70})
    data = r.json()["data"]
    assert r.json()["message"] == "Progress updated successfully"
    assert data["practiceCount"] == 1
    assert data["progress"] == 40
    assert data["accuracyHistory"] == [70]
    assert data["lastPracticedAt"].endswith("Z")

    # without accuracy the progress value is recorded
    r = client.post("/api/guides/progress", json={"userId": "u1", "phonemeId": "s", "progress": 55})
    assert r.json()["data"]["accuracyHistory"] == [70, 55]

    for i in range(12):
        r = client.post("/api/guides/progress", json={"userId": "u1", "phonemeId": "s", "progress": 60, "accuracy": i})
    data = r.json()["data"]
    assert data["practiceCount"] == 14
    assert data["accuracyHistory"] == list(range(2, 12))

    r = client.get("/api/guides/progress", params={"userId": "u1", "phonemeId": "s"})
    assert r.json()["data"]["progress"] == 60

    r = client.get("/api/guides/progress", params={"userId": "u1", "phonemeId": "r"})
    assert r.json()["data"] is None


def test_progress_reset(client):
    for phoneme in ("s", "r"):
        client.post("/api/guides/progress", json={"phonemeId": phoneme, "progress": 10})

    r = client.get("/api/guides/progress")
    assert r.json()["count"] == 2

    r = client.delete("/api/guides/progress", params={"phonemeId": "s"})
    assert r.json()["message"] == "Progress reset for phoneme s"
    assert [p["phonemeId"] for p in client.get("/api/guides/progress").json()["data"]] == ["r"]

    r = client.delete("/api/guides/progress")
    assert r.json() == {"success": True, "message": "All progress reset"}
    assert client.get("/api/guides/progress").json()["count"] == 0
