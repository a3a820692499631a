def test_update_settings(client, make_user, load_user):
    user = make_user()
    r = client.patch(
        "/api/user/settings",
        json={"userId": user.id, "voiceId": "CALM", "speed": 1.2, "fontMode": "dyslexic", "highContrast": True},
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Settings updated successfully"
    settings = r.json()["data"]["settings"]
    assert settings == {
        "voiceId": "CALM",
        "speed": 1.2,
        "fontMode": "dyslexic",
        "textSize": "normal",
        "highContrast": True,
        "reducedMotion": False,
    }

    # explicit null clears the voice; omitted fields stay as they are
    r = client.patch("/api/user/settings", json={"userId": user.id, "voiceId": None})
    assert r.json()["data"]["settings"]["voiceId"] is None
    assert r.json()["data"]["settings"]["fontMode"] == "dyslexic"
    assert load_user(user.id).voice_id is None


def test_settings_out_of_range(client, make_user):
    user = make_user()
    for payload in ({"speed": 2.0}, {"fontMode": "comic-sans"}, {"textSize": "huge"}):
        r = client.patch("/api/user/settings", json={"userId": user.id, **payload})
        assert r.status_code == 400, payload
        assert r.json()["success"] is False


def test_settings_unknown_user(client):
    r = client.patch("/api/user/settings", json={"speed": 1.0})
    assert r.status_code == 400
    assert r.json()["error"] == "User ID is required"

    r = client.patch("/api/user/settings", json={"userId": "nobody", "speed": 1.0})
    assert r.status_code == 404
    assert r.json()["error"] == "User not found"


def test_update_disability_profile(client, make_user):
    user = make_user(trigger_words=["hello"])
    r = client.patch(
        "/api/user/disability-profile",
        json={"userId": user.id, "type": "apraxia", "severity": 8, "triggerWords": ["p", "b"], "description": "mild"},
    )
    profile = r.json()["data"]["disabilityProfile"]
    assert profile == {"type": "apraxia", "severity": 8, "triggerWords": ["p", "b"], "description": "mild"}

    r = client.patch("/api/user/disability-profile", json={"userId": user.id, "severity": 11})
    assert r.status_code == 400


def test_update_profile(client, make_user):
    user = make_user(email="ada@example.com")
    make_user(email="grace@example.com", name="Grace")

    r = client.patch("/api/user/profile", json={"userId": user.id})
    assert r.status_code == 400
    assert r.json()["error"] == "At least one field (name or email) must be provided"

    r = client.patch("/api/user/profile", json={"userId": user.id, "email": "Grace@Example.com"})
    assert r.status_code == 409
    assert r.json()["error"] == "Email is already in use"

    r = client.patch("/api/user/profile", json={"userId": user.id, "email": "not-an-email"})
    assert r.status_code == 400

    r = client.patch("/api/user/profile", json={"userId": user.id, "name": "Ada L.", "email": "ADA.L@example.com"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Ada L."
    assert r.json()["data"]["email"] == "ada.l@example.com"


def test_health(client):
    assert client.get("/health").json() == {"ok": True}
