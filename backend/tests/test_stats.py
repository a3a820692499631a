from datetime import datetime, timedelta, timezone

from voicebridge.models import TherapySession
from voicebridge.services.export import export_filename
from voicebridge.services.stats import day_window, round_half_up, summarize_sessions


def _session(accuracy, duration=0, target="hello world"):
    return TherapySession(
        user_id="u1",
        target_text=target,
        duration=duration,
        accuracy=accuracy,
        clarity_score=accuracy,
        overall_score=accuracy,
    )


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(84.445, 2) == 84.45
    assert round_half_up(0, 2) == 0.0


def test_day_window_is_utc():
    start, end = day_window(datetime(2026, 10, 18, 23, 59, tzinfo=timezone.utc))
    assert start == datetime(2026, 10, 18, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1)

    # 01:30 in UTC+3 is still the previous UTC day
    plus_three = timezone(timedelta(hours=3))
    start, _ = day_window(datetime(2026, 10, 19, 1, 30, tzinfo=plus_three))
    assert start == datetime(2026, 10, 18, tzinfo=timezone.utc)

    start, _ = day_window(datetime(2026, 10, 18, 12, 0))
    assert start == datetime(2026, 10, 18, tzinfo=timezone.utc)


def test_summarize_sessions():
    rows = [_session(80, 10), _session(90, 20, "one"), _session(100, 30, " two  words ")]
    assert summarize_sessions(rows) == {
        "sessionsToday": 3,
        "totalSpeakingTime": 60,
        "wordsPracticed": 5,
        "avgAccuracy": 90,
        "avgClarityScore": 90,
        "avgOverallScore": 90,
    }


def test_summarize_no_sessions():
    assert summarize_sessions([]) == {
        "sessionsToday": 0,
        "totalSpeakingTime": 0,
        "wordsPracticed": 0,
        "avgAccuracy": 0,
        "avgClarityScore": 0,
        "avgOverallScore": 0,
    }


def test_summarize_rounds_half_up():
    assert summarize_sessions([_session(84), _session(85)])["avgAccuracy"] == 85


def test_export_filename():
    now = datetime(2026, 3, 7, 9, 0, tzinfo=timezone.utc)
    assert export_filename("csv", now) == "voicebridge-sessions-2026-03-07.csv"
