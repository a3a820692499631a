from __future__ import annotations
import json
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from voicebridge.models import TherapySession
from voicebridge.services.auth_service import isoformat


def round_half_up(value: float, ndigits: int = 0):
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """``[midnight today, midnight tomorrow)`` in UTC."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _mean(values: Sequence[float], ndigits: int = 0):
    if not values:
        return 0
    return round_half_up(sum(values) / len(values), ndigits)


def summarize_sessions(rows: Iterable[TherapySession]) -> Dict[str, Any]:
    rows = list(rows)
    return {
        "sessionsToday": len(rows),
        "totalSpeakingTime": sum(r.duration or 0 for r in rows),
        "wordsPracticed": sum(len((r.target_text or "").split()) for r in rows),
        "avgAccuracy": _mean([r.accuracy or 0 for r in rows]),
        "avgClarityScore": _mean([r.clarity_score or 0 for r in rows]),
        "avgOverallScore": _mean([r.overall_score or 0 for r in rows]),
    }


def aggregate_sessions(rows: Iterable[TherapySession]) -> Dict[str, Any]:
    """All-time totals shown next to the session history."""
    rows = list(rows)
    return {
        "totalSessions": len(rows),
        "totalDuration": sum(r.duration or 0 for r in rows),
        "averageAccuracy": _mean([r.accuracy or 0 for r in rows], 2),
        "averageClarityScore": _mean([r.clarity_score or 0 for r in rows], 2),
        "averageOverallScore": _mean([r.overall_score or 0 for r in rows], 2),
    }


def serialize_session(s: TherapySession) -> Dict[str, Any]:
    return {
        "id": s.id,
        "userId": s.user_id,
        "targetText": s.target_text,
        "transcribedText": s.transcribed_text,
        "duration": s.duration,
        "accuracy": s.accuracy,
        "clarityScore": s.clarity_score,
        "overallScore": s.overall_score,
        "wordAnalysis": json.loads(s.word_analysis or "[]"),
        "phonemeIssues": json.loads(s.phoneme_issues or "[]"),
        "recommendations": json.loads(s.recommendations or "[]"),
        "difficulty": s.difficulty,
        "category": s.category,
        "emotion": s.emotion,
        "createdAt": isoformat(s.created_at),
    }
