from __future__ import annotations
import csv
import io
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from voicebridge.models import TherapySession
from voicebridge.services.auth_service import isoformat
from voicebridge.services.stats import aggregate_sessions

CSV_HEADERS = [
    "Date",
    "Target Text",
    "Transcribed Text",
    "Duration (seconds)",
    "Accuracy (%)",
    "Clarity Score (%)",
    "Overall Score (%)",
    "Difficulty",
    "Category",
    "Emotion",
]


def export_filename(fmt: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"voicebridge-sessions-{now.strftime('%Y-%m-%d')}.{fmt}"


def sessions_to_csv(sessions: Sequence[TherapySession]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for s in sessions:
        writer.writerow([
            isoformat(s.created_at),
            s.target_text,
            s.transcribed_text,
            s.duration,
            f"{s.accuracy:.1f}",
            f"{s.clarity_score:.1f}",
            f"{s.overall_score:.1f}",
            s.difficulty,
            s.category,
            s.emotion,
        ])
    return buf.getvalue()


def sessions_to_json(sessions: Sequence[TherapySession], now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    totals = aggregate_sessions(sessions)
    data: Dict[str, Any] = {
        "exportedAt": isoformat(now),
        "summary": {
            "totalSessions": totals["totalSessions"],
            "totalPracticeTime": totals["totalDuration"],
            "averageAccuracy": totals["averageAccuracy"],
            "averageClarityScore": totals["averageClarityScore"],
            "averageOverallScore": totals["averageOverallScore"],
        },
        "sessions": [
            {
                "id": s.id,
                "date": isoformat(s.created_at),
                "targetText": s.target_text,
                "transcribedText": s.transcribed_text,
                "duration": s.duration,
                "accuracy": s.accuracy,
                "clarityScore": s.clarity_score,
                "overallScore": s.overall_score,
                "difficulty": s.difficulty,
                "category": s.category,
                "emotion": s.emotion,
                "wordAnalysis": json.loads(s.word_analysis or "[]"),
                "phonemeIssues": json.loads(s.phoneme_issues or "[]"),
                "recommendations": json.loads(s.recommendations or "[]"),
            }
            for s in sessions
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
