from __future__ import annotations
from typing import Optional, Literal
from datetime import datetime, timezone
import uuid

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String, Text, Integer, Float, DateTime, CheckConstraint,
    ForeignKey, Index, Boolean, JSON, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.sql.expression import false

from voicebridge.db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


DisabilityType = Literal["dyspraxia", "apraxia", "stuttering", "als", "parkinsons", "other"]
FontMode = Literal["default", "dyslexic", "hyperlegible"]
TextSize = Literal["normal", "large", "extra-large"]


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "disability_severity between 1 and 10",
            name="ck_users_severity",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    # always stored lower-cased; lookups lower-case the input
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default=false()
    )
    verification_code: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    verification_code_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # disability profile
    disability_type: Mapped[str] = mapped_column(String, default="other", nullable=False)
    disability_severity: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    trigger_words: Mapped[str] = mapped_column(Text, default="[]", nullable=False)  # JSON list
    disability_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # personalization
    voice_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    speed: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)
    font_mode: Mapped[str] = mapped_column(String, default="default", nullable=False)
    text_size: Mapped[str] = mapped_column(String, default="normal", nullable=False)
    high_contrast: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reduced_motion: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )

    therapy_sessions: Mapped[list["TherapySession"]] = relationship(back_populates="user")
    bridge_exchanges: Mapped[list["BridgeExchange"]] = relationship(back_populates="user")


class TherapySession(Base):
    """
    One completed practice attempt. Rows are written once and only read
    afterwards (history, daily stats, export).
    """
    __tablename__ = "therapy_sessions"
    __table_args__ = (
        Index("idx_therapy_sessions_user_time", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    target_text: Mapped[str] = mapped_column(Text, nullable=False)
    transcribed_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # seconds
    accuracy: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    clarity_score: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    overall_score: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    word_analysis: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    phoneme_issues: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    recommendations: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    difficulty: Mapped[str] = mapped_column(String, default="easy", nullable=False)
    category: Mapped[str] = mapped_column(String, default="General", nullable=False)
    emotion: Mapped[str] = mapped_column(String, default="neutral", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="therapy_sessions")


class BridgeExchange(Base):
    __tablename__ = "bridge_exchanges"
    __table_args__ = (
        Index("idx_bridge_exchanges_user_time", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_text: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    intent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    corrections: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="bridge_exchanges")


class PhonemeProgress(Base):
    __tablename__ = "phoneme_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "phoneme_id", name="uq_phoneme_progress_user_phoneme"),
        CheckConstraint("progress between 0 and 100", name="ck_phoneme_progress_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # not a foreign key: guides can be practised before signing up ("demo-user")
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    phoneme_id: Mapped[str] = mapped_column(String(64), nullable=False)
    progress: Mapped[float] = mapped_column(Float, nullable=False)
    practice_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    accuracy_history: Mapped[list[float]] = mapped_column(JSON, default=list, nullable=False)
    last_practiced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )
