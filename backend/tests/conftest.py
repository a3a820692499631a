import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from voicebridge.db import Base, get_db
from voicebridge.main import app
from voicebridge.models import User
from voicebridge.services import genai_client
from voicebridge.services.auth_service import hash_password

PASSWORD = "secret1"


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    # no vendor credentials: every AI / TTS call fails unless a test patches it
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ELEVEN_API_KEY", raising=False)
    monkeypatch.delenv("ELEVENLABS_DEFAULT_VOICE_ID", raising=False)
    monkeypatch.setenv("VERIFICATION_CODE_OVERRIDE", "123456")
    genai_client.reset_client()
    yield
    genai_client.reset_client()


async def _create_all(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(_create_all(engine))
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    # not used as a context manager: the lifespan would create tables on the real engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    def _make(email="ada@example.com", name="Ada", verified=True, code=None,
              expires_in=timedelta(hours=24), trigger_words=(), **fields):
        async def _insert():
            async with session_factory() as db:
                user = User(
                    email=email,
                    name=name,
                    password_hash=hash_password(PASSWORD),
                    is_email_verified=verified,
                    verification_code=code,
                    verification_code_expires_at=(
                        datetime.now(timezone.utc) + expires_in if code else None
                    ),
                    trigger_words=json.dumps(list(trigger_words)),
                    **fields,
                )
                db.add(user)
                await db.commit()
                return user

        return asyncio.run(_insert())

    return _make


@pytest.fixture
def load_user(session_factory):
    def _load(user_id):
        async def _get():
            async with session_factory() as db:
                return await db.get(User, user_id)

        return asyncio.run(_get())

    return _load


class Recorder:
    """Async stand-in for a service function; remembers every call."""

    def __init__(self, result=None, exc=None):
        self.result = result
        self.exc = exc
        self.calls = []

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def recorder():
    return Recorder
