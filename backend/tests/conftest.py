"""
QnA Backend — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        fresh SQLite file database with the full schema
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       one AsyncSession for service-level tests
    ├── fake_censor:      in-process TextCensor, no HTTP
    ├── app:              create_app() with DB and censor dependencies overridden
    └── test_client:      HTTPX AsyncClient talking to `app` over ASGITransport
"""

import os
import tempfile

# Override settings for testing BEFORE any qna imports
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='qna_test_')}/app.db"
os.environ["BAD_WORDS_API_KEY"] = "test-key-not-real"
os.environ["SESSION_TOKEN_KEY"] = "test-session-key"
os.environ["LOG_LEVEL"] = "WARNING"

import re
from typing import AsyncGenerator, Iterable, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from qna.database import Base, get_db_session
from qna.dependencies import get_censor
from qna.models.account import Account  # noqa: F401
from qna.models.answer import Answer  # noqa: F401
from qna.models.question import Question  # noqa: F401
from qna.schemas.censor import BadWord, CensorResult
from qna.services.censor_base import TextCensor


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeCensor(TextCensor):
    """
    Censors a fixed word list locally, the way the bad-words API would.

    `calls` records every text received; `fail_with` makes every call raise.
    """

    def __init__(self, words: Iterable[str] = ("shit", "damn")):
        self.words = [w.lower() for w in words]
        self.calls: List[str] = []
        self.fail_with = None

    async def check_profanity(self, text: str) -> CensorResult:
        self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with

        found = []
        for word in self.words:
            for match in re.finditer(re.escape(word), text, flags=re.IGNORECASE):
                found.append(
                    BadWord(
                        original=match.group(0),
                        word=word,
                        start=match.start(),
                        end=match.end(),
                        replaced_len=match.end() - match.start(),
                    )
                )
        result = CensorResult(
            content=text,
            bad_words_total=len(found),
            bad_words_list=found,
            censored_content=text,
        )
        result.apply()
        return result

    async def health_check(self) -> bool:
        return True


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Provides an async engine on a throwaway SQLite file with all tables created.

    NullPool: every session gets its own connection, so tests can run
    sessions concurrently the way separate requests would.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'qna.db'}",
        poolclass=NullPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def account_ids(session_factory) -> List[int]:
    """Two stored accounts: the owner and an intruder."""
    async with session_factory() as session:
        owner = Account(email="owner@example.com", password="x")
        intruder = Account(email="intruder@example.com", password="x")
        session.add_all([owner, intruder])
        await session.commit()
        return [owner.id, intruder.id]


@pytest.fixture
def fake_censor() -> FakeCensor:
    return FakeCensor()


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory, fake_censor):
    """A fresh application wired to the test database and the fake censor."""
    from qna.main import create_app

    application = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    application.dependency_overrides[get_censor] = lambda: fake_censor
    return application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/questions")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
