"""
QnA Backend — Application Package Initializer
===============================================

What: The `qna` package: a question & answer API with censored content and
      account-owned resources.
Who:  Imported by uvicorn (`qna.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, sessions, ownership
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← censoring, store operations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
