"""
QnA Backend — HTTP API Tests
==============================

What:  End-to-end request flows through create_app(): routing, dependencies,
       exception handlers and status codes.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client), real
       SQLite database, FakeCensor instead of the bad-words API.

What we test:
    ✅ register → login → create → read → update → delete
    ✅ 401 for missing/invalid sessions and for non-owners
    ✅ 404 for missing questions and unknown routes
    ✅ 400 for bad pagination, 422 for malformed bodies and duplicates
    ✅ 500 for censor failures, with nothing stored
"""

import pytest

from qna.exceptions import CensorServerError
from qna.services.auth_service import issue_token

QUESTION = {"title": "How do I shit", "content": "Damn, what now?", "tags": ["help"]}


async def register_and_login(client, email: str, password: str = "s3cret") -> dict:
    """Returns Authorization headers for a freshly registered account."""
    response = await client.post("/register", json={"email": email, "password": password})
    assert response.status_code == 201
    response = await client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": response.json()}


class TestAuthEndpoints:
    """Tests for /register and /login."""

    @pytest.mark.asyncio
    async def test_register(self, test_client):
        response = await test_client.post(
            "/register", json={"email": "alice@example.com", "password": "s3cret"}
        )
        assert response.status_code == 201
        assert response.json() == {"message": "Account created"}
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_register_malformed_email(self, test_client):
        response = await test_client.post("/register", json={"email": "alice", "password": "x"})
        assert response.status_code == 422
        assert response.json()["error"] == "unprocessable_entity"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, test_client):
        body = {"email": "alice@example.com", "password": "s3cret"}
        assert (await test_client.post("/register", json=body)).status_code == 201

        response = await test_client.post("/register", json=body)
        assert response.status_code == 422
        assert response.json()["error"] == "constraint_violation"

    @pytest.mark.asyncio
    async def test_login_returns_token_string(self, test_client):
        headers = await register_and_login(test_client, "alice@example.com")
        assert isinstance(headers["Authorization"], str)
        assert headers["Authorization"].count(".") == 2

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, test_client):
        await test_client.post("/register", json={"email": "alice@example.com", "password": "s3cret"})
        response = await test_client.post(
            "/login", json={"email": "alice@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "wrong credentials combination"


class TestQuestionEndpoints:
    """Tests for /questions."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, test_client):
        headers = await register_and_login(test_client, "alice@example.com")

        response = await test_client.post("/questions", json=QUESTION, headers=headers)
        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "How do I ****"
        assert created["content"] == "****, what now?"
        assert created["tags"] == ["help"]

        response = await test_client.get(f"/questions/{created['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "How do I ****"

        response = await test_client.put(
            f"/questions/{created['id']}",
            json={"title": "Updated", "content": "Cleaner now"},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Updated"
        assert response.json()["tags"] is None

        response = await test_client.delete(f"/questions/{created['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Question deleted"}

        response = await test_client.get(f"/questions/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_with_pagination(self, test_client):
        headers = await register_and_login(test_client, "alice@example.com")
        for i in range(3):
            body = {"title": f"q{i}", "content": "c"}
            assert (await test_client.post("/questions", json=body, headers=headers)).status_code == 201

        response = await test_client.get("/questions")
        assert [q["title"] for q in response.json()] == ["q0", "q1", "q2"]

        response = await test_client.get("/questions", params={"offset": "1", "limit": "1"})
        assert [q["title"] for q in response.json()] == ["q1"]

        response = await test_client.get("/questions", params={"offset": "10"})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_bad_pagination(self, test_client):
        response = await test_client.get("/questions", params={"offset": "abc"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_oversized_limit_is_400(self, test_client):
        response = await test_client.get("/questions", params={"limit": "99999999999999999999"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

        response = await test_client.get("/questions/1/answers", params={"offset": "1_0"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_requires_session(self, test_client):
        response = await test_client.post("/questions", json=QUESTION)
        assert response.status_code == 401

        response = await test_client.post(
            "/questions", json=QUESTION, headers={"Authorization": "garbage"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "auth token could not be deciphered"

    @pytest.mark.asyncio
    async def test_create_malformed_body(self, test_client):
        headers = {"Authorization": issue_token(1)}
        response = await test_client.post("/questions", json={"title": "only a title"}, headers=headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_censor_failure_is_500_and_stores_nothing(self, test_client, fake_censor):
        headers = await register_and_login(test_client, "alice@example.com")
        fake_censor.fail_with = CensorServerError(503, "down")

        response = await test_client.post("/questions", json=QUESTION, headers=headers)
        assert response.status_code == 500
        assert response.json()["error"] == "external_api_error"

        fake_censor.fail_with = None
        assert (await test_client.get("/questions")).json() == []

    @pytest.mark.asyncio
    async def test_non_owner_cannot_modify(self, test_client):
        owner = await register_and_login(test_client, "owner@example.com")
        intruder = await register_and_login(test_client, "intruder@example.com")
        created = (await test_client.post("/questions", json=QUESTION, headers=owner)).json()

        response = await test_client.put(
            f"/questions/{created['id']}",
            json={"title": "hijacked", "content": "x"},
            headers=intruder,
        )
        assert response.status_code == 401
        assert response.json()["message"] == "unauthorized, no permission to modify the resource"

        response = await test_client.delete(f"/questions/{created['id']}", headers=intruder)
        assert response.status_code == 401

        response = await test_client.get(f"/questions/{created['id']}")
        assert response.json()["title"] == created["title"]

    @pytest.mark.asyncio
    async def test_modify_missing_question(self, test_client):
        headers = await register_and_login(test_client, "alice@example.com")

        response = await test_client.put(
            "/questions/999", json={"title": "t", "content": "c"}, headers=headers
        )
        assert response.status_code == 404

        response = await test_client.delete("/questions/999", headers=headers)
        assert response.status_code == 404


class TestAnswerEndpoints:
    """Tests for /questions/{id}/answers."""

    @pytest.mark.asyncio
    async def test_answer_any_question(self, test_client):
        owner = await register_and_login(test_client, "owner@example.com")
        other = await register_and_login(test_client, "other@example.com")
        created = (await test_client.post("/questions", json=QUESTION, headers=owner)).json()

        response = await test_client.post(
            f"/questions/{created['id']}/answers", json={"content": "damn easy"}, headers=other
        )
        assert response.status_code == 201
        assert response.json()["content"] == "**** easy"
        assert response.json()["question_id"] == created["id"]

        response = await test_client.get(f"/questions/{created['id']}/answers")
        assert response.status_code == 200
        assert [a["content"] for a in response.json()] == ["**** easy"]

    @pytest.mark.asyncio
    async def test_answer_missing_question(self, test_client):
        headers = await register_and_login(test_client, "alice@example.com")
        response = await test_client.post(
            "/questions/999/answers", json={"content": "hello"}, headers=headers
        )
        assert response.status_code == 404

        response = await test_client.get("/questions/999/answers")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_answer_requires_session(self, test_client):
        response = await test_client.post("/questions/1/answers", json={"content": "hello"})
        assert response.status_code == 401


class TestServiceEndpoints:
    """Tests for /health and unmatched routes."""

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/nope")
        assert response.status_code == 404
        assert response.json()["message"] == "route not found"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["censor"] == "configured"
        assert body["database"] == "connected"
        assert body["status"] == "healthy"
