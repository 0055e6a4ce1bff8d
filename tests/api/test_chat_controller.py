"""
API tests for the chat controller.

Every endpoint requires a token; bodies are camelCase JSON.
"""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.factories import DEFAULT_REPLY, build_session, persist


class TestChatSessionEndpoints:
    """Test cases for /api/chat/sessions."""

    @pytest.mark.asyncio
    async def test_create_session(self, authenticated_client: AsyncClient, test_user):
        response = await authenticated_client.post("/api/chat/sessions", json={"title": "Trip planning"})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Trip planning"
        assert data["messages"] == []
        assert data["isActive"] is True
        assert data["userId"] == str(test_user.id)
        assert {"id", "createdAt", "updatedAt"} <= data.keys()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, {}, {"title": ""}])
    async def test_create_session_default_title(self, authenticated_client: AsyncClient, body):
        if body is None:
            response = await authenticated_client.post("/api/chat/sessions")
        else:
            response = await authenticated_client.post("/api/chat/sessions", json=body)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["title"] == "New Chat"

    @pytest.mark.asyncio
    async def test_create_session_requires_token(self, client: AsyncClient):
        response = await client.post("/api/chat/sessions", json={"title": "Nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_list_sessions(self, authenticated_client: AsyncClient, test_db, test_user, test_user_2):
        long_reply = "x" * 80
        await persist(test_db, build_session(test_user.id, "Hi", long_reply, title="Greeting"))
        await persist(test_db, build_session(test_user_2.id, "Not yours", title="Other"))

        response = await authenticated_client.get("/api/chat/sessions")

        assert response.status_code == status.HTTP_200_OK
        sessions = response.json()
        assert len(sessions) == 1
        assert sessions[0]["title"] == "Greeting"
        assert sessions[0]["messageCount"] == 2
        assert sessions[0]["lastMessage"] == "x" * 50
        assert "messages" not in sessions[0]

    @pytest.mark.asyncio
    async def test_list_sessions_most_recent_first(self, authenticated_client: AsyncClient):
        first = (await authenticated_client.post("/api/chat/sessions", json={"title": "First"})).json()
        await authenticated_client.post("/api/chat/sessions", json={"title": "Second"})

        await authenticated_client.post(
            "/api/chat/message", json={"sessionId": first["id"], "message": "Bump"}
        )
        response = await authenticated_client.get("/api/chat/sessions")

        assert [s["title"] for s in response.json()] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_get_session(self, authenticated_client: AsyncClient, test_db, test_user):
        session = await persist(test_db, build_session(test_user.id, "Hi", "Hello!", title="Chat"))

        response = await authenticated_client.get(f"/api/chat/sessions/{session.id}")

        assert response.status_code == status.HTTP_200_OK
        messages = response.json()["messages"]
        assert [(m["role"], m["content"]) for m in messages] == [("user", "Hi"), ("model", "Hello!")]
        assert all("timestamp" in m for m in messages)

    @pytest.mark.asyncio
    async def test_get_session_of_other_user(
        self, authenticated_client: AsyncClient, test_db, test_user_2
    ):
        session = await persist(test_db, build_session(test_user_2.id, "Private", title="Theirs"))

        response = await authenticated_client.get(f"/api/chat/sessions/{session.id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["message"] == "Chat session not found"
        assert data["error_code"] == "CHAT_SESSION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_session_not_found(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"/api/chat/sessions/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_session_malformed_id(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/chat/sessions/not-an-id")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_update_session_title(self, authenticated_client: AsyncClient):
        created = (await authenticated_client.post("/api/chat/sessions")).json()

        response = await authenticated_client.put(
            f"/api/chat/sessions/{created['id']}", json={"title": "Renamed"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Renamed"

    @pytest.mark.asyncio
    async def test_update_session_empty_title_ignored(self, authenticated_client: AsyncClient):
        created = (await authenticated_client.post("/api/chat/sessions", json={"title": "Keep"})).json()

        response = await authenticated_client.put(f"/api/chat/sessions/{created['id']}", json={"title": ""})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Keep"

    @pytest.mark.asyncio
    async def test_update_session_of_other_user(
        self, authenticated_client: AsyncClient, test_db, test_user_2
    ):
        session = await persist(test_db, build_session(test_user_2.id, title="Theirs"))

        response = await authenticated_client.put(
            f"/api/chat/sessions/{session.id}", json={"title": "Hijacked"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_session(self, authenticated_client: AsyncClient):
        created = (await authenticated_client.post("/api/chat/sessions")).json()

        response = await authenticated_client.delete(f"/api/chat/sessions/{created['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Chat session deleted successfully"}

        follow_up = await authenticated_client.get(f"/api/chat/sessions/{created['id']}")
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_session_of_other_user(
        self, authenticated_client: AsyncClient, test_db, test_user_2, auth_headers_2
    ):
        session = await persist(test_db, build_session(test_user_2.id, title="Theirs"))
        session_id = session.id

        response = await authenticated_client.delete(f"/api/chat/sessions/{session_id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

        still_there = await authenticated_client.get(
            f"/api/chat/sessions/{session_id}", headers=auth_headers_2
        )
        assert still_there.status_code == status.HTTP_200_OK


class TestChatMessageEndpoint:
    """Test cases for POST /api/chat/message."""

    @pytest.mark.asyncio
    async def test_message_creates_session(self, authenticated_client: AsyncClient, mock_provider):
        response = await authenticated_client.post("/api/chat/message", json={"message": "Hello"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["reply"] == DEFAULT_REPLY
        assert data["sessionId"] == data["session"]["id"]
        assert data["session"]["title"] == "Hello"
        assert [m["role"] for m in data["session"]["messages"]] == ["user", "model"]
        mock_provider.send.assert_awaited_once_with([], "Hello")

    @pytest.mark.asyncio
    async def test_message_in_existing_session(self, authenticated_client: AsyncClient, mock_provider):
        created = (await authenticated_client.post("/api/chat/sessions")).json()

        first = await authenticated_client.post(
            "/api/chat/message", json={"sessionId": created["id"], "message": "Hello, how are you?"}
        )
        assert first.json()["session"]["title"] == "Hello, how are you?"

        mock_provider.send.return_value = "Sunny and warm."
        second = await authenticated_client.post(
            "/api/chat/message", json={"sessionId": created["id"], "message": "What's the weather?"}
        )

        assert second.status_code == status.HTTP_200_OK
        data = second.json()
        assert data["reply"] == "Sunny and warm."
        assert data["session"]["title"] == "Hello, how are you?"
        assert len(data["session"]["messages"]) == 4
        history = mock_provider.send.await_args.args[0]
        assert history == [
            {"role": "user", "parts": ["Hello, how are you?"]},
            {"role": "model", "parts": [DEFAULT_REPLY]},
        ]

    @pytest.mark.asyncio
    async def test_message_to_other_users_session(
        self, authenticated_client: AsyncClient, test_db, test_user_2, mock_provider
    ):
        session = await persist(test_db, build_session(test_user_2.id, title="Theirs"))

        response = await authenticated_client.post(
            "/api/chat/message", json={"sessionId": str(session.id), "message": "Hi"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        mock_provider.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_message_missing_text(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/api/chat/message", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_message_provider_error(self, authenticated_client: AsyncClient, mock_provider):
        created = (await authenticated_client.post("/api/chat/sessions")).json()
        mock_provider.send.side_effect = Exception("API Error")

        response = await authenticated_client.post(
            "/api/chat/message", json={"sessionId": created["id"], "message": "Hello"}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "API Error" in response.json()["message"]

        stored = (await authenticated_client.get(f"/api/chat/sessions/{created['id']}")).json()
        assert [(m["role"], m["content"]) for m in stored["messages"]] == [("user", "Hello")]

    @pytest.mark.asyncio
    async def test_message_provider_timeout(self, authenticated_client: AsyncClient, mock_provider):
        mock_provider.send.side_effect = TimeoutError()

        response = await authenticated_client.post("/api/chat/message", json={"message": "Hello"})

        assert response.status_code == status.HTTP_504_GATEWAY_TIMEOUT
        assert response.json()["error_code"] == "AI_TIMEOUT"

    @pytest.mark.asyncio
    async def test_message_provider_not_configured(
        self, authenticated_client: AsyncClient, mock_provider
    ):
        mock_provider.is_configured = False

        response = await authenticated_client.post("/api/chat/message", json={"message": "Hello"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error_code"] == "AI_CONFIGURATION_ERROR"

        sessions = await authenticated_client.get("/api/chat/sessions")
        assert sessions.json() == []

    @pytest.mark.asyncio
    async def test_message_requires_token(self, client: AsyncClient, mock_provider):
        response = await client.post("/api/chat/message", json={"message": "Hello"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_provider.send.assert_not_awaited()


class TestChatStatsEndpoint:
    """Test cases for GET /api/chat/stats."""

    @pytest.mark.asyncio
    async def test_stats(self, authenticated_client: AsyncClient, test_db, test_user, test_user_2):
        await persist(test_db, build_session(test_user.id, "a", "b", title="One"))
        await persist(test_db, build_session(test_user.id, "c", title="Two", is_active=False))
        await persist(test_db, build_session(test_user_2.id, "d", "e", "f", title="Theirs"))

        response = await authenticated_client.get("/api/chat/stats")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"totalSessions": 2, "activeSessions": 1, "totalMessages": 3}

    @pytest.mark.asyncio
    async def test_stats_requires_token(self, client: AsyncClient):
        response = await client.get("/api/chat/stats")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
