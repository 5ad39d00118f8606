"""Integration tests for the Tasks API: the full request, accept, complete, confirm flow."""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from infrastructure.database.repositories.sqlalchemy_credit_repo import (
    SQLAlchemyCreditRepository,
)


async def _create_task(
    client: AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict[str, Any]:
    body = {"title": "Help moving a sofa", "credits_value": 3, **overrides}
    response = await client.post("/api/v1/tasks", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]  # type: ignore[no-any-return]


async def _balance(client: AsyncClient, headers: dict[str, str]) -> int:
    response = await client.get("/api/v1/credits/balance", headers=headers)
    assert response.status_code == 200
    return response.json()["balance"]  # type: ignore[no-any-return]


class TestTaskLifecycle:
    """The happy path and its ledger effects."""

    @pytest.mark.asyncio
    async def test_full_exchange_moves_credits(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        task_id = task["id"]
        assert task["status"] == "open"
        assert task["provider_id"] is None

        accepted = await api_client.post(
            f"/api/v1/tasks/{task_id}/accept", headers=provider_headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["data"]["status"] == "accepted"

        completed = await api_client.post(
            f"/api/v1/tasks/{task_id}/complete", headers=provider_headers
        )
        assert completed.status_code == 200
        data = completed.json()["data"]
        assert data["status"] == "completed"
        assert data["completed_at"] is not None
        assert data["completion"]["confirmation_status"] == "pending"
        assert data["completion"]["credits_transferred"] == 3

        # Provider is credited on completion, requester not yet debited
        assert await _balance(api_client, provider_headers) == 3
        assert await _balance(api_client, auth_headers) == 0

        confirmed = await api_client.post(
            f"/api/v1/tasks/{task_id}/confirm", headers=auth_headers
        )
        assert confirmed.status_code == 200
        completion = confirmed.json()["data"]["completion"]
        assert completion["confirmation_status"] == "approved"
        assert completion["confirmed_at"] is not None

        assert await _balance(api_client, provider_headers) == 3
        assert await _balance(api_client, auth_headers) == -3

    @pytest.mark.asyncio
    async def test_statement_lists_signed_entries(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers, title="Guitar lesson", credits_value=2)
        for action, headers in (
            ("accept", provider_headers),
            ("complete", provider_headers),
            ("confirm", auth_headers),
        ):
            response = await api_client.post(
                f"/api/v1/tasks/{task['id']}/{action}", headers=headers
            )
            assert response.status_code == 200

        provider = (await api_client.get("/api/v1/credits", headers=provider_headers)).json()
        requester = (await api_client.get("/api/v1/credits", headers=auth_headers)).json()

        assert provider["meta"] == {"total": 1, "balance": 2}
        assert provider["data"][0]["transaction_type"] == "earned"
        assert provider["data"][0]["amount"] == 2
        assert provider["data"][0]["description"] == "Earned from task: Guitar lesson"
        assert provider["data"][0]["related_task_id"] == task["id"]

        assert requester["meta"] == {"total": 1, "balance": -2}
        assert requester["data"][0]["transaction_type"] == "spent"
        assert requester["data"][0]["description"] == "Spent on task: Guitar lesson"


class TestTaskCreate:
    @pytest.mark.asyncio
    async def test_rejects_credits_above_cap(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await api_client.post(
            "/api/v1/tasks",
            json={"title": "Rebuild my house", "credits_value": 11},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_rejects_zero_credits(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await api_client.post(
            "/api/v1/tasks",
            json={"title": "Free help", "credits_value": 0},
            headers=auth_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_authentication(self, api_client: AsyncClient) -> None:
        response = await api_client.post(
            "/api/v1/tasks", json={"title": "Anonymous", "credits_value": 1}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_rejects_invalid_token(self, api_client: AsyncClient) -> None:
        response = await api_client.get(
            "/api/v1/tasks", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_rejects_own_skill(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        skill = await api_client.post(
            "/api/v1/skills", json={"name": "Baking", "category": "other"}, headers=auth_headers
        )

        response = await api_client.post(
            "/api/v1/tasks",
            json={"title": "Bake me a cake", "credits_value": 1, "skill_id": skill.json()["data"]["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "SELF_DEALING"

    @pytest.mark.asyncio
    async def test_unknown_skill(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await api_client.post(
            "/api/v1/tasks",
            json={"title": "Something", "credits_value": 1, "skill_id": str(uuid4())},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "SKILL_NOT_FOUND"


class TestTaskQueries:
    @pytest.mark.asyncio
    async def test_list_my_tasks(
        self, api_client: AsyncClient, auth_headers: dict[str, str], provider_headers: dict[str, str]
    ) -> None:
        await _create_task(api_client, auth_headers, title="First")
        await _create_task(api_client, auth_headers, title="Second")
        await _create_task(api_client, provider_headers, title="Not mine")

        response = await api_client.get("/api/v1/tasks", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert {t["title"] for t in body["data"]} == {"First", "Second"}
        assert body["meta"] == {"total": 2, "open_count": 2}

    @pytest.mark.asyncio
    async def test_get_task_not_found(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await api_client.get(f"/api/v1/tasks/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "TASK_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_incoming_requests_for_my_skills(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        skill = await api_client.post(
            "/api/v1/skills",
            json={"name": "Plumbing", "category": "repairs"},
            headers=provider_headers,
        )
        skill_id = skill.json()["data"]["id"]
        task = await _create_task(api_client, auth_headers, title="Fix a tap", skill_id=skill_id)
        await _create_task(api_client, auth_headers, title="Unrelated")

        response = await api_client.get("/api/v1/tasks/incoming", headers=provider_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["id"] == task["id"]
        assert body["data"][0]["category"] == "repairs"
        assert body["data"][0]["requester_name"] == "Rita Requester"

        # Once claimed it drops out of the feed
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        response = await api_client.get("/api/v1/tasks/incoming", headers=provider_headers)
        assert response.json()["data"] == []


class TestTaskAccept:
    @pytest.mark.asyncio
    async def test_second_accept_conflicts(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)

        first = await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        second = await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=other_headers)

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error_code"] == "TASK_ALREADY_CLAIMED"

        current = await api_client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
        assert current.json()["data"]["provider_id"] == first.json()["data"]["provider_id"]

    @pytest.mark.asyncio
    async def test_requester_cannot_accept_own_task(
        self, api_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        task = await _create_task(api_client, auth_headers)

        response = await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "SELF_DEALING"

    @pytest.mark.asyncio
    async def test_completed_task_cannot_be_accepted(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers)

        response = await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=other_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE_TRANSITION"


class TestTaskComplete:
    @pytest.mark.asyncio
    async def test_non_provider_cannot_complete(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
        other_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)

        response = await api_client.post(
            f"/api/v1/tasks/{task['id']}/complete", headers=other_headers
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"
        current = await api_client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
        assert current.json()["data"]["status"] == "accepted"
        assert await _balance(api_client, other_headers) == 0

    @pytest.mark.asyncio
    async def test_open_task_cannot_be_completed(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)

        response = await api_client.post(
            f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE_TRANSITION"
        current = await api_client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
        assert current.json()["data"]["status"] == "open"
        assert await _balance(api_client, provider_headers) == 0

    @pytest.mark.asyncio
    async def test_cannot_complete_twice(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers)

        response = await api_client.post(
            f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers
        )

        assert response.status_code == 409
        assert await _balance(api_client, provider_headers) == 3

    @pytest.mark.asyncio
    async def test_ledger_failure_rolls_back_completion(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """If the ledger write fails, the task stays accepted with no completion."""
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)

        async def failing_append(self: SQLAlchemyCreditRepository, entry: Any) -> Any:
            raise OperationalError("INSERT INTO credits", {}, Exception("disk I/O error"))

        monkeypatch.setattr(SQLAlchemyCreditRepository, "append", failing_append)

        response = await api_client.post(
            f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers
        )

        assert response.status_code == 503
        assert response.json()["error_code"] == "DATABASE_ERROR"

        monkeypatch.undo()
        current = await api_client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
        data = current.json()["data"]
        assert data["status"] == "accepted"
        assert data["completion"] is None
        assert await _balance(api_client, provider_headers) == 0


class TestTaskConfirm:
    @pytest.mark.asyncio
    async def test_only_requester_can_confirm(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers)

        response = await api_client.post(
            f"/api/v1/tasks/{task['id']}/confirm", headers=provider_headers
        )

        assert response.status_code == 403
        assert await _balance(api_client, auth_headers) == 0

    @pytest.mark.asyncio
    async def test_confirm_before_completion(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)

        response = await api_client.post(f"/api/v1/tasks/{task['id']}/confirm", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE_TRANSITION"

    @pytest.mark.asyncio
    async def test_second_confirmation_does_not_debit_again(
        self,
        api_client: AsyncClient,
        auth_headers: dict[str, str],
        provider_headers: dict[str, str],
    ) -> None:
        task = await _create_task(api_client, auth_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/accept", headers=provider_headers)
        await api_client.post(f"/api/v1/tasks/{task['id']}/complete", headers=provider_headers)
        first = await api_client.post(f"/api/v1/tasks/{task['id']}/confirm", headers=auth_headers)

        second = await api_client.post(f"/api/v1/tasks/{task['id']}/confirm", headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 409
        assert await _balance(api_client, auth_headers) == -3
