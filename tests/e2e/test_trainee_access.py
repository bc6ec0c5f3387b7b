"""
E2E тест связи инструктор → подопечный через настоящий get_current_user.

Сценарий:
1. Инструктор выпускает приглашение
2. Подопечный принимает его
3. Инструктор читает календарь подопечного
4. Подопечный разрывает связь, доступ пропадает

Стратегия: один клиент, пользователи различаются JWT в заголовках.
"""

import pytest
from datetime import datetime, timezone

from app.models.instructor_link import InstructorLink
from tests.conftest import make_auth_headers

pytestmark = pytest.mark.e2e


@pytest.mark.asyncio
async def test_instructor_reads_trainee_until_link_removed(
    client, mock_repo, mock_link_repo, mock_workout_repo, user_fixture, instructor_fixture
):
    users = {user_fixture.id: user_fixture, instructor_fixture.id: instructor_fixture}
    mock_repo.get_by_id.side_effect = lambda user_id: users.get(user_id)
    link = InstructorLink(
        id=3,
        instructor_id=instructor_fixture.id,
        user_id=user_fixture.id,
        created_at=datetime.now(timezone.utc),
        expires_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )
    mock_link_repo.create.return_value = link
    instructor_headers = make_auth_headers(instructor_fixture)
    trainee_headers = make_auth_headers(user_fixture)
    calendar_params = {"year": 2026, "month": 10, "user_id": user_fixture.id}

    # Шаг 1: до связи данные закрыты
    response = await client.get("/api/v1/stats/calendar", params=calendar_params, headers=instructor_headers)
    assert response.status_code == 403

    # Шаг 2: приглашение и принятие
    response = await client.post("/api/v1/instructor/link/generate", headers=instructor_headers)
    assert response.status_code == 200
    token = response.json()["token"]

    response = await client.post(
        "/api/v1/instructor/link/accept", json={"token": token}, headers=trainee_headers
    )
    assert response.status_code == 201
    mock_link_repo.create.assert_awaited_once()
    assert mock_link_repo.create.await_args.args[:2] == (instructor_fixture.id, user_fixture.id)

    # Шаг 3: связь действует
    mock_link_repo.get_active.return_value = link
    response = await client.get("/api/v1/stats/calendar", params=calendar_params, headers=instructor_headers)
    assert response.status_code == 200
    assert mock_workout_repo.list_volume_rows.await_args.args[0] == user_fixture.id

    # Шаг 4: подопечный разрывает связь
    mock_link_repo.get_by_id.return_value = link
    response = await client.delete("/api/v1/instructor/link/3", headers=trainee_headers)
    assert response.status_code == 200

    mock_link_repo.get_active.return_value = None
    response = await client.get("/api/v1/stats/calendar", params=calendar_params, headers=instructor_headers)
    assert response.status_code == 403
