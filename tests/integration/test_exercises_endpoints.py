"""
Интеграционные тесты эндпоинтов /api/v1/exercises/*.

Покрываемые сценарии:
- GET /exercises/: общий каталог плюс собственные упражнения
- POST /exercises/: собственное упражнение пользователя, дубликат названия
- POST /exercises/catalog: только admin
"""

import pytest

from app.models.exercise_type import ExerciseType

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_list_exercises(user_client, mock_exercise_repo, user_fixture):
    mock_exercise_repo.list_for_user.return_value = [
        ExerciseType(id=1, name="Bench press", muscle_group="chest"),
        ExerciseType(id=2, name="My curl", user_id=user_fixture.id),
    ]

    response = await user_client.get("/api/v1/exercises/")

    assert response.status_code == 200
    assert [e["name"] for e in response.json()] == ["Bench press", "My curl"]
    mock_exercise_repo.list_for_user.assert_awaited_once_with(user_fixture.id)


@pytest.mark.asyncio
async def test_create_custom_exercise_belongs_to_user(user_client, mock_exercise_repo, user_fixture):
    mock_exercise_repo.create.return_value = ExerciseType(id=9, name="Zottman curl", user_id=user_fixture.id)

    response = await user_client.post("/api/v1/exercises/", json={"name": "Zottman curl"})

    assert response.status_code == 201
    assert response.json()["id"] == 9
    created = mock_exercise_repo.create.await_args.args[0]
    assert created.user_id == user_fixture.id


@pytest.mark.asyncio
async def test_create_exercise_duplicate_name_returns_400(user_client, mock_exercise_repo):
    mock_exercise_repo.name_exists.return_value = True

    response = await user_client.post("/api/v1/exercises/", json={"name": "Bench press"})

    assert response.status_code == 400
    mock_exercise_repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_catalog_exercise_requires_admin(user_client, mock_exercise_repo):
    response = await user_client.post("/api/v1/exercises/catalog", json={"name": "Deadlift"})

    assert response.status_code == 403
    mock_exercise_repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_admin_creates_catalog_exercise(admin_client, mock_exercise_repo):
    mock_exercise_repo.create.return_value = ExerciseType(id=3, name="Deadlift", muscle_group="back")

    response = await admin_client.post("/api/v1/exercises/catalog", json={
        "name": "Deadlift",
        "muscle_group": "back",
    })

    assert response.status_code == 201
    assert mock_exercise_repo.create.await_args.args[0].user_id is None
