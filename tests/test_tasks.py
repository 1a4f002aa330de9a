import pytest


async def test_create_and_fetch_task(client, create_user, create_task):
    user = await create_user()
    created = await create_task(user["id"], "Integration Test Task", description="Testing async handlers")

    assert created["priority"] == "medium"
    assert created["completed"] is False
    assert created["user_id"] == user["id"]
    assert created["message"] == "Task created successfully"

    response = await client.get(f"/api/tasks/{created['id']}")
    assert response.status_code == 200
    task = response.json()
    assert task["title"] == "Integration Test Task"
    assert task["description"] == "Testing async handlers"
    assert task["username"] == user["name"]
    assert task["completed"] is False


@pytest.mark.parametrize("payload", [
    {"user_id": 1},
    {"title": "No owner"},
    {"title": "", "user_id": 1},
])
async def test_create_task_missing_fields(client, database, payload):
    response = await client.post("/api/tasks", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Title and user_id are required"


async def test_create_task_invalid_priority(client, create_user):
    user = await create_user()
    response = await client.post(
        "/api/tasks", json={"title": "Urgent", "user_id": user["id"], "priority": "urgent"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Priority must be low, medium, or high"


async def test_create_task_unknown_user(client, database):
    response = await client.post("/api/tasks", json={"title": "Lost", "user_id": 12345})
    assert response.status_code == 400
    assert response.json()["error"] == "User not found"

    assert (await client.get("/api/tasks")).json() == []


async def test_create_task_non_integer_user_id(client, database):
    response = await client.post("/api/tasks", json={"title": "Lost", "user_id": "abc"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("user_id:")


@pytest.mark.parametrize("task_id", ["abc", "0"])
async def test_invalid_task_id(client, database, task_id):
    for method in ("GET", "PUT", "DELETE"):
        response = await client.request(method, f"/api/tasks/{task_id}", json={"title": "x"})
        assert response.status_code == 400, f"{method} accepted id {task_id}"
        assert response.json()["error"] == "Invalid task ID"


async def test_missing_task_not_found(client, database):
    assert (await client.get("/api/tasks/999")).status_code == 404
    assert (await client.put("/api/tasks/999", json={"title": "x"})).status_code == 404
    response = await client.delete("/api/tasks/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Task not found"


async def test_list_filters(client, create_user, create_task):
    alice = await create_user("Alice", "alice@example.com")
    bob = await create_user("Bob", "bob@example.com")
    low = await create_task(alice["id"], "Low", priority="low")
    high_a = await create_task(alice["id"], "High A", priority="high")
    high_b = await create_task(bob["id"], "High B", priority="high")
    await client.put(f"/api/tasks/{high_a['id']}", json={"completed": True})

    high = (await client.get("/api/tasks", params={"priority": "high"})).json()
    assert sorted(t["id"] for t in high) == sorted([high_a["id"], high_b["id"]])

    alice_tasks = (await client.get("/api/tasks", params={"user_id": alice["id"]})).json()
    assert [t["id"] for t in alice_tasks] == [high_a["id"], low["id"]]
    assert all(t["username"] == "Alice" for t in alice_tasks)

    done = (await client.get("/api/tasks", params={"completed": "true"})).json()
    assert [t["id"] for t in done] == [high_a["id"]]

    open_tasks = (await client.get("/api/tasks", params={"completed": "false"})).json()
    assert {t["id"] for t in open_tasks} == {low["id"], high_b["id"]}

    combined = (await client.get(
        "/api/tasks", params={"user_id": alice["id"], "priority": "high", "completed": "false"}
    )).json()
    assert combined == []


async def test_list_rejects_non_numeric_user_filter(client, database):
    response = await client.get("/api/tasks", params={"user_id": "abc"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid user ID"


async def test_update_task_fields(client, create_user, create_task):
    user = await create_user()
    task = await create_task(user["id"], "Draft", description="first pass")

    response = await client.put(
        f"/api/tasks/{task['id']}", json={"completed": True, "priority": "high"}
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Task updated successfully"

    fetched = (await client.get(f"/api/tasks/{task['id']}")).json()
    assert fetched["completed"] is True
    assert fetched["priority"] == "high"
    assert fetched["title"] == "Draft"
    assert fetched["description"] == "first pass"


async def test_update_task_clears_description(client, create_user, create_task):
    user = await create_user()
    task = await create_task(user["id"], "Draft", description="to be removed")

    response = await client.put(f"/api/tasks/{task['id']}", json={"description": None})
    assert response.status_code == 200

    fetched = (await client.get(f"/api/tasks/{task['id']}")).json()
    assert fetched["description"] is None


async def test_update_task_without_fields_leaves_row(client, create_user, create_task):
    user = await create_user()
    task = await create_task(user["id"], "Untouched", priority="low")
    before = (await client.get(f"/api/tasks/{task['id']}")).json()

    for payload in ({}, {"title": "", "priority": ""}):
        response = await client.put(f"/api/tasks/{task['id']}", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "At least one field must be provided for update"

    after = (await client.get(f"/api/tasks/{task['id']}")).json()
    assert after == before


async def test_update_task_invalid_priority(client, create_user, create_task):
    user = await create_user()
    task = await create_task(user["id"])

    response = await client.put(f"/api/tasks/{task['id']}", json={"priority": "urgent"})
    assert response.status_code == 400
    assert response.json()["error"] == "Priority must be low, medium, or high"


async def test_delete_task(client, create_user, create_task):
    user = await create_user()
    task = await create_task(user["id"])

    response = await client.delete(f"/api/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Task deleted successfully"
    assert (await client.get(f"/api/tasks/{task['id']}")).status_code == 404


async def test_create_task_user_id_beyond_key_range(client, database):
    response = await client.post("/api/tasks", json={"title": "Lost", "user_id": 10**20})
    assert response.status_code == 400
    assert response.json()["error"] == "User not found"
    assert (await client.get("/api/tasks")).json() == []


async def test_task_id_beyond_key_range_not_found(client, database):
    for method in ("GET", "PUT", "DELETE"):
        response = await client.request(method, "/api/tasks/99999999999999999999", json={"title": "x"})
        assert response.status_code == 404, f"{method} returned {response.status_code}"
        assert response.json()["error"] == "Task not found"


@pytest.mark.parametrize("user_id", ["0", "-3", "+7", "99999999999999999999"])
async def test_list_filter_accepts_any_integer(client, create_user, create_task, user_id):
    user = await create_user()
    await create_task(user["id"])

    response = await client.get("/api/tasks", params={"user_id": user_id})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize("value, expected", [(2, True), ("x", True), (0, False), (None, False), ("", False)])
async def test_update_task_completed_by_truthiness(client, create_user, create_task, value, expected):
    user = await create_user()
    task = await create_task(user["id"])
    if not expected:
        await client.put(f"/api/tasks/{task['id']}", json={"completed": True})

    response = await client.put(f"/api/tasks/{task['id']}", json={"completed": value})
    assert response.status_code == 200

    fetched = (await client.get(f"/api/tasks/{task['id']}")).json()
    assert fetched["completed"] is expected
