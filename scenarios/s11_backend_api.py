"""
Backend API contract, exercised directly over HTTP.
"""
import asyncio

from services.todo_actions import TodoActions
from services.todo_api_client import TodoApiClient
from utils.harness_errors import BackendClientError, BackendValidationError

UNKNOWN_ID = '000000000000000000000000'


async def scenario_api_rejects_invalid_payloads(todo: TodoActions):
    """Create rejects empty and non-string tasks with a 400"""
    client = TodoApiClient(todo.config.backend_url)
    try:
        for payload in ({'task': ''}, {'task': '   '}, {'task': 42}, {}):
            try:
                await asyncio.to_thread(client.create_raw, payload)
            except BackendValidationError as e:
                assert e.status_code == 400, f"Expected 400 for {payload}, got {e.status_code}"
            else:
                raise AssertionError(f"Payload {payload} was accepted")
    finally:
        client.close()


async def scenario_api_task_lifecycle(todo: TodoActions):
    """Create, update, complete and delete a task through the API"""
    client = TodoApiClient(todo.config.backend_url)
    try:
        created = await asyncio.to_thread(client.create_todo, '  API lifecycle task  ')
        todo_id = created['_id']
        assert created['task'] == 'API lifecycle task', "Server did not trim the task text"

        listed = await asyncio.to_thread(client.list_todos)
        assert any(item['_id'] == todo_id for item in listed), "Created task not listed"

        updated = await asyncio.to_thread(client.update_todo, todo_id, 'API lifecycle task (edited)')
        assert updated['task'] == 'API lifecycle task (edited)'

        done = await asyncio.to_thread(client.mark_done, todo_id)
        assert done['done'] is True, "Task not marked done"

        await asyncio.to_thread(client.delete_todo, todo_id)
        listed = await asyncio.to_thread(client.list_todos)
        assert not any(item['_id'] == todo_id for item in listed), "Deleted task still listed"
    finally:
        client.close()


async def scenario_api_delete_unknown_id(todo: TodoActions):
    """Deleting an unknown id is a client error"""
    client = TodoApiClient(todo.config.backend_url)
    try:
        await asyncio.to_thread(client.delete_todo, UNKNOWN_ID)
    except BackendClientError as e:
        assert 400 <= (e.status_code or 0) < 500, f"Expected 4xx, got {e.status_code}"
    else:
        raise AssertionError("Deleting an unknown id succeeded")
    finally:
        client.close()
