"""
Integration: full task lifecycle and frontend/backend communication.
"""
from services.todo_actions import TodoActions


async def _clear_tasks(todo: TodoActions):
    remaining = len(await todo.list_tasks())
    while remaining:
        await todo.delete_task(0)
        current = len(await todo.list_tasks())
        assert current < remaining, "Could not clear existing tasks"
        remaining = current


async def scenario_complete_workflow(todo: TodoActions):
    """Add, edit, complete, delete, then the list is empty"""
    await todo.navigate()
    await _clear_tasks(todo)

    await todo.add_task('Buy groceries')
    tasks = await todo.list_tasks()
    assert len(tasks) == 1, f"Expected 1 task, got {len(tasks)}"
    assert tasks[0].matches('Buy groceries')

    await todo.edit_task(0, 'Buy milk')
    tasks = await todo.list_tasks()
    assert any(t.matches('Buy milk') for t in tasks), "Edited text not found"
    assert not any(t.matches('Buy groceries') for t in tasks), "Old text still present"

    await todo.toggle_task(0)
    tasks = await todo.list_tasks()
    assert tasks[0].is_completed, "Task not marked completed"

    await todo.delete_task(0)
    assert len(await todo.list_tasks()) == 0, "List not empty after delete"

    await todo.wait_for_empty_state()


async def scenario_frontend_backend_communication(todo: TodoActions):
    """Task added in the UI shows up and the backend is healthy"""
    await todo.navigate()
    await todo.add_task('Backend integration test')

    tasks = await todo.list_tasks()
    assert any(t.matches('Backend integration test') for t in tasks), "Task not found"

    assert await todo.health_probe(), "Backend health check failed"
