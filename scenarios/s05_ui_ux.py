"""
UI/UX: empty-state indicator.
"""
from services.todo_actions import TodoActions


async def scenario_empty_state_message(todo: TodoActions):
    """'No tasks found' is shown once every task is deleted"""
    await todo.navigate()

    result = await todo.query_tasks()
    assert not result.is_failed, f"Could not read task list: {result.reason}"

    remaining = len(result)
    while remaining > 0:
        await todo.delete_task(0)
        current = len(await todo.list_tasks())
        assert current < remaining, f"Delete did not remove a task ({current} left)"
        remaining = current

    await todo.wait_for_empty_state()
