"""
CRUD operations: delete and complete.
"""
from services.todo_actions import TodoActions


async def scenario_delete_task(todo: TodoActions):
    """Deleting the first task shrinks the list by one"""
    await todo.navigate()
    await todo.add_task('Task to be deleted')

    initial_count = len(await todo.list_tasks())
    await todo.delete_task(0)

    final_count = len(await todo.list_tasks())
    assert final_count == initial_count - 1, f"Expected {initial_count - 1} tasks, got {final_count}"


async def scenario_delete_out_of_range_is_noop(todo: TodoActions):
    """Deleting an index past the end leaves the list unchanged"""
    await todo.navigate()
    await todo.add_task('Task that stays')

    tasks = await todo.list_tasks()
    await todo.delete_task(len(tasks))

    assert len(await todo.list_tasks()) == len(tasks), "Out-of-range delete changed the list"


async def scenario_complete_task(todo: TodoActions):
    """Toggling a task marks it completed"""
    await todo.navigate()
    await todo.add_task('Task to be completed')

    await todo.toggle_task(0)

    tasks = await todo.list_tasks()
    assert tasks, "Task list is empty after toggle"
    assert any(t.is_completed for t in tasks), "No task is marked completed"
