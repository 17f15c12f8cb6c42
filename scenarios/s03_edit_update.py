"""
Edit and update: inline edit replaces the text; several tasks coexist.
"""
from services.todo_actions import TodoActions


async def scenario_edit_task(todo: TodoActions):
    """Inline edit replaces the task text"""
    await todo.navigate()
    await todo.add_task('Original task text')

    await todo.edit_task(0, 'Updated task text')

    tasks = await todo.list_tasks()
    assert any(t.matches('Updated task text') for t in tasks), "Edited text not found"
    assert not any(t.matches('Original task text') for t in tasks), "Original text still present"


async def scenario_multiple_tasks(todo: TodoActions):
    """Several added tasks are all listed"""
    await todo.navigate()
    names = ['Task 1', 'Task 2', 'Task 3']
    for name in names:
        await todo.add_task(name)

    tasks = await todo.list_tasks()
    assert len(tasks) >= len(names), f"Expected at least {len(names)} tasks, got {len(tasks)}"
    for name in names:
        assert any(t.matches(name) for t in tasks), f"Task {name!r} missing"
