"""
Basic functionality: the application loads and accepts a new task.
"""
from services.todo_actions import TodoActions


async def scenario_application_loads(todo: TodoActions):
    """Application loads with heading, input and ADD button"""
    await todo.navigate()

    title = await todo.page_title()
    assert todo.settings.app_title_marker in title, f"Unexpected title: {title!r}"

    heading = await todo.heading_text()
    assert heading == 'Todo List', f"Expected heading 'Todo List', got {heading!r}"

    assert await todo.input_visible(), "Task input is not visible"

    label = await todo.submit_label()
    assert label == 'ADD', f"Expected submit label 'ADD', got {label!r}"


async def scenario_add_task(todo: TodoActions):
    """Adding a task grows the list by exactly one"""
    await todo.navigate()
    before = await todo.list_tasks()

    await todo.add_task('Test Task 1')

    after = await todo.list_tasks()
    assert len(after) == len(before) + 1, f"Expected {len(before) + 1} tasks, got {len(after)}"
    assert any(t.matches('Test Task 1') for t in after), "New task not found in list"
