"""
Input validation: empty, special-character and very long input.
"""
from services.todo_actions import TodoActions

SPECIAL_CHAR_TASK = 'Task with special chars: !@#$%^&*()_+-=[]{}|;:,.<>?'


async def scenario_empty_input_rejected(todo: TodoActions):
    """Submitting empty input adds nothing"""
    await todo.navigate()
    initial_count = len(await todo.list_tasks())

    await todo.add_task('')

    assert len(await todo.list_tasks()) == initial_count, "Empty task was added"


async def scenario_special_characters(todo: TodoActions):
    """Special characters survive the round trip"""
    await todo.navigate()
    await todo.add_task(SPECIAL_CHAR_TASK)

    tasks = await todo.list_tasks()
    assert any(t.matches('special chars') for t in tasks), "Special-character task not found"


async def scenario_very_long_text(todo: TodoActions):
    """A 500 character task is accepted"""
    await todo.navigate()
    await todo.add_task('A' * 500)

    tasks = await todo.list_tasks()
    assert any(t.matches('A' * 50) for t in tasks), "Long task not found"
