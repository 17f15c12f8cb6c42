"""
Edge cases: rapid toggles and page refresh.
"""
import asyncio

from services.todo_actions import TodoActions


async def scenario_rapid_consecutive_actions(todo: TodoActions):
    """Rapid toggles leave the application usable"""
    await todo.navigate()
    await todo.add_task('Rapid action test')

    await todo.toggle_task(0)
    await asyncio.sleep(0.1)
    await todo.toggle_task(0)
    await asyncio.sleep(0.1)
    await todo.toggle_task(0)

    tasks = await todo.list_tasks()
    assert tasks, "Task list is empty after rapid toggles"
    assert any(t.matches('Rapid action test') for t in tasks), "Task lost after rapid toggles"


async def scenario_toggle_twice_restores_flag(todo: TodoActions):
    """Toggling twice restores the completion flag"""
    await todo.navigate()
    await todo.add_task('Toggle twice')

    original = (await todo.list_tasks())[0].is_completed
    await todo.toggle_task(0)
    await todo.toggle_task(0)

    assert (await todo.list_tasks())[0].is_completed == original, "Completion flag not restored"


async def scenario_page_refresh(todo: TodoActions):
    """Application reloads cleanly after a refresh"""
    await todo.navigate()
    await todo.add_task('Persistence test task')
    initial_count = len(await todo.list_tasks())

    await todo.reload()

    after = await todo.list_tasks()
    print(f"    Tasks after refresh: {len(after)}, before: {initial_count}")
    heading = await todo.heading_text()
    assert heading == 'Todo List', f"Expected heading 'Todo List' after refresh, got {heading!r}"
