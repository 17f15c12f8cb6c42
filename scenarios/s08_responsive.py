"""
Responsive layout: mobile and tablet viewports.
"""
import asyncio

from services.todo_actions import TodoActions

MOBILE = (375, 667)
TABLET = (768, 1024)
LAYOUT_SETTLE_S = 1.0


async def scenario_different_screen_sizes(todo: TodoActions):
    """Input stays usable on mobile and tablet sizes"""
    await todo.navigate()

    await todo.resize_viewport(*MOBILE)
    await asyncio.sleep(LAYOUT_SETTLE_S)
    assert await todo.input_visible(), "Task input hidden at mobile size"

    await todo.resize_viewport(*TABLET)
    await asyncio.sleep(LAYOUT_SETTLE_S)
    await todo.add_task('Mobile test task')

    tasks = await todo.list_tasks()
    assert any(t.matches('Mobile test task') for t in tasks), "Task added at tablet size not found"

    await todo.resize_viewport(todo.settings.viewport_width, todo.settings.viewport_height)
