"""
Backend health probe.
"""
from services.todo_actions import TodoActions


async def scenario_backend_health(todo: TodoActions):
    """Backend health endpoint reports OK"""
    assert await todo.health_probe(), f"Backend at {todo.config.health_url} is not healthy"
