"""
Performance: adding ten tasks stays within 30 seconds.
"""
import time

from services.todo_actions import TodoActions

NUMBER_OF_TASKS = 10
MAX_TOTAL_MS = 30000


async def scenario_add_many_tasks_quickly(todo: TodoActions):
    """Ten tasks are added within 30 seconds"""
    await todo.navigate()

    start = time.perf_counter()
    for i in range(1, NUMBER_OF_TASKS + 1):
        await todo.add_task(f'Performance Test Task {i}')
    total_ms = (time.perf_counter() - start) * 1000
    print(f"    ⏱️ Added {NUMBER_OF_TASKS} tasks in {total_ms:.0f}ms")

    tasks = await todo.list_tasks()
    assert len(tasks) >= NUMBER_OF_TASKS, f"Expected at least {NUMBER_OF_TASKS} tasks, got {len(tasks)}"
    assert total_ms < MAX_TOTAL_MS, f"Adding tasks took {total_ms:.0f}ms (limit {MAX_TOTAL_MS}ms)"
