"""
Shipped Scenario Tests

Runs the scenario coroutines from scenarios/ against the in-memory page, so
their assertions are checked without a live application.
"""

import pytest

from scenarios import (
    s01_basic_functionality,
    s02_crud_operations,
    s03_edit_update,
    s04_input_validation,
    s05_ui_ux,
    s06_performance,
    s07_backend_health,
    s08_responsive,
    s09_edge_cases,
    s10_integration_e2e,
)

pytestmark = pytest.mark.asyncio


class TestIntegrationWorkflow:

    async def test_complete_workflow_ends_on_empty_state(self, todo, fake_app):
        fake_app.seed('Leftover from a previous run')

        await s10_integration_e2e.scenario_complete_workflow(todo)

        assert fake_app.tasks == []
        todo.session_manager.navigate_to_application_root.assert_awaited_once()

    async def test_complete_workflow_fails_when_delete_is_ignored(self, todo, fake_app, monkeypatch):
        async def ignored(todo_actions, index):
            return None

        monkeypatch.setattr(type(todo), 'delete_task', ignored)

        with pytest.raises(AssertionError):
            await s10_integration_e2e.scenario_complete_workflow(todo)

    async def test_frontend_backend_communication(self, todo, fake_app):
        await s10_integration_e2e.scenario_frontend_backend_communication(todo)

        assert fake_app.visited[-1] == 'http://localhost:5100/health'


class TestCrudScenarios:

    async def test_delete_out_of_range_is_noop(self, todo, fake_app):
        fake_app.seed('existing')

        await s02_crud_operations.scenario_delete_out_of_range_is_noop(todo)

        assert len(fake_app.tasks) == 2

    async def test_delete_and_complete(self, todo, fake_app):
        await s02_crud_operations.scenario_delete_task(todo)
        await s02_crud_operations.scenario_complete_task(todo)

        assert [t.completed for t in fake_app.tasks] == [True]

    async def test_edit_and_multiple_tasks(self, todo, fake_app):
        await s03_edit_update.scenario_edit_task(todo)
        await s03_edit_update.scenario_multiple_tasks(todo)

        assert [t.text for t in fake_app.tasks] == ['Updated task text', 'Task 1', 'Task 2', 'Task 3']


class TestEdgeCaseScenarios:

    async def test_toggle_twice_restores_flag(self, todo, fake_app):
        await s09_edge_cases.scenario_toggle_twice_restores_flag(todo)

        assert fake_app.tasks[0].completed is False

    async def test_toggle_twice_fails_when_toggle_sticks(self, todo, fake_app, monkeypatch):
        async def toggle_once_only(todo_actions, index):
            fake_app.tasks[index].completed = True

        monkeypatch.setattr(type(todo), 'toggle_task', toggle_once_only)

        with pytest.raises(AssertionError, match='Completion flag not restored'):
            await s09_edge_cases.scenario_toggle_twice_restores_flag(todo)

    async def test_rapid_actions_and_refresh(self, todo, fake_app):
        await s09_edge_cases.scenario_rapid_consecutive_actions(todo)
        await s09_edge_cases.scenario_page_refresh(todo)

        assert len(fake_app.tasks) == 2


class TestPageScenarios:

    async def test_application_loads_and_adds(self, todo):
        await s01_basic_functionality.scenario_application_loads(todo)
        await s01_basic_functionality.scenario_add_task(todo)

    async def test_input_validation(self, todo, fake_app):
        await s04_input_validation.scenario_empty_input_rejected(todo)
        await s04_input_validation.scenario_special_characters(todo)
        await s04_input_validation.scenario_very_long_text(todo)

        assert len(fake_app.tasks) == 2

    async def test_empty_state_after_deleting_everything(self, todo, fake_app):
        fake_app.seed('one', 'two', 'three')

        await s05_ui_ux.scenario_empty_state_message(todo)

        assert fake_app.tasks == []

    async def test_empty_state_fails_when_list_unreadable(self, todo, fake_app):
        fake_app.degraded = True

        with pytest.raises(AssertionError, match='Could not read task list'):
            await s05_ui_ux.scenario_empty_state_message(todo)

    async def test_performance_adds_ten_tasks(self, todo, fake_app):
        await s06_performance.scenario_add_many_tasks_quickly(todo)

        assert len(fake_app.tasks) == s06_performance.NUMBER_OF_TASKS

    async def test_responsive_restores_configured_viewport(self, todo, fake_app, monkeypatch):
        monkeypatch.setattr(s08_responsive, 'LAYOUT_SETTLE_S', 0)

        await s08_responsive.scenario_different_screen_sizes(todo)

        assert fake_app.viewport == {'width': 1920, 'height': 1080}

    async def test_backend_health(self, todo, fake_app):
        await s07_backend_health.scenario_backend_health(todo)

        fake_app.backend_up = False
        with pytest.raises(AssertionError, match='is not healthy'):
            await s07_backend_health.scenario_backend_health(todo)
