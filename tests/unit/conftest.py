"""
In-memory stand-in for the todo application's page, shaped like the parts of
the Playwright async Page/Locator API the action library uses.
"""
import asyncio
import pytest
from dataclasses import dataclass
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from models.environment import TodoSelectors
from services import todo_actions
from services.session_manager import BrowserSession
from services.todo_actions import TodoActions

SELECTORS = TodoSelectors()

HARNESS_ENV_VARS = (
    'FRONTEND_URL', 'BACKEND_URL', 'USE_REMOTE_GRID', 'REMOTE_GRID_URL',
    'TEST_MODE', 'RUNNING_IN_DOCKER', 'HEADLESS', 'VIEWPORT', 'IMPLICIT_WAIT_MS',
    'PAGE_LOAD_TIMEOUT_MS', 'SCRIPT_TIMEOUT_MS', 'SETTLE_MODE', 'SCREENSHOT_DIR',
    'HARNESS_LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_harness_env(monkeypatch):
    """Keep the developer's shell environment out of unit tests."""
    for name in HARNESS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@dataclass
class FakeTask:
    text: str
    completed: bool = False


class FakeTodoApp:
    """State of the rendered application."""

    def __init__(self, tasks: Optional[List[str]] = None):
        self.tasks = [FakeTask(t) for t in (tasks or [])]
        self.input_value = ''
        self.editing: Optional[int] = None
        self.editor_value = ''
        self.degraded = False
        self.backend_up = True
        self.health_body = 'OK'
        self.title = 'React App'
        self.visited: List[str] = []
        self.viewport = None
        self.ignore_submit = False
        self.ignore_toggle = False
        self.refetch_delay_s: Optional[float] = None

    def seed(self, *texts, completed=False):
        self.tasks.extend(FakeTask(t, completed) for t in texts)
        return self

    def check(self):
        if self.degraded:
            raise PlaywrightError("Target page, context or browser has been closed")

    def replace_tasks(self, tasks):
        """Apply a mutation; with refetch_delay_s the list renders empty until the refetch lands."""
        if self.refetch_delay_s is None:
            self.tasks = tasks
            return
        self.tasks = []
        asyncio.get_running_loop().call_later(self.refetch_delay_s, setattr, self, 'tasks', tasks)


class _Single:
    """Locator resolving to at most one element; first/last are itself."""

    @property
    def first(self):
        return self

    @property
    def last(self):
        return self


class TaskInput(_Single):
    def __init__(self, app):
        self.app = app

    async def wait_for(self, state='visible', timeout=None):
        self.app.check()

    async def clear(self):
        self.app.input_value = ''

    async def press_sequentially(self, text):
        self.app.input_value += text

    async def is_visible(self):
        return True


class SubmitButton(_Single):
    def __init__(self, app):
        self.app = app

    async def click(self):
        self.app.check()
        value = self.app.input_value.strip()
        if value and not self.app.ignore_submit:
            self.app.replace_tasks(self.app.tasks + [FakeTask(value)])
        self.app.input_value = ''

    async def inner_text(self):
        return 'ADD'


class StatusIcon(_Single):
    def __init__(self, app, index):
        self.app = app
        self.index = index

    async def count(self):
        return 1

    async def get_attribute(self, name):
        task = self.app.tasks[self.index]
        return 'icon BsFillCheckCircleFill' if task.completed else 'icon BsCircleFill'

    async def click(self):
        if not self.app.ignore_toggle:
            task = self.app.tasks[self.index]
            task.completed = not task.completed


class DeleteControl(_Single):
    def __init__(self, app, index):
        self.app = app
        self.index = index

    async def click(self):
        remaining = list(self.app.tasks)
        del remaining[self.index]
        self.app.replace_tasks(remaining)


class EditControl(_Single):
    """Toggles between opening the inline editor and saving it."""

    def __init__(self, app, index):
        self.app = app
        self.index = index

    async def click(self):
        if self.app.editing == self.index:
            self.app.tasks[self.index].text = self.app.editor_value
            self.app.editing = None
        else:
            self.app.editing = self.index
            self.app.editor_value = self.app.tasks[self.index].text


class InlineEditor(_Single):
    def __init__(self, app, index):
        self.app = app
        self.index = index

    async def count(self):
        return 1 if self.app.editing == self.index else 0

    async def is_visible(self):
        return self.app.editing == self.index

    async def wait_for(self, state='visible', timeout=None):
        if self.app.editing != self.index:
            raise PlaywrightTimeoutError("Timeout 10000ms exceeded waiting for inline editor")

    async def clear(self):
        self.app.editor_value = ''

    async def press_sequentially(self, text):
        self.app.editor_value += text


class TaskItem:
    def __init__(self, app, index):
        self.app = app
        self.index = index

    async def inner_text(self):
        self.app.check()
        return self.app.tasks[self.index].text

    def locator(self, selector):
        if selector == SELECTORS.status_icon:
            return StatusIcon(self.app, self.index)
        if selector == SELECTORS.delete_control:
            return DeleteControl(self.app, self.index)
        if selector == SELECTORS.edit_control:
            return EditControl(self.app, self.index)
        if selector == SELECTORS.inline_editor:
            return InlineEditor(self.app, self.index)
        raise AssertionError(f"Unexpected item selector: {selector}")


class TaskItems:
    def __init__(self, app):
        self.app = app

    async def count(self):
        self.app.check()
        return len(self.app.tasks)

    def nth(self, index):
        return TaskItem(self.app, index)


class EmptyState(_Single):
    def __init__(self, app):
        self.app = app

    async def wait_for(self, state='visible', timeout=None):
        if self.app.tasks:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")


class TextElement(_Single):
    def __init__(self, text_fn):
        self.text_fn = text_fn

    async def inner_text(self):
        return self.text_fn()


class FakePage:
    def __init__(self, app: FakeTodoApp):
        self.app = app
        self.screenshots = []

    def locator(self, selector):
        if selector == SELECTORS.task_item:
            return TaskItems(self.app)
        if selector == SELECTORS.task_input:
            return TaskInput(self.app)
        if selector == SELECTORS.submit_button:
            return SubmitButton(self.app)
        if selector == SELECTORS.empty_state:
            return EmptyState(self.app)
        if selector == SELECTORS.heading:
            return TextElement(lambda: 'Todo List')
        if selector == 'body':
            return TextElement(lambda: self.app.health_body)
        raise AssertionError(f"Unexpected page selector: {selector}")

    async def goto(self, url):
        self.app.visited.append(url)
        if url.endswith('/health') and not self.app.backend_up:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")

    async def reload(self):
        self.app.check()

    async def wait_for_function(self, expression, arg=None, timeout=None):
        if arg not in self.app.title:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    async def title(self):
        return self.app.title

    async def set_viewport_size(self, size):
        self.app.viewport = size

    async def screenshot(self, path=None, full_page=False):
        self.screenshots.append(path)


@pytest.fixture(autouse=True)
def fast_settle(monkeypatch):
    """Shrink settle ceilings so unsettled actions do not slow the suite."""
    for name in ('ADD_SETTLE_S', 'DELETE_SETTLE_S', 'TOGGLE_SETTLE_S',
                 'EDIT_OPEN_SETTLE_S', 'EDIT_COMMIT_SETTLE_S'):
        monkeypatch.setattr(todo_actions, name, 0.05)
    monkeypatch.setattr(todo_actions, 'SETTLE_POLL_INTERVAL_S', 0.01)


@pytest.fixture
def fake_app():
    return FakeTodoApp()


@pytest.fixture
def fake_session(fake_app, env_config):
    return BrowserSession(
        playwright=MagicMock(),
        browser=MagicMock(),
        context=MagicMock(),
        page=FakePage(fake_app),
        config=env_config,
    )


@pytest.fixture
def todo(fake_session):
    manager = MagicMock()
    manager.navigate_to_application_root = AsyncMock()
    return TodoActions(fake_session, manager)
