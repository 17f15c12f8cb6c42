"""
Todo Action Library

High-level operations against the task list UI of one live browser session.

Two tolerance classes:
- Strict actions (navigate, add_task, delete_task, toggle_task, edit_task)
  raise a HarnessError; the scenario is marked failed.
- Tolerant queries (list_tasks, health_probe) never raise; they fall back to
  an empty list / False. query_tasks() exposes the tri-state result instead.

Items are addressed by on-screen index in render order. Index-based actions
are no-ops when the index is out of range at call time.

Every mutating action ends with a settle wait. In predicate mode the wait
polls for the expected change (item count off by exactly one, completion
flag, inline editor gone) and the delay is only the ceiling; reaching the
ceiling is not an error. In fixed mode the full delay is slept.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple

from playwright.async_api import (
    Locator,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from models.environment import SettleMode
from models.task_view import TaskView, TaskQueryResult
from services.session_manager import BrowserSession, SessionManager
from utils.harness_errors import ElementNotFoundError, WaitTimeoutError

logger = logging.getLogger(__name__)

# Settle ceilings, seconds
ADD_SETTLE_S = 2.0
DELETE_SETTLE_S = 2.0
TOGGLE_SETTLE_S = 2.0
EDIT_OPEN_SETTLE_S = 1.0
EDIT_COMMIT_SETTLE_S = 2.0
SETTLE_POLL_INTERVAL_S = 0.1

INPUT_WAIT_MS = 10000
EMPTY_STATE_TIMEOUT_MS = 10000
RELOAD_READY_TIMEOUT_MS = 15000

DEFAULT_SCREENSHOT_DIR = 'screenshots'


class TodoActions:
    """
    Action vocabulary for one scenario's browser session.

    Args:
        session: Live session owned by the scenario
        session_manager: Used for navigation to the application root
    """

    def __init__(self, session: BrowserSession, session_manager: Optional[SessionManager] = None):
        self.session = session
        self.session_manager = session_manager or SessionManager()
        self.config = session.config
        self.settings = session.config.settings
        self.selectors = session.config.settings.selectors

    @property
    def page(self):
        return self.session.page

    # ------------------------------------------------------------------
    # Plumbing

    @asynccontextmanager
    async def _strict(self, action: str, **context):
        """Translate driver failures into ElementNotFoundError."""
        try:
            yield
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(f"{action}: element did not become available",
                                       {**context, 'cause': str(e)}) from e
        except PlaywrightError as e:
            raise ElementNotFoundError(f"{action}: interaction failed",
                                       {**context, 'cause': str(e)}) from e

    async def _settle(self, predicate: Callable[[], Awaitable[bool]],
                      ceiling_s: float, action: str) -> bool:
        """Wait until predicate holds or the ceiling passes. Never raises."""
        if self.settings.settle_mode == SettleMode.FIXED:
            await asyncio.sleep(ceiling_s)
            return True

        loop = asyncio.get_running_loop()
        deadline = loop.time() + ceiling_s
        while True:
            try:
                if await predicate():
                    return True
            except PlaywrightError as e:
                logger.debug(f"{action}: settle predicate not evaluable yet ({e})")
            if loop.time() >= deadline:
                logger.debug(f"{action}: UI did not settle within {ceiling_s}s")
                return False
            await asyncio.sleep(SETTLE_POLL_INTERVAL_S)

    def _items(self) -> Locator:
        return self.page.locator(self.selectors.task_item)

    async def _count(self) -> int:
        return await self._items().count()

    async def _item_at(self, index: int) -> Tuple[Optional[Locator], int]:
        """Locator for the item at index, or None when out of range."""
        count = await self._count()
        if index < 0 or index >= count:
            logger.debug(f"Index {index} out of range for {count} tasks, skipping")
            return None, count
        return self._items().nth(index), count

    async def _is_completed(self, item: Locator) -> bool:
        icons = item.locator(self.selectors.status_icon)
        if await icons.count() == 0:
            return False
        classes = await icons.first.get_attribute('class') or ''
        return self.selectors.completed_marker in classes

    # ------------------------------------------------------------------
    # Strict actions

    async def navigate(self) -> None:
        """Load the application root and wait for readiness."""
        await self.session_manager.navigate_to_application_root(self.session, self.config)

    async def add_task(self, text: str) -> None:
        """
        Type text into the task input and submit it.

        Does not verify the new item appeared; callers re-query with
        list_tasks().
        """
        async with self._strict('add_task', text=text):
            before = await self._count()
            task_input = self.page.locator(self.selectors.task_input).first
            await task_input.wait_for(state='visible', timeout=INPUT_WAIT_MS)
            await task_input.clear()
            await task_input.press_sequentially(text)
            await self.page.locator(self.selectors.submit_button).first.click()

        async def one_more_item():
            return await self._count() == before + 1

        await self._settle(one_more_item, ADD_SETTLE_S, 'add_task')
        logger.debug(f"Added task {text[:40]!r}")

    async def delete_task(self, index: int) -> None:
        async with self._strict('delete_task', index=index):
            item, before = await self._item_at(index)
            if item is None:
                return
            await item.locator(self.selectors.delete_control).last.click()

        async def one_less_item():
            return await self._count() == before - 1

        await self._settle(one_less_item, DELETE_SETTLE_S, 'delete_task')

    async def toggle_task(self, index: int) -> None:
        async with self._strict('toggle_task', index=index):
            item, _ = await self._item_at(index)
            if item is None:
                return
            was_completed = await self._is_completed(item)
            await item.locator(self.selectors.status_icon).first.click()

        async def flag_flipped():
            current, _ = await self._item_at(index)
            return current is not None and await self._is_completed(current) != was_completed

        await self._settle(flag_flipped, TOGGLE_SETTLE_S, 'toggle_task')

    async def edit_task(self, index: int, new_text: str) -> None:
        """
        Replace an item's text through its inline editor.

        The edit control is clicked once to open the editor and a second time
        to save.
        """
        async with self._strict('edit_task', index=index, text=new_text):
            item, _ = await self._item_at(index)
            if item is None:
                return
            edit_control = item.locator(self.selectors.edit_control).last
            editor = item.locator(self.selectors.inline_editor).first

            await edit_control.click()
            await self._settle(editor.is_visible, EDIT_OPEN_SETTLE_S, 'edit_task:open')

            await editor.wait_for(state='visible')
            await editor.clear()
            await editor.press_sequentially(new_text)
            await edit_control.click()

        async def editor_closed():
            return await item.locator(self.selectors.inline_editor).count() == 0

        await self._settle(editor_closed, EDIT_COMMIT_SETTLE_S, 'edit_task:commit')

    async def wait_for_empty_state(self) -> None:
        """
        Block until the "no items" indicator is visible.

        Raises:
            WaitTimeoutError: indicator did not appear within 10s
        """
        indicator = self.page.locator(self.selectors.empty_state).first
        try:
            await indicator.wait_for(state='visible', timeout=EMPTY_STATE_TIMEOUT_MS)
        except PlaywrightError as e:
            raise WaitTimeoutError("Empty-state indicator did not appear",
                                   {'timeout_ms': EMPTY_STATE_TIMEOUT_MS, 'cause': str(e)}) from e

    # ------------------------------------------------------------------
    # Tolerant queries

    async def query_tasks(self) -> TaskQueryResult:
        """Read every item; distinguishes empty from failed."""
        try:
            items = self._items()
            views = []
            for index in range(await items.count()):
                item = items.nth(index)
                text = (await item.inner_text()).strip()
                views.append(TaskView(display_text=text, is_completed=await self._is_completed(item)))
            return TaskQueryResult.ok(views)
        except Exception as e:
            logger.warning(f"⚠️ Task list query failed: {e}")
            return TaskQueryResult.failed(str(e))

    async def list_tasks(self) -> List[TaskView]:
        """Current items in render order; empty when the query fails."""
        return (await self.query_tasks()).items

    async def task_count(self) -> int:
        return len(await self.list_tasks())

    async def health_probe(self) -> bool:
        """True when the backend health page shows the liveness marker."""
        try:
            await self.page.goto(self.config.health_url)
            body = await self.page.locator('body').inner_text()
        except Exception as e:
            logger.warning(f"⚠️ Health probe failed for {self.config.health_url}: {e}")
            return False
        return self.selectors.health_marker in body

    # ------------------------------------------------------------------
    # Page-level helpers

    async def page_title(self) -> str:
        return await self.page.title()

    async def heading_text(self) -> str:
        async with self._strict('heading_text'):
            return (await self.page.locator(self.selectors.heading).first.inner_text()).strip()

    async def submit_label(self) -> str:
        async with self._strict('submit_label'):
            return (await self.page.locator(self.selectors.submit_button).first.inner_text()).strip()

    async def input_visible(self) -> bool:
        async with self._strict('input_visible'):
            return await self.page.locator(self.selectors.task_input).first.is_visible()

    async def reload(self) -> None:
        """Refresh the page and wait for the application to be ready again."""
        async with self._strict('reload'):
            await self.page.reload()
            await self.page.wait_for_function(
                "marker => document.title.includes(marker)",
                arg=self.settings.app_title_marker,
                timeout=RELOAD_READY_TIMEOUT_MS,
            )

    async def resize_viewport(self, width: int, height: int) -> None:
        async with self._strict('resize_viewport', width=width, height=height):
            await self.page.set_viewport_size({'width': width, 'height': height})

    async def capture_screenshot(self, name: str) -> str:
        directory = Path(self.settings.screenshot_dir or DEFAULT_SCREENSHOT_DIR)
        path = str(directory / f"{name}.png")
        async with self._strict('capture_screenshot', path=path):
            return await self.session.capture_screenshot(path)
