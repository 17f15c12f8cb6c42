"""
Session Manager - Browser Session Lifecycle

Owns one Playwright browser session per scenario:
- acquire(): launch a local Chromium or connect to a remote grid endpoint,
  then apply viewport and the three timeout budgets
- release(): best-effort shutdown that never raises
- navigate_to_application_root(): load the frontend and wait for the
  title-based readiness marker
- session_scope(): acquire/release pair with guaranteed release

Sessions are never shared between scenarios.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Callable, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from models.environment import EnvironmentConfig, HarnessSettings
from utils.harness_errors import (
    NavigationTimeoutError,
    SessionAcquisitionError,
    TeardownError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)

# Headless stability flags, applied to every locally launched browser
BASE_BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
]

# Security relaxation, local launches only
LOCAL_ONLY_BROWSER_ARGS = [
    '--disable-extensions',
    '--disable-web-security',
    '--disable-features=VizDisplayCompositor',
]


@dataclass
class BrowserSession:
    """Live handle to one browser instance, used by exactly one scenario."""
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    config: EnvironmentConfig
    created_at: float = field(default_factory=time.monotonic)
    closed: bool = False

    @property
    def settings(self) -> HarnessSettings:
        return self.config.settings

    @property
    def age_seconds(self) -> float:
        return time.monotonic() - self.created_at

    async def execute_script(self, expression: str, arg: Any = None) -> Any:
        """Evaluate JavaScript in the page, bounded by the script timeout."""
        timeout_s = self.settings.script_timeout_ms / 1000
        try:
            return await asyncio.wait_for(self.page.evaluate(expression, arg), timeout=timeout_s)
        except asyncio.TimeoutError:
            raise WaitTimeoutError("Script execution exceeded timeout",
                                   {'timeout_ms': self.settings.script_timeout_ms})

    async def capture_screenshot(self, path: str) -> str:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await self.page.screenshot(path=path, full_page=True)
        return path


def build_browser_args(settings: HarnessSettings) -> List[str]:
    """Command line flags for a local launch."""
    args = list(BASE_BROWSER_ARGS)
    args.append(f'--window-size={settings.viewport_width},{settings.viewport_height}')
    args.extend(LOCAL_ONLY_BROWSER_ARGS)
    return args


class SessionManager:
    """
    Acquires and releases browser sessions.

    Args:
        playwright_factory: Callable returning a Playwright context manager
            (async_playwright by default)
    """

    def __init__(self, playwright_factory: Optional[Callable[[], Any]] = None):
        self.playwright_factory = playwright_factory or async_playwright

    async def acquire(self, config: EnvironmentConfig) -> BrowserSession:
        """
        Start a browser session for one scenario.

        Raises:
            SessionAcquisitionError: the driver could not be constructed
        """
        settings = config.settings
        topology = config.topology
        playwright = None
        browser = None

        logger.info(f"🌐 Acquiring browser session ({topology.describe()})")
        try:
            playwright = await self.playwright_factory().start()

            if topology.is_remote:
                browser = await playwright.chromium.connect(
                    topology.endpoint,
                    timeout=settings.page_load_timeout_ms,
                )
            else:
                browser = await playwright.chromium.launch(
                    headless=settings.headless,
                    args=build_browser_args(settings),
                )

            context = await browser.new_context(
                viewport={'width': settings.viewport_width, 'height': settings.viewport_height},
                ignore_https_errors=True,
            )
            context.set_default_timeout(settings.implicit_wait_ms)
            context.set_default_navigation_timeout(settings.page_load_timeout_ms)
            page = await context.new_page()
        except Exception as e:
            logger.error(f"❌ Browser session acquisition failed: {e}")
            await self._close_quietly(browser, playwright)
            raise SessionAcquisitionError(
                "Could not start browser session",
                {'topology': topology.kind.value, 'endpoint': topology.endpoint, 'cause': str(e)}
            ) from e

        logger.debug(
            f"Session ready: viewport={settings.viewport_width}x{settings.viewport_height} "
            f"implicit={settings.implicit_wait_ms}ms page_load={settings.page_load_timeout_ms}ms "
            f"script={settings.script_timeout_ms}ms"
        )
        return BrowserSession(
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
            config=config,
        )

    async def release(self, session: Optional[BrowserSession]) -> None:
        """Shut a session down. Failures are logged and swallowed."""
        if session is None or session.closed:
            return
        session.closed = True

        steps = (
            ('context', session.context.close),
            ('browser', session.browser.close),
            ('driver', session.playwright.stop),
        )
        for name, close in steps:
            try:
                await close()
            except Exception as e:
                error = TeardownError(f"Failed to close {name}", {'cause': str(e)})
                logger.warning(f"⚠️ {error}")

        logger.info(f"🧹 Browser session released after {session.age_seconds:.1f}s")

    async def _close_quietly(self, browser, playwright) -> None:
        for closer in (getattr(browser, 'close', None), getattr(playwright, 'stop', None)):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.debug(f"Ignoring cleanup failure after aborted acquisition: {e}")

    async def navigate_to_application_root(self, session: BrowserSession,
                                           config: Optional[EnvironmentConfig] = None) -> None:
        """
        Load the frontend and wait for the readiness marker in the title.

        Raises:
            NavigationTimeoutError: the application did not become ready
        """
        config = config or session.config
        settings = config.settings
        marker = settings.app_title_marker
        try:
            await session.page.goto(config.frontend_url)
            await session.page.wait_for_function(
                "marker => document.title.includes(marker)",
                arg=marker,
                timeout=settings.navigation_ready_timeout_ms,
            )
        except (PlaywrightTimeoutError, PlaywrightError) as e:
            raise NavigationTimeoutError(
                "Application did not become ready",
                {'url': config.frontend_url, 'title_marker': marker,
                 'timeout_ms': settings.navigation_ready_timeout_ms, 'cause': str(e)}
            ) from e
        logger.debug(f"Application ready at {config.frontend_url}")

    @asynccontextmanager
    async def session_scope(self, config: EnvironmentConfig) -> AsyncIterator[BrowserSession]:
        session = await self.acquire(config)
        try:
            yield session
        finally:
            await self.release(session)
