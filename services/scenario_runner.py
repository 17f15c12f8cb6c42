"""
Scenario Runner

Discovers scenario files, runs each scenario in its own browser session and
turns the outcomes into a process exit code.

A scenario file is a Python module named sNN_<topic>.py. Each coroutine
function named scenario_* in it is one scenario; it receives a TodoActions
bound to a fresh session. The first docstring line is the display name.

Per scenario:

    Pending -> Running -> Passed | Failed | Errored -> Reported

- acquisition failure: Errored, body skipped
- AssertionError or HarnessError from the body: Failed
- any other exception: Errored
- release() always runs before the outcome is reported

Scenarios run strictly one after another and are never retried.
"""

import importlib.util
import inspect
import logging
import sys
import time
import traceback
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from models.environment import EnvironmentConfig
from models.scenario_outcome import RunSummary, ScenarioOutcome, ScenarioStatus
from services.environment_resolver import resolve_environment
from services.session_manager import BrowserSession, SessionManager
from services.todo_actions import TodoActions
from utils.harness_errors import HarnessError, ScenarioDiscoveryError

logger = logging.getLogger(__name__)

SCENARIO_FILE_GLOB = 's[0-9][0-9]_*.py'
SCENARIO_FUNCTION_PREFIX = 'scenario_'
DEFAULT_SCENARIO_DIR = Path(__file__).resolve().parent.parent / 'scenarios'

ScenarioFunc = Callable[[TodoActions], Awaitable[None]]


class ScenarioState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"
    REPORTED = "reported"


@dataclass
class Scenario:
    name: str
    source_file: str
    func: ScenarioFunc

    @property
    def qualified_name(self) -> str:
        return f"{self.source_file}::{self.func.__name__}"


# ----------------------------------------------------------------------
# Discovery

def discover_scenario_files(directory: Optional[Path] = None) -> List[Path]:
    directory = Path(directory or DEFAULT_SCENARIO_DIR)
    if not directory.is_dir():
        raise ScenarioDiscoveryError("Scenario directory not found", {'directory': str(directory)})
    return sorted(directory.glob(SCENARIO_FILE_GLOB))


def resolve_scenario_file(name: str, directory: Optional[Path] = None) -> Path:
    """Find one scenario file by name; the .py suffix is optional."""
    directory = Path(directory or DEFAULT_SCENARIO_DIR)
    filename = name if name.endswith('.py') else f"{name}.py"
    path = directory / Path(filename).name
    if not path.is_file():
        available = [p.name for p in discover_scenario_files(directory)]
        raise ScenarioDiscoveryError("Scenario file not found",
                                     {'file': filename, 'available': available})
    return path


def _display_name(func: ScenarioFunc) -> str:
    doc = inspect.getdoc(func)
    if doc:
        return doc.splitlines()[0].strip()
    return func.__name__[len(SCENARIO_FUNCTION_PREFIX):].replace('_', ' ')


def load_scenarios(path: Path) -> List[Scenario]:
    """Import a scenario file and collect its scenario_* coroutines in definition order."""
    path = Path(path)
    module_name = f"harness_scenario_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ScenarioDiscoveryError("Cannot load scenario file", {'file': str(path)})

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ScenarioDiscoveryError("Scenario file failed to import",
                                     {'file': path.name, 'cause': f"{type(e).__name__}: {e}"}) from e

    funcs = [
        func for name, func in inspect.getmembers(module, inspect.iscoroutinefunction)
        if name.startswith(SCENARIO_FUNCTION_PREFIX) and func.__module__ == module_name
    ]
    funcs.sort(key=lambda f: f.__code__.co_firstlineno)
    return [Scenario(name=_display_name(f), source_file=path.name, func=f) for f in funcs]


def collect(single: Optional[str] = None, directory: Optional[Path] = None) -> List[Scenario]:
    """Scenarios from one named file, or from every discovered file."""
    if single:
        files = [resolve_scenario_file(single, directory)]
    else:
        files = discover_scenario_files(directory)
    scenarios = []
    for path in files:
        scenarios.extend(load_scenarios(path))
    return scenarios


def _failure_detail(error: BaseException) -> str:
    if isinstance(error, AssertionError):
        message = str(error)
        frames = traceback.extract_tb(error.__traceback__)
        if frames:
            frame = frames[-1]
            where = f"{Path(frame.filename).name}:{frame.lineno}"
            return f"{where}: {message}" if message else f"{where}: {frame.line}"
        return message or "assertion failed"
    return f"{type(error).__name__}: {error}"


# ----------------------------------------------------------------------
# Execution

class ScenarioRunner:
    """
    Runs scenarios sequentially with one session each.

    Args:
        session_manager: Provides acquire/release/navigation
        environment_factory: Resolves a fresh EnvironmentConfig per session
        reporter: Receives one human-readable line per event
    """

    def __init__(
        self,
        session_manager: Optional[SessionManager] = None,
        environment_factory: Callable[[], EnvironmentConfig] = resolve_environment,
        reporter: Callable[[str], None] = print,
    ):
        self.session_manager = session_manager or SessionManager()
        self.environment_factory = environment_factory
        self.reporter = reporter

    def _transition(self, scenario: Scenario, state: ScenarioState):
        logger.debug(f"[{scenario.qualified_name}] -> {state.value}")

    async def run_scenario(self, scenario: Scenario) -> ScenarioOutcome:
        self._transition(scenario, ScenarioState.PENDING)
        started = time.perf_counter()

        def elapsed_ms() -> float:
            return (time.perf_counter() - started) * 1000

        self._transition(scenario, ScenarioState.RUNNING)
        try:
            config = self.environment_factory()
            session = await self.session_manager.acquire(config)
        except HarnessError as e:
            logger.error(f"❌ [{scenario.name}] session acquisition failed: {e}")
            self._transition(scenario, ScenarioState.ERRORED)
            return ScenarioOutcome(
                name=scenario.name,
                status=ScenarioStatus.ERRORED,
                duration_ms=elapsed_ms(),
                source_file=scenario.source_file,
                failure_detail=_failure_detail(e),
            )

        screenshot_path = None
        try:
            try:
                await scenario.func(TodoActions(session, self.session_manager))
                status, detail = ScenarioStatus.PASSED, None
            except (AssertionError, HarnessError) as e:
                status, detail = ScenarioStatus.FAILED, _failure_detail(e)
            except Exception as e:
                logger.exception(f"💥 [{scenario.name}] unexpected error")
                status, detail = ScenarioStatus.ERRORED, _failure_detail(e)

            if status != ScenarioStatus.PASSED:
                screenshot_path = await self._failure_screenshot(session, scenario)
        finally:
            await self.session_manager.release(session)

        self._transition(scenario, ScenarioState(status.value))
        return ScenarioOutcome(
            name=scenario.name,
            status=status,
            duration_ms=elapsed_ms(),
            source_file=scenario.source_file,
            failure_detail=detail,
            screenshot_path=screenshot_path,
        )

    async def _failure_screenshot(self, session: BrowserSession, scenario: Scenario) -> Optional[str]:
        directory = session.settings.screenshot_dir
        if not directory:
            return None
        stem = Path(scenario.source_file).stem
        path = str(Path(directory) / f"{stem}__{scenario.func.__name__}.png")
        try:
            return await session.capture_screenshot(path)
        except Exception as e:
            logger.warning(f"⚠️ Could not capture failure screenshot: {e}")
            return None

    def report(self, scenario: Scenario, outcome: ScenarioOutcome):
        icon = {
            ScenarioStatus.PASSED: '✅',
            ScenarioStatus.FAILED: '❌',
            ScenarioStatus.ERRORED: '💥',
        }[outcome.status]
        line = (f"{icon} {outcome.status.value.upper():7} {scenario.source_file} :: "
                f"{scenario.name} ({outcome.duration_ms:.0f}ms)")
        self.reporter(line)
        if outcome.failure_detail:
            self.reporter(f"    {outcome.failure_detail}")
        if outcome.screenshot_path:
            self.reporter(f"    screenshot: {outcome.screenshot_path}")
        self._transition(scenario, ScenarioState.REPORTED)

    def report_summary(self, summary: RunSummary):
        self.reporter("")
        self.reporter("=" * 60)
        self.reporter(
            f"{summary.total} scenarios: "
            f"{summary.count(ScenarioStatus.PASSED)} passed, "
            f"{summary.count(ScenarioStatus.FAILED)} failed, "
            f"{summary.count(ScenarioStatus.ERRORED)} errored "
            f"in {summary.duration_ms / 1000:.1f}s"
        )
        if summary.all_passed:
            self.reporter("✅ All scenarios passed")
        elif summary.total == 0:
            self.reporter("⚠️ No scenarios were run")
        else:
            self.reporter("❌ Some scenarios did not pass")

    async def run(self, scenarios: List[Scenario]) -> RunSummary:
        summary = RunSummary()
        for scenario in scenarios:
            outcome = await self.run_scenario(scenario)
            self.report(scenario, outcome)
            summary.add(outcome)
        self.report_summary(summary)
        return summary
