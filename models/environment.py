"""
Environment Configuration Model

Immutable records resolved once per session by the environment resolver:
where the application lives, how browsers are provisioned, and which DOM
contract the action library relies on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from utils.harness_errors import ConfigurationError


class TopologyKind(str, Enum):
    """Where browser sessions are executed."""
    LOCAL = "local"
    REMOTE_GRID = "remote_grid"


class SettleMode(str, Enum):
    """How mutating actions wait for the UI to reflect a change."""
    PREDICATE = "predicate"  # poll an explicit condition, delay is the ceiling
    FIXED = "fixed"  # sleep the full delay


@dataclass(frozen=True)
class Topology:
    """Tagged variant: Local | RemoteGrid(endpoint)."""
    kind: TopologyKind
    endpoint: Optional[str] = None

    def __post_init__(self):
        if self.kind == TopologyKind.REMOTE_GRID and not (self.endpoint or '').strip():
            raise ConfigurationError("Remote grid topology requires a non-empty endpoint")
        if self.kind == TopologyKind.LOCAL and self.endpoint is not None:
            raise ConfigurationError("Local topology does not take an endpoint",
                                     {'endpoint': self.endpoint})

    @classmethod
    def local(cls) -> 'Topology':
        return cls(TopologyKind.LOCAL)

    @classmethod
    def remote_grid(cls, endpoint: str) -> 'Topology':
        return cls(TopologyKind.REMOTE_GRID, endpoint)

    @property
    def is_remote(self) -> bool:
        return self.kind == TopologyKind.REMOTE_GRID

    def describe(self) -> str:
        if self.is_remote:
            return f"remote grid at {self.endpoint}"
        return "local browser"


@dataclass(frozen=True)
class TodoSelectors:
    """
    DOM contract of the application under test.

    Any replacement application must keep these selectors working. The edit
    control is assumed to toggle between "start edit" and "save edit": the
    harness clicks it a second time to commit an inline edit.
    """
    task_input: str = 'input[placeholder="Enter a task"]'
    submit_button: str = 'button'
    task_item: str = '.task'
    delete_control: str = 'svg[data-icon="trash-fill"], .icon:last-child'
    edit_control: str = 'svg[data-icon="pencil"], .icon:nth-last-child(2)'
    status_icon: str = '.checkbox .icon'
    completed_marker: str = 'BsFillCheckCircleFill'
    inline_editor: str = 'input[type="text"]'
    empty_state: str = "xpath=//div[contains(text(), 'No tasks found')]"
    heading: str = 'h1'
    health_marker: str = 'OK'


@dataclass(frozen=True)
class HarnessSettings:
    """Browser and timing knobs. Defaults match the application's test profile."""
    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    implicit_wait_ms: int = 10000
    page_load_timeout_ms: int = 30000
    script_timeout_ms: int = 30000
    navigation_ready_timeout_ms: int = 15000
    app_title_marker: str = 'React App'
    settle_mode: SettleMode = SettleMode.PREDICATE
    screenshot_dir: Optional[str] = None
    selectors: TodoSelectors = field(default_factory=TodoSelectors)

    def __post_init__(self):
        for name in ('viewport_width', 'viewport_height', 'implicit_wait_ms',
                     'page_load_timeout_ms', 'script_timeout_ms',
                     'navigation_ready_timeout_ms'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive",
                                         {name: getattr(self, name)})


@dataclass(frozen=True)
class EnvironmentConfig:
    """Everything a session needs to know about where it runs."""
    frontend_url: str
    backend_url: str
    topology: Topology = field(default_factory=Topology.local)
    settings: HarnessSettings = field(default_factory=HarnessSettings)

    @property
    def health_url(self) -> str:
        return f"{self.backend_url.rstrip('/')}/health"
