"""
Environment Resolver

Determines frontend/backend base URLs and the execution topology from the
process environment. Everything here is a pure function of the mapping it is
given (os.environ by default), so it can run before any browser exists.

URL precedence:
1. Explicitly set variable (FRONTEND_URL / BACKEND_URL)
2. Containerized run: loopback host in the fallback replaced by the
   container-to-host alias
3. Literal fallback (from the TEST_MODE profile)
"""

import logging
import os
from typing import Mapping, Optional, Dict
from urllib.parse import urlsplit, urlunsplit

from models.environment import (
    EnvironmentConfig,
    HarnessSettings,
    SettleMode,
    Topology,
)
from utils.harness_errors import ConfigurationError

logger = logging.getLogger(__name__)

FRONTEND_URL_VAR = 'FRONTEND_URL'
BACKEND_URL_VAR = 'BACKEND_URL'
USE_REMOTE_GRID_VAR = 'USE_REMOTE_GRID'
REMOTE_GRID_URL_VAR = 'REMOTE_GRID_URL'
TEST_MODE_VAR = 'TEST_MODE'
CONTAINERIZED_VAR = 'RUNNING_IN_DOCKER'

DEFAULT_REMOTE_GRID_URL = 'ws://localhost:3000/'
CONTAINER_HOST_ALIAS = 'host.docker.internal'
LOOPBACK_HOSTS = ('localhost', '127.0.0.1')

TRUTHY = ('1', 'true', 'yes', 'on')

# Fallback URLs per named environment
ENVIRONMENT_PROFILES: Dict[str, Dict[str, str]] = {
    'local': {
        'frontend_url': 'http://localhost:3100',
        'backend_url': 'http://localhost:5100',
    },
    'docker': {
        'frontend_url': 'http://localhost:3100',
        'backend_url': 'http://localhost:5100',
    },
    'staging': {
        'frontend_url': 'http://staging.todo-app.com',
        'backend_url': 'http://staging-api.todo-app.com',
    },
    'production': {
        'frontend_url': 'http://todo-app.com',
        'backend_url': 'http://api.todo-app.com',
    },
}
DEFAULT_PROFILE = 'local'


def _env(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def is_truthy(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in TRUTHY


def active_profile(environ: Optional[Mapping[str, str]] = None) -> str:
    """Name of the active profile; unknown names fall back to 'local'."""
    mode = (_env(environ).get(TEST_MODE_VAR) or DEFAULT_PROFILE).strip().lower()
    if mode not in ENVIRONMENT_PROFILES:
        logger.warning(f"⚠️ Unknown {TEST_MODE_VAR}={mode!r}, using '{DEFAULT_PROFILE}' profile")
        return DEFAULT_PROFILE
    return mode


def is_containerized(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = _env(environ)
    if is_truthy(env.get(CONTAINERIZED_VAR)):
        return True
    return (env.get(TEST_MODE_VAR) or '').strip().lower() == 'docker'


def substitute_container_host(url: str) -> str:
    """Swap a loopback host for the container-to-host alias, keeping the port."""
    parts = urlsplit(url)
    if parts.hostname not in LOOPBACK_HOSTS:
        return url

    netloc = CONTAINER_HOST_ALIAS
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    if parts.username:
        credentials = parts.username
        if parts.password:
            credentials = f"{credentials}:{parts.password}"
        netloc = f"{credentials}@{netloc}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def resolve(variable_name: str, fallback_url: str,
            environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve one base URL.

    Args:
        variable_name: Environment variable that overrides everything
        fallback_url: URL used when the variable is unset or blank
        environ: Mapping to read instead of os.environ

    Returns:
        The resolved URL
    """
    env = _env(environ)
    explicit = (env.get(variable_name) or '').strip()
    if explicit:
        return explicit
    if is_containerized(env):
        return substitute_container_host(fallback_url)
    return fallback_url


def resolve_topology(environ: Optional[Mapping[str, str]] = None) -> Topology:
    env = _env(environ)
    if not is_truthy(env.get(USE_REMOTE_GRID_VAR)):
        return Topology.local()
    endpoint = (env.get(REMOTE_GRID_URL_VAR) or '').strip() or DEFAULT_REMOTE_GRID_URL
    return Topology.remote_grid(endpoint)


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", {name: raw})


def _viewport(env: Mapping[str, str], default_width: int, default_height: int):
    raw = (env.get('VIEWPORT') or '').strip().lower()
    if not raw:
        return default_width, default_height
    try:
        width, height = raw.split('x', 1)
        return int(width), int(height)
    except ValueError:
        raise ConfigurationError("VIEWPORT must look like WIDTHxHEIGHT", {'VIEWPORT': raw})


def resolve_settings(environ: Optional[Mapping[str, str]] = None) -> HarnessSettings:
    env = _env(environ)
    defaults = HarnessSettings()

    width, height = _viewport(env, defaults.viewport_width, defaults.viewport_height)

    headless_raw = env.get('HEADLESS')
    headless = defaults.headless if headless_raw is None else is_truthy(headless_raw)

    settle_raw = (env.get('SETTLE_MODE') or defaults.settle_mode.value).strip().lower()
    try:
        settle_mode = SettleMode(settle_raw)
    except ValueError:
        raise ConfigurationError("SETTLE_MODE must be 'predicate' or 'fixed'",
                                 {'SETTLE_MODE': settle_raw})

    return HarnessSettings(
        headless=headless,
        viewport_width=width,
        viewport_height=height,
        implicit_wait_ms=_int_setting(env, 'IMPLICIT_WAIT_MS', defaults.implicit_wait_ms),
        page_load_timeout_ms=_int_setting(env, 'PAGE_LOAD_TIMEOUT_MS', defaults.page_load_timeout_ms),
        script_timeout_ms=_int_setting(env, 'SCRIPT_TIMEOUT_MS', defaults.script_timeout_ms),
        settle_mode=settle_mode,
        screenshot_dir=(env.get('SCREENSHOT_DIR') or '').strip() or None,
    )


def resolve_environment(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """Build the immutable configuration for one session."""
    env = _env(environ)
    profile = ENVIRONMENT_PROFILES[active_profile(env)]

    config = EnvironmentConfig(
        frontend_url=resolve(FRONTEND_URL_VAR, profile['frontend_url'], env),
        backend_url=resolve(BACKEND_URL_VAR, profile['backend_url'], env),
        topology=resolve_topology(env),
        settings=resolve_settings(env),
    )
    logger.debug(
        f"Resolved environment: frontend={config.frontend_url} "
        f"backend={config.backend_url} topology={config.topology.describe()}"
    )
    return config
