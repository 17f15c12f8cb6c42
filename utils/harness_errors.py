"""
Harness Error Taxonomy

Every failure the harness raises on purpose is a HarnessError. The scenario
runner uses the class to decide whether a scenario Failed or Errored:

- SessionAcquisitionError: fatal to the scenario, never to the run
- NavigationTimeoutError: fatal to the scenario
- ElementNotFoundError / WaitTimeoutError: fatal for strict actions,
  absorbed to an empty result by tolerant queries
- TeardownError: logged and swallowed by the session manager
- Backend*Error: raised by the backend API client, never retried
"""

from typing import Optional, Dict, Any
from datetime import datetime


class HarnessError(Exception):
    """Base exception for harness failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ', '.join(f'{key}={value!r}' for key, value in self.context.items())
        return f'{self.message} ({details})'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error': type(self).__name__,
            'message': self.message,
            'context': self.context,
            'timestamp': self.timestamp.isoformat()
        }


class ConfigurationError(HarnessError):
    """Environment configuration is malformed or inconsistent."""


class SessionAcquisitionError(HarnessError):
    """The browser session could not be constructed."""


class NavigationTimeoutError(HarnessError):
    """The application root did not become ready in time."""


class ElementNotFoundError(HarnessError):
    """A required element of the DOM contract was not found."""


class WaitTimeoutError(HarnessError):
    """An explicit wait expired before its condition held."""


class TeardownError(HarnessError):
    """Shutting down a session failed. Logged, never propagated."""


class ScenarioDiscoveryError(HarnessError):
    """Scenario files could not be found or loaded."""


class BackendClientError(HarnessError):
    """The backend rejected a request with a 4xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['status_code'] = self.status_code
        return data


class BackendValidationError(BackendClientError):
    """The task payload was rejected (empty or not a string)."""


class BackendUnavailableError(HarnessError):
    """The backend could not be reached or failed with a 5xx status."""
