"""
Scenario outcomes and the run summary that turns them into an exit code.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class ScenarioStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


@dataclass
class ScenarioOutcome:
    name: str
    status: ScenarioStatus
    duration_ms: float
    source_file: Optional[str] = None
    failure_detail: Optional[str] = None
    screenshot_path: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == ScenarioStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'source_file': self.source_file,
            'status': self.status.value,
            'duration_ms': round(self.duration_ms, 1),
            'failure_detail': self.failure_detail,
            'screenshot_path': self.screenshot_path
        }


@dataclass
class RunSummary:
    """Aggregated outcomes of one runner invocation."""
    started_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())
    outcomes: List[ScenarioOutcome] = field(default_factory=list)

    def add(self, outcome: ScenarioOutcome):
        self.outcomes.append(outcome)

    def count(self, status: ScenarioStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and all(o.passed for o in self.outcomes)

    @property
    def duration_ms(self) -> float:
        return sum(o.duration_ms for o in self.outcomes)

    @property
    def exit_code(self) -> int:
        return 0 if self.all_passed else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'started_at': self.started_at,
            'outcomes': [o.to_dict() for o in self.outcomes],
            'summary': {
                'total': self.total,
                'passed': self.count(ScenarioStatus.PASSED),
                'failed': self.count(ScenarioStatus.FAILED),
                'errored': self.count(ScenarioStatus.ERRORED),
                'duration_ms': round(self.duration_ms, 1)
            }
        }
