"""
Task View projections.

A TaskView is recomputed from the DOM on every query. It has no identity
beyond its on-screen index, so a list can go stale between a query and a
follow-up action if something else mutates the application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class TaskView:
    display_text: str
    is_completed: bool = False

    def matches(self, text: str) -> bool:
        return text in self.display_text


class QueryState(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskQueryResult:
    """
    Tri-state result of reading the task list.

    Distinguishes "confirmed zero items" from "could not determine the items",
    which list_tasks() collapses into the same empty list.
    """
    state: QueryState
    items: List[TaskView] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def ok(cls, items: List[TaskView]) -> 'TaskQueryResult':
        if not items:
            return cls.empty()
        return cls(QueryState.OK, list(items))

    @classmethod
    def empty(cls) -> 'TaskQueryResult':
        return cls(QueryState.EMPTY)

    @classmethod
    def failed(cls, reason: str) -> 'TaskQueryResult':
        return cls(QueryState.FAILED, reason=reason)

    @property
    def is_failed(self) -> bool:
        return self.state == QueryState.FAILED

    @property
    def confirmed_empty(self) -> bool:
        return self.state == QueryState.EMPTY

    def __len__(self) -> int:
        return len(self.items)
