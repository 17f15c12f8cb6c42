"""
Harness data model: environment configuration, task projections and scenario outcomes.
"""
from models.environment import (
    EnvironmentConfig,
    HarnessSettings,
    SettleMode,
    Topology,
    TopologyKind,
    TodoSelectors,
)
from models.task_view import TaskView, TaskQueryResult, QueryState
from models.scenario_outcome import ScenarioOutcome, ScenarioStatus, RunSummary

__all__ = [
    'EnvironmentConfig',
    'HarnessSettings',
    'SettleMode',
    'Topology',
    'TopologyKind',
    'TodoSelectors',
    'TaskView',
    'TaskQueryResult',
    'QueryState',
    'ScenarioOutcome',
    'ScenarioStatus',
    'RunSummary',
]
