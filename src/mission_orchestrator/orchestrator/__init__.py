"""Orchestrator module - Planning, assignment, execution, and answer extraction."""

from .answerer import Answerer
from .assigner import Assigner
from .executor import ExecutionReport, TaskExecutor
from .planner import PlanChoice, PlanDecision, Planner
from .workforce import Workforce

__all__ = [
	"Planner",
	"PlanChoice",
	"PlanDecision",
	"Assigner",
	"TaskExecutor",
	"ExecutionReport",
	"Answerer",
	"Workforce",
]
