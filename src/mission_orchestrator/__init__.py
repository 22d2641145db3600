"""Mission Orchestrator - plan, assign, execute and answer multi-step missions."""

from .agents import Agent, ClaudeCLIAgent, ExecutorRegistry
from .errors import CapabilityError, ConfigurationError, MissionFailedError, OrchestratorError
from .orchestrator import Workforce
from .plans import ExecutorInfo, Subtask, SubtaskStatus, TaskPlan

__all__ = [
	"Agent",
	"ClaudeCLIAgent",
	"ExecutorRegistry",
	"ExecutorInfo",
	"Workforce",
	"TaskPlan",
	"Subtask",
	"SubtaskStatus",
	"OrchestratorError",
	"ConfigurationError",
	"CapabilityError",
	"MissionFailedError",
]
