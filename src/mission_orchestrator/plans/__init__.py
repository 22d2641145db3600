"""Plans module - Task plan data model."""

from .models import (
	ExecutorInfo,
	RoleRecord,
	RunResult,
	RunStatus,
	Subtask,
	SubtaskStatus,
	TaskPlan,
)

__all__ = [
	"TaskPlan",
	"Subtask",
	"SubtaskStatus",
	"ExecutorInfo",
	"RoleRecord",
	"RunResult",
	"RunStatus",
]
