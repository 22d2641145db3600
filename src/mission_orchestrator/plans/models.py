"""
Plan Models - Pydantic schemas for the mission task plan.

A TaskPlan holds the mission, the registered executors, the ordered list of
subtasks and an append-only history of every role's raw output. Subtask ids
are contiguous integers starting at 1 and double as stable references, so a
plan revision is a slice of the finished prefix plus freshly numbered tasks.
"""

import json
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..errors import ConfigurationError


class SubtaskStatus(str, Enum):
	"""Status of a subtask within the plan."""
	NOT_STARTED = "not_started"
	IN_PROGRESS = "in_progress"
	SUCCESS = "success"
	PARTIAL_SUCCESS = "partial_success"
	FAILED = "failed"

	@property
	def is_terminal(self) -> bool:
		return self in (SubtaskStatus.SUCCESS, SubtaskStatus.PARTIAL_SUCCESS, SubtaskStatus.FAILED)


class RunStatus(str, Enum):
	"""Status of a whole mission run."""
	PENDING = "pending"
	RUNNING = "running"
	COMPLETED = "completed"
	FAILED = "failed"


class Subtask(BaseModel):
	"""A single unit of work in the plan."""
	id: int = Field(ge=1, description="Position in the plan, starting at 1")
	name: str = Field(description="Short label produced by the planner")
	description: Optional[str] = Field(
		default=None,
		description="Self-contained instruction written by the assigner",
	)
	status: SubtaskStatus = Field(default=SubtaskStatus.NOT_STARTED)
	result: Optional[str] = Field(default=None)
	detailed_result: Optional[str] = Field(default=None)
	assigned_executor: Optional[str] = Field(default=None)
	reflections: list[str] = Field(default_factory=list, description="One entry per unsuccessful attempt")

	@field_validator("name")
	@classmethod
	def _name_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("Subtask name cannot be empty")
		return value

	@field_validator("description")
	@classmethod
	def _strip_description(cls, value: Optional[str]) -> Optional[str]:
		return value.strip() if value is not None else None

	def advance(self, status: SubtaskStatus) -> None:
		"""Move the status forward. A started subtask never returns to an earlier state."""
		if status == SubtaskStatus.NOT_STARTED and self.status != SubtaskStatus.NOT_STARTED:
			raise ValueError(f"Subtask {self.id} cannot be reset to not_started")
		if status == SubtaskStatus.IN_PROGRESS and self.status.is_terminal:
			raise ValueError(f"Subtask {self.id} is already {self.status.value}")
		self.status = status

	@property
	def formatted_with_result(self) -> str:
		"""Tagged rendering used inside prompts."""
		lines = [
			f"<task_id:{self.id}>{self.name}</task_id:{self.id}>",
			f"<task_status>{self.status.value}</task_status>",
		]
		if self.result is not None:
			lines.append(f"<task_result>{self.result}</task_result>")
		return "\n".join(lines)


class ExecutorInfo(BaseModel):
	"""Descriptor of an execution capability available for assignment."""
	name: str
	description: str = ""
	strengths: list[str] = Field(default_factory=list)
	weaknesses: list[str] = Field(default_factory=list)

	@field_validator("name")
	@classmethod
	def _name_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("Executor name cannot be empty")
		return value

	def describe(self) -> str:
		line = f"- {self.name}: {self.description}"
		if self.strengths:
			line += f"\n  Strengths: {', '.join(self.strengths)}"
		if self.weaknesses:
			line += f"\n  Weaknesses: {', '.join(self.weaknesses)}"
		return line


class RoleRecord(BaseModel):
	"""One raw output produced by a role during the run."""
	role: str
	content: str
	task_id: Optional[int] = None
	timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class RunResult(BaseModel):
	"""Serializable outcome of a mission run."""
	trace_id: str
	mission: str
	status: RunStatus
	final_answer: Optional[str] = None
	error: Optional[str] = None
	subtasks: list[Subtask] = Field(default_factory=list)
	role_history: list[RoleRecord] = Field(default_factory=list)
	plan_updates: int = 0
	started_at: str
	ended_at: Optional[str] = None


class TaskPlan(BaseModel):
	"""
	The recorder for a single mission run.

	Owned by one orchestrator for the lifetime of the run; all mutation
	happens between subtask executions.
	"""
	mission: str = Field(description="The original mission text")
	executors: list[ExecutorInfo] = Field(default_factory=list)
	subtasks: list[Subtask] = Field(default_factory=list)
	role_history: list[RoleRecord] = Field(default_factory=list)
	final_answer: Optional[str] = Field(default=None)

	trace_id: str = Field(default_factory=lambda: f"trace-{uuid.uuid4().hex[:12]}")
	status: RunStatus = Field(default=RunStatus.PENDING)
	error: Optional[str] = Field(default=None)
	plan_updates: int = Field(default=0)
	started_at: str = Field(default_factory=lambda: datetime.now().isoformat())
	ended_at: Optional[str] = Field(default=None)

	@field_validator("mission")
	@classmethod
	def _mission_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("Mission cannot be empty")
		return value

	# Renderings used by prompts

	@property
	def executors_info(self) -> str:
		return "\n".join(info.describe() for info in self.executors)

	@property
	def executor_names(self) -> str:
		return json.dumps([info.name for info in self.executors])

	@property
	def formatted_task_plan(self) -> str:
		return "\n".join(
			f"{task.id}. {task.name} - Status: {task.status.value}"
			for task in self.subtasks
		)

	@property
	def formatted_with_results(self) -> list[str]:
		return [task.formatted_with_result for task in self.subtasks]

	# Plan mutation

	def plan_init(self, subtasks: list[Subtask]) -> None:
		"""Install the initial plan."""
		self.subtasks = list(subtasks)

	def plan_update(self, finished: Subtask, task_names: list[str]) -> list[Subtask]:
		"""
		Replace everything after ``finished`` with fresh subtasks.

		Subtasks up to and including ``finished`` are kept as they are; the
		old tail is discarded, not retried.

		Returns:
			The newly created subtasks
		"""
		keep = self.subtasks[:finished.id]
		new_tasks = [
			Subtask(id=finished.id + offset, name=name)
			for offset, name in enumerate(task_names, start=1)
		]
		self.subtasks = keep + new_tasks
		self.plan_updates += 1
		return new_tasks

	@property
	def has_uncompleted_tasks(self) -> bool:
		return any(task.status == SubtaskStatus.NOT_STARTED for task in self.subtasks)

	def next_task(self) -> Subtask:
		"""Return the first not-started subtask."""
		if not self.subtasks:
			raise ConfigurationError("No task plan available")
		for task in self.subtasks:
			if task.status == SubtaskStatus.NOT_STARTED:
				return task
		raise ConfigurationError("No uncompleted tasks")

	# Run bookkeeping

	def record(self, role: str, content: str, task_id: Optional[int] = None) -> None:
		"""Append a role's raw output to the history."""
		self.role_history.append(RoleRecord(role=role, content=content, task_id=task_id))

	def set_final_output(self, answer: str) -> None:
		self.final_answer = answer.strip() if answer else ""
		self.status = RunStatus.COMPLETED
		self.ended_at = datetime.now().isoformat()

	def mark_failed(self, error: str) -> None:
		self.status = RunStatus.FAILED
		self.error = error
		self.ended_at = datetime.now().isoformat()

	def get_progress(self) -> dict:
		"""Count subtasks per status."""
		counts = {status.value: 0 for status in SubtaskStatus}
		for task in self.subtasks:
			counts[task.status.value] += 1
		finished = sum(1 for t in self.subtasks if t.status.is_terminal)
		return {
			"total_tasks": len(self.subtasks),
			"finished_tasks": finished,
			"by_status": counts,
			"plan_updates": self.plan_updates,
		}

	def to_run_result(self) -> RunResult:
		return RunResult(
			trace_id=self.trace_id,
			mission=self.mission,
			status=self.status,
			final_answer=self.final_answer,
			error=self.error,
			subtasks=[task.model_copy(deep=True) for task in self.subtasks],
			role_history=list(self.role_history),
			plan_updates=self.plan_updates,
			started_at=self.started_at,
			ended_at=self.ended_at,
		)

	def to_markdown(self) -> str:
		"""Convert the plan to markdown format."""
		lines = [
			f"# {self.mission}",
			"",
			f"**Trace:** {self.trace_id}",
			f"**Status:** {self.status.value}",
			f"**Started:** {self.started_at}",
			"",
			"## Subtasks",
		]

		for task in self.subtasks:
			icon = {
				SubtaskStatus.NOT_STARTED: "[ ]",
				SubtaskStatus.IN_PROGRESS: "[~]",
				SubtaskStatus.SUCCESS: "[x]",
				SubtaskStatus.PARTIAL_SUCCESS: "[/]",
				SubtaskStatus.FAILED: "[!]",
			}.get(task.status, "[ ]")
			executor = f" ({task.assigned_executor})" if task.assigned_executor else ""
			lines.append(f"- {icon} {task.id}. {task.name}{executor}")
			if task.result:
				lines.append(f"  - Result: {task.result}")
		lines.append("")

		if self.final_answer is not None:
			lines.append("## Answer")
			lines.append(self.final_answer)
			lines.append("")

		if self.error:
			lines.append("## Error")
			lines.append(self.error)
			lines.append("")

		return "\n".join(lines)
