"""
Planner - Decomposes the mission and steers the remaining plan.

The planner owns three decisions:
- the initial plan (one subtask per ``<task>`` fragment)
- the status verdict of every finished subtask
- whether to continue, revise or stop the unfinished part of the plan

Unparseable responses never raise; each decision has a conservative default.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..agents import Agent, call_agent
from ..plans.models import Subtask, SubtaskStatus, TaskPlan
from ..protocol import Found, extract_all, extract_tag
from . import prompts

logger = logging.getLogger(__name__)


class PlanChoice(str, Enum):
	"""Decision taken on the unfinished part of the plan."""
	CONTINUE = "continue"
	UPDATE = "update"
	STOP = "stop"


@dataclass
class PlanDecision:
	"""Parsed re-planning response."""
	choice: PlanChoice
	updated_tasks: list[str] = field(default_factory=list)
	applied: bool = False


def parse_tasks(response: str) -> list[str]:
	"""Return the non-blank ``<task>`` fragments in document order."""
	return [task for task in extract_all(response, "task") if task]


def parse_task_status(response: str) -> SubtaskStatus:
	"""Map a ``<task_status>`` field to a terminal status. Defaults to partial success."""
	result = extract_tag(response, "task_status")
	if not isinstance(result, Found):
		logger.warning("No <task_status> tag found, defaulting to partial_success")
		return SubtaskStatus.PARTIAL_SUCCESS

	value = result.text.lower()
	if "partial" in value:
		return SubtaskStatus.PARTIAL_SUCCESS
	if value == "success":
		return SubtaskStatus.SUCCESS
	if value == "failed":
		return SubtaskStatus.FAILED

	logger.warning(f"Unexpected task status '{result.text}', defaulting to partial_success")
	return SubtaskStatus.PARTIAL_SUCCESS


def parse_plan_decision(response: str) -> PlanDecision:
	"""
	Parse a re-planning response.

	A missing or unknown ``<choice>`` means continue. An update without a
	non-empty ``<updated_unfinished_task_plan>`` also degrades to continue.
	"""
	result = extract_tag(response, "choice")
	if not isinstance(result, Found):
		logger.warning("No <choice> tag found, defaulting to 'continue'")
		return PlanDecision(choice=PlanChoice.CONTINUE)

	try:
		choice = PlanChoice(result.text.lower())
	except ValueError:
		logger.warning(f"Unexpected choice '{result.text}', defaulting to 'continue'")
		return PlanDecision(choice=PlanChoice.CONTINUE)

	if choice != PlanChoice.UPDATE:
		return PlanDecision(choice=choice)

	block = extract_tag(response, "updated_unfinished_task_plan")
	if not isinstance(block, Found):
		logger.warning("Update requested without <updated_unfinished_task_plan>, continuing")
		return PlanDecision(choice=PlanChoice.CONTINUE)

	tasks = parse_tasks(block.text)
	if not tasks:
		logger.warning("Updated plan contains no tasks, continuing")
		return PlanDecision(choice=PlanChoice.CONTINUE)

	return PlanDecision(choice=PlanChoice.UPDATE, updated_tasks=tasks)


class Planner:
	"""
	Plans, checks and revises the mission's subtasks.

	All three calls are single-shot: a CapabilityError from the agent
	propagates to the caller.
	"""

	def __init__(self, agent: Agent, max_plan_updates: Optional[int] = 10):
		"""
		Initialize the planner.

		Args:
			agent: Capability used for every planner prompt
			max_plan_updates: Revisions allowed per run, None for unlimited
		"""
		self.agent = agent
		self.max_plan_updates = max_plan_updates

	async def plan(self, plan: TaskPlan) -> list[Subtask]:
		"""Produce the initial subtasks and install them in ``plan``."""
		prompt = prompts.format_prompt(
			prompts.TASK_PLAN_PROMPT,
			overall_task=plan.mission,
			executor_agents_info=plan.executors_info,
		)
		response = await call_agent(self.agent, prompt)
		plan.record("planner", response)

		names = parse_tasks(response)
		if not names:
			logger.warning("Planner response contained no <task> tags, plan is empty")

		subtasks = [Subtask(id=index, name=name) for index, name in enumerate(names, start=1)]
		plan.plan_init(subtasks)
		logger.info(f"Planned {len(subtasks)} subtasks")
		return subtasks

	async def check(self, plan: TaskPlan, task: Subtask) -> SubtaskStatus:
		"""Judge a finished subtask and record the verdict as its status."""
		prompt = prompts.format_prompt(
			prompts.TASK_CHECK_PROMPT,
			overall_task=plan.mission,
			task_plan="\n".join(plan.formatted_with_results),
			last_completed_task=task.name,
			last_completed_task_id=task.id,
			last_completed_task_description=task.description,
			last_completed_task_result=task.result,
		)
		response = await call_agent(self.agent, prompt)
		plan.record("planner", response, task_id=task.id)

		status = parse_task_status(response)
		task.advance(status)
		logger.info(f"Task {task.id} checked: {status.value}")
		return status

	async def replan(self, plan: TaskPlan, task: Subtask) -> PlanDecision:
		"""
		Decide what happens to the plan after ``task``.

		Args:
			plan: The mission plan
			task: The subtask that just finished

		Returns:
			PlanDecision; ``applied`` is True when the plan was rewritten
		"""
		formatted = plan.formatted_with_results
		prompt = prompts.format_prompt(
			prompts.TASK_UPDATE_PLAN_PROMPT,
			overall_task=plan.mission,
			previous_task_plan="\n".join(formatted[:task.id]),
			unfinished_task_plan="\n".join(formatted[task.id:]),
		)
		response = await call_agent(self.agent, prompt)
		plan.record("planner", response, task_id=task.id)

		decision = parse_plan_decision(response)
		if decision.choice != PlanChoice.UPDATE:
			logger.info(f"Plan decision after task {task.id}: {decision.choice.value}")
			return decision

		if self.max_plan_updates is not None and plan.plan_updates >= self.max_plan_updates:
			logger.warning(
				f"Plan update limit ({self.max_plan_updates}) reached, continuing with current plan"
			)
			return PlanDecision(choice=PlanChoice.CONTINUE, updated_tasks=decision.updated_tasks)

		new_tasks = plan.plan_update(task, decision.updated_tasks)
		decision.applied = True
		logger.info(f"Plan updated after task {task.id}: {len(new_tasks)} remaining subtasks")
		return decision
