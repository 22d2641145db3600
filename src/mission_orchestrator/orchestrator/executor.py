"""
Executor - drives one subtask to completion with bounded retries.

Each attempt runs the subtask on its bound executor capability, then asks
the same capability whether the work is complete. Unsuccessful attempts
produce a reflection that is fed into the next attempt's prompt.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..agents import Agent, ExecutorRegistry, call_agent
from ..errors import CapabilityError, ConfigurationError
from ..plans.models import Subtask, SubtaskStatus, TaskPlan
from ..protocol import extract_tag, is_yes
from . import prompts

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
	"""Outcome of one ``execute`` call."""
	task_id: int
	executor: str
	attempts: int = 0
	completed: bool = False
	errors: list[str] = field(default_factory=list)
	summarized: bool = False

	@property
	def unsuccessful_attempts(self) -> int:
		return self.attempts - (1 if self.completed else 0)


class TaskExecutor:
	"""Runs assigned subtasks against the executor registry."""

	def __init__(self, registry: ExecutorRegistry, max_tries: int = 1, summarize: bool = False):
		"""
		Initialize the executor.

		Args:
			registry: Executors the subtasks can be bound to
			max_tries: Attempts per subtask (at least 1)
			summarize: Condense successful results with an extra pass
		"""
		if max_tries < 1:
			raise ConfigurationError(f"max_tries must be at least 1, got {max_tries}")
		self.registry = registry
		self.max_tries = max_tries
		self.summarize = summarize

	async def execute(
		self,
		plan: TaskPlan,
		task: Subtask,
		max_tries: Optional[int] = None,
		summarize: Optional[bool] = None,
	) -> ExecutionReport:
		"""
		Execute ``task`` until its self-check passes or tries run out.

		Capability errors count as unsuccessful attempts. On return the
		subtask status is either success or failed.

		Raises:
			ConfigurationError: If the subtask is not bound to a registered executor
		"""
		max_tries = self.max_tries if max_tries is None else max_tries
		summarize = self.summarize if summarize is None else summarize
		if max_tries < 1:
			raise ConfigurationError(f"max_tries must be at least 1, got {max_tries}")

		agent = self.registry.get_agent(task.assigned_executor)
		report = ExecutionReport(task_id=task.id, executor=task.assigned_executor)
		task.advance(SubtaskStatus.IN_PROGRESS)
		logger.info(f"Executing task {task.id}: {task.name}")

		last_result: Optional[str] = None

		for attempt in range(1, max_tries + 1):
			report.attempts = attempt
			logger.info(f"Task {task.id} attempt {attempt}/{max_tries}")

			try:
				result = await call_agent(agent, self._build_prompt(plan, task, attempt))
			except CapabilityError as e:
				logger.error(f"Task {task.id} attempt {attempt} raised: {e}")
				report.errors.append(str(e))
				task.reflections.append(f"Attempt {attempt} could not run: {e}")
				continue

			last_result = result
			plan.record("executor", result, task_id=task.id)

			if await self._self_check(plan, task, agent, result):
				report.completed = True
				break

			logger.warning(f"Task {task.id} not complete after attempt {attempt}/{max_tries}")
			task.reflections.append(await self._reflect(plan, task, agent, result))

		if not report.completed:
			if last_result is None:
				last_error = report.errors[-1] if report.errors else "unknown error"
				last_result = f"Task execution failed: {last_error}"
			task.result = last_result
			task.advance(SubtaskStatus.FAILED)
			logger.error(f"Task {task.id} failed after {report.attempts} attempts")
			return report

		task.result = last_result
		task.advance(SubtaskStatus.SUCCESS)

		if summarize:
			report.summarized = await self._summarize(plan, task, agent)

		logger.info(f"Task {task.id} completed")
		return report

	def _build_prompt(self, plan: TaskPlan, task: Subtask, attempt: int) -> str:
		values = dict(
			overall_task=plan.mission,
			overall_plan=plan.formatted_task_plan,
			task_name=task.name,
			task_description=task.description,
		)
		if attempt == 1 or not task.reflections:
			return prompts.format_prompt(prompts.TASK_EXECUTE_PROMPT, **values)
		return prompts.format_prompt(
			prompts.TASK_EXECUTE_WITH_REFLECTION_PROMPT,
			previous_attempts=task.reflections[-1],
			**values,
		)

	async def _self_check(self, plan: TaskPlan, task: Subtask, agent: Agent, result: str) -> bool:
		"""Ask the executor whether it finished. Only an explicit yes counts."""
		prompt = prompts.format_prompt(
			prompts.TASK_SELF_CHECK_PROMPT,
			task_name=task.name,
			task_description=task.description,
			task_result=result,
		)
		try:
			response = await call_agent(agent, prompt)
		except CapabilityError as e:
			logger.warning(f"Self-check for task {task.id} failed: {e}")
			return False

		plan.record("executor_check", response, task_id=task.id)
		return is_yes(extract_tag(response, "task_check"))

	async def _reflect(self, plan: TaskPlan, task: Subtask, agent: Agent, result: str) -> str:
		prompt = prompts.format_prompt(
			prompts.TASK_REFLECTION_PROMPT,
			task_name=task.name,
			task_description=task.description,
			task_result=result,
		)
		try:
			reflection = await call_agent(agent, prompt)
		except CapabilityError as e:
			logger.warning(f"Reflection for task {task.id} failed: {e}")
			return f"Reflection unavailable ({e}). Previous result: {result}"

		plan.record("executor_reflection", reflection, task_id=task.id)
		return reflection.strip()

	async def _summarize(self, plan: TaskPlan, task: Subtask, agent: Agent) -> bool:
		"""Replace the result with a condensed summary. Keeps the raw result on failure."""
		prompt = prompts.format_prompt(
			prompts.TASK_SUMMARY_PROMPT,
			task_name=task.name,
			task_description=task.description,
			task_result=task.result,
		)
		try:
			summary = await call_agent(agent, prompt)
		except CapabilityError as e:
			logger.warning(f"Summary for task {task.id} failed, keeping raw result: {e}")
			return False

		plan.record("executor_summary", summary, task_id=task.id)
		summary = summary.strip()
		task.result = summary
		task.detailed_result = summary
		return True
