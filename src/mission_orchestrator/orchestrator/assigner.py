"""Assigner - binds the next subtask to a registered executor."""

import logging

from ..agents import Agent, call_agent
from ..errors import ConfigurationError
from ..plans.models import Subtask, TaskPlan
from ..protocol import extract_tag, value_or
from . import prompts

logger = logging.getLogger(__name__)


def parse_assignment(response: str, allowed_names: list[str]) -> tuple[str, str]:
	"""
	Parse ``<selected_agent>`` and ``<detailed_task_description>``.

	Returns:
		Tuple of (executor_name, detailed_description)

	Raises:
		ConfigurationError: If a field is missing or empty, or the name is unknown
	"""
	agent_name = value_or(extract_tag(response, "selected_agent"), "")
	description = value_or(extract_tag(response, "detailed_task_description"), "")

	if not agent_name or not description:
		raise ConfigurationError("Assignment response is missing <selected_agent> or <detailed_task_description>")

	if agent_name not in allowed_names:
		raise ConfigurationError(f"Assigned executor '{agent_name}' is not registered (known: {allowed_names})")

	return agent_name, description


class Assigner:
	"""Selects the executor and writes a self-contained instruction for it."""

	def __init__(self, agent: Agent):
		self.agent = agent

	async def assign(self, plan: TaskPlan) -> Subtask:
		"""
		Assign the first not-started subtask.

		The subtask is only mutated once the response has been validated.

		Raises:
			ConfigurationError: If no subtask is pending or the assignment is invalid
		"""
		task = plan.next_task()
		prompt = prompts.format_prompt(
			prompts.TASK_ASSIGN_PROMPT,
			overall_task=plan.mission,
			task_plan="\n".join(plan.formatted_with_results),
			executor_agents_info=plan.executors_info,
			next_task=task.name,
			executor_agents_names=plan.executor_names,
		)
		response = await call_agent(self.agent, prompt)
		plan.record("assigner", response, task_id=task.id)

		try:
			agent_name, description = parse_assignment(response, [info.name for info in plan.executors])
		except ConfigurationError:
			logger.error(f"Invalid assignment for task {task.id}: {response[:500]}")
			raise

		task.assigned_executor = agent_name
		task.description = description.strip()
		logger.info(f"Task {task.id} assigned to {agent_name}")
		return task
