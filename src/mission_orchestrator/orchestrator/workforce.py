"""
Workforce - the mission control loop.

Plan → { assign → execute → check → replan } → answer.

Exactly one subtask is in flight at a time and the plan is only rewritten
between subtasks. A fatal error aborts the loop without calling the
answerer; the partial plan travels with the raised MissionFailedError.
"""

import logging
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from ..agents import Agent, ClaudeCLIAgent, ExecutorRegistry
from ..config import Config
from ..errors import ConfigurationError, MissionFailedError
from ..instrumentation import InstrumentedAgent, InvocationLog
from ..plans.models import ExecutorInfo, RunStatus, Subtask, TaskPlan
from .answerer import Answerer
from .assigner import Assigner
from .executor import TaskExecutor
from .planner import PlanChoice, Planner

logger = logging.getLogger(__name__)

SubtaskCallback = Callable[[TaskPlan, Subtask], Awaitable[None]]
MissionCallback = Callable[[TaskPlan], Awaitable[None]]


class Workforce:
	"""
	Orchestrates planner, assigner, executors and answerer for one mission at a time.

	Independent missions may run concurrently; each run owns its own TaskPlan.
	"""

	def __init__(
		self,
		planner_agent: Agent,
		assigner_agent: Agent,
		answerer_agent: Agent,
		registry: ExecutorRegistry,
		max_tries: int = 1,
		summarize: bool = False,
		max_plan_updates: Optional[int] = 10,
		on_subtask_finished: Optional[SubtaskCallback] = None,
		on_mission_started: Optional[MissionCallback] = None,
		on_mission_finished: Optional[MissionCallback] = None,
	):
		"""
		Initialize the workforce.

		Args:
			planner_agent: Capability for planning, checking and re-planning
			assigner_agent: Capability for assignments
			answerer_agent: Capability for answer extraction
			registry: Executors available to subtasks
			max_tries: Attempts per subtask
			summarize: Summarize successful subtask results
			max_plan_updates: Plan revisions allowed per run, None for unlimited
			on_subtask_finished: Callback(plan, subtask) after each checked subtask
			on_mission_started: Callback(plan) once the run starts
			on_mission_finished: Callback(plan) when the run completes or fails
		"""
		self.registry = registry
		self.planner = Planner(planner_agent, max_plan_updates=max_plan_updates)
		self.assigner = Assigner(assigner_agent)
		self.executor = TaskExecutor(registry, max_tries=max_tries, summarize=summarize)
		self.answerer = Answerer(answerer_agent)
		self.on_subtask_finished = on_subtask_finished
		self.on_mission_started = on_mission_started
		self.on_mission_finished = on_mission_finished

	@classmethod
	def from_config(
		cls,
		config: Config,
		invocation_log: Optional[InvocationLog] = None,
		on_subtask_finished: Optional[SubtaskCallback] = None,
		on_mission_started: Optional[MissionCallback] = None,
		on_mission_finished: Optional[MissionCallback] = None,
	) -> "Workforce":
		"""Build a workforce whose roles run through the configured agent CLI."""
		config.validate()

		def make_agent(role: str, model: Optional[str], instructions: Optional[str] = None) -> Agent:
			agent: Agent = ClaudeCLIAgent(
				command=config.agent_command,
				model=model or config.model,
				instructions=instructions,
				timeout=config.agent_timeout,
			)
			if invocation_log is not None:
				agent = InstrumentedAgent(agent, role, invocation_log)
			return agent

		registry = ExecutorRegistry()
		info_fields = set(ExecutorInfo.model_fields)
		for definition in config.executors:
			try:
				info = ExecutorInfo.model_validate({k: v for k, v in definition.items() if k in info_fields})
			except ValidationError as e:
				raise ConfigurationError(f"Invalid executor {definition.get('name')!r}: {e}") from e
			registry.register(
				info,
				make_agent(f"executor:{info.name}", definition.get("model"), definition.get("instructions")),
			)

		return cls(
			planner_agent=make_agent("planner", config.planner_model, "You are a task planning specialist."),
			assigner_agent=make_agent("assigner", config.assigner_model, "You are a task assignment specialist."),
			answerer_agent=make_agent("answerer", config.answerer_model, "You are a final answer extraction specialist."),
			registry=registry,
			max_tries=config.max_tries,
			summarize=config.summarize,
			max_plan_updates=config.max_plan_updates,
			on_subtask_finished=on_subtask_finished,
			on_mission_started=on_mission_started,
			on_mission_finished=on_mission_finished,
		)

	async def run(self, mission: str, trace_id: Optional[str] = None) -> TaskPlan:
		"""
		Run a mission to its final answer.

		Args:
			mission: The natural-language task
			trace_id: Optional identifier for the run

		Returns:
			The completed TaskPlan with its final answer

		Raises:
			MissionFailedError: If planning, assignment or answering fails
		"""
		plan = TaskPlan(mission=mission, executors=self.registry.infos)
		if trace_id:
			plan.trace_id = trace_id
		plan.status = RunStatus.RUNNING
		logger.info(f"Starting mission {plan.trace_id}: {plan.mission[:200]}")
		await self._notify(self.on_mission_started, "mission_started", plan)

		try:
			await self.planner.plan(plan)
			logger.info(f"Plan:\n{plan.formatted_task_plan}")

			while plan.has_uncompleted_tasks:
				task = await self.assigner.assign(plan)
				await self.executor.execute(plan, task)
				await self.planner.check(plan, task)
				logger.info(f"Task {task.id} finished with status {task.status.value}")
				await self._notify(self.on_subtask_finished, "subtask_finished", plan, task)

				if not plan.has_uncompleted_tasks:
					break

				decision = await self.planner.replan(plan, task)
				if decision.choice == PlanChoice.STOP:
					logger.info("Planner judged the mission complete, stopping early")
					break
				if decision.applied:
					logger.info(f"Updated plan:\n{plan.formatted_task_plan}")

			answer = await self.answerer.extract(plan)
			plan.set_final_output(answer)
		except Exception as e:
			plan.mark_failed(f"{type(e).__name__}: {e}")
			logger.error(f"Mission {plan.trace_id} failed: {e}")
			await self._notify(self.on_mission_finished, "mission_finished", plan)
			raise MissionFailedError(f"Mission failed: {e}", plan=plan, cause=e) from e

		logger.info(f"Mission {plan.trace_id} completed: {plan.final_answer}")
		await self._notify(self.on_mission_finished, "mission_finished", plan)
		return plan

	async def check_answer(self, question: str, model_answer: str, ground_truth: str) -> bool:
		"""Compare an answer against ground truth using the answerer."""
		return await self.answerer.check_equivalence(question, model_answer, ground_truth)

	async def _notify(self, callback: Optional[Callable[..., Awaitable[None]]], event: str, *args) -> None:
		"""Run an observer callback. Its failures never affect the run."""
		if not callback:
			return
		try:
			await callback(*args)
		except Exception as e:
			logger.error(f"{event} callback failed: {e}")
