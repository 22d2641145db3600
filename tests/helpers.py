"""Shared test fixtures and helpers for mission-orchestrator tests."""

from typing import Callable, Optional, Sequence, Union

from mission_orchestrator.agents import ExecutorRegistry
from mission_orchestrator.plans.models import ExecutorInfo, Subtask, TaskPlan

Response = Union[str, Exception]


class ScriptedAgent:
	"""Agent that replays queued responses and remembers every prompt.

	A queued exception is raised instead of returned. When the queue runs
	dry the ``fallback`` is used, or an AssertionError is raised.
	"""

	def __init__(self, responses: Sequence[Response] = (), fallback: Optional[Callable[[str], str]] = None):
		self.responses = list(responses)
		self.fallback = fallback
		self.prompts: list[str] = []

	async def invoke(self, prompt: str) -> str:
		self.prompts.append(prompt)
		if self.responses:
			response = self.responses.pop(0)
			if isinstance(response, Exception):
				raise response
			return response
		if self.fallback is not None:
			return self.fallback(prompt)
		raise AssertionError(f"Unexpected prompt: {prompt[:200]}")

	@property
	def call_count(self) -> int:
		return len(self.prompts)


def tasks_response(*names: str) -> str:
	body = "\n".join(f"<task>{name}</task>" for name in names)
	return f"<tasks>\n{body}\n</tasks>"


def assign_response(agent_name: str, description: str = "Do the work in detail") -> str:
	return (
		"<assignment>\n"
		"<reasoning>Best fit</reasoning>\n"
		f"<selected_agent>{agent_name}</selected_agent>\n"
		f"<detailed_task_description>{description}</detailed_task_description>\n"
		"</assignment>"
	)


def status_response(status: str) -> str:
	return f"<analysis>Looks fine</analysis>\n<task_status>{status}</task_status>"


def choice_response(choice: str, tasks: Sequence[str] = ()) -> str:
	text = f"<analysis>Reviewed</analysis>\n<choice>{choice}</choice>"
	if tasks:
		body = "\n".join(f"<task>{name}</task>" for name in tasks)
		text += f"\n<updated_unfinished_task_plan>\n{body}\n</updated_unfinished_task_plan>"
	return text


def check_response(answer: str) -> str:
	return f"<task_check>{answer}</task_check>"


def make_registry(**agents) -> ExecutorRegistry:
	"""Build a registry from name=agent keyword arguments."""
	registry = ExecutorRegistry()
	for name, agent in agents.items():
		registry.register(ExecutorInfo(name=name, description=f"{name} executor"), agent)
	return registry


def make_plan(mission: str = "Find the capital of France", names: Sequence[str] = (), executors: Sequence[str] = ("SearchAgent",)) -> TaskPlan:
	"""Create a TaskPlan with the given subtask names installed."""
	plan = TaskPlan(
		mission=mission,
		executors=[ExecutorInfo(name=name, description=f"{name} executor") for name in executors],
	)
	plan.plan_init([Subtask(id=index, name=name) for index, name in enumerate(names, start=1)])
	return plan
