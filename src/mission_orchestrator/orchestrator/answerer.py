"""Answerer - extracts the final answer and compares answers."""

import logging

from ..agents import Agent, call_agent
from ..plans.models import TaskPlan
from ..protocol import Found, extract_tag, is_yes
from . import prompts

logger = logging.getLogger(__name__)


def parse_final_answer(response: str) -> str:
	"""Return the ``<answer>`` field, or the whole trimmed response when absent."""
	result = extract_tag(response, "answer")
	if isinstance(result, Found):
		return result.text
	logger.warning("No <answer> tag found, returning raw response")
	return response.strip()


class Answerer:
	"""Turns the accumulated subtask results into a single answer."""

	def __init__(self, agent: Agent):
		self.agent = agent

	async def extract(self, plan: TaskPlan) -> str:
		"""
		Extract the final answer from every subtask, whatever its status.

		Failed and partially successful subtasks are included since they may
		still carry useful information.
		"""
		prompt = prompts.format_prompt(
			prompts.FINAL_ANSWER_PROMPT,
			question=plan.mission,
			task_results="\n".join(plan.formatted_with_results),
		)
		response = await call_agent(self.agent, prompt)
		plan.record("answerer", response)

		answer = parse_final_answer(response)
		logger.info(f"Final answer extracted: {answer[:200]}")
		return answer

	async def check_equivalence(self, question: str, model_answer: str, ground_truth: str) -> bool:
		"""True only when the agent explicitly answers ``<equivalent>yes</equivalent>``."""
		prompt = prompts.format_prompt(
			prompts.ANSWER_CHECK_PROMPT,
			question=question,
			model_answer=model_answer,
			ground_truth=ground_truth,
		)
		response = await call_agent(self.agent, prompt)

		result = extract_tag(response, "equivalent")
		if not isinstance(result, Found):
			logger.warning("No <equivalent> tag found, defaulting to False")
			return False
		equivalent = is_yes(result)
		logger.info(f"Answer check: equivalent={equivalent}")
		return equivalent
