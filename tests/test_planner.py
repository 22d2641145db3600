"""Tests for the Planner: initial plan, status checks and re-planning."""

import pytest

from mission_orchestrator.errors import CapabilityError
from mission_orchestrator.orchestrator.planner import (
	PlanChoice,
	Planner,
	parse_plan_decision,
	parse_task_status,
	parse_tasks,
)
from mission_orchestrator.plans.models import SubtaskStatus

from .helpers import ScriptedAgent, choice_response, make_plan, status_response, tasks_response


class TestParsing:
	"""Tests for planner response parsers."""

	def test_parse_tasks_skips_blank(self):
		assert parse_tasks("<task>A</task><task>  </task><task>B</task>") == ["A", "B"]

	def test_parse_task_status_values(self):
		assert parse_task_status(status_response("success")) == SubtaskStatus.SUCCESS
		assert parse_task_status(status_response("Success")) == SubtaskStatus.SUCCESS
		assert parse_task_status(status_response("failed")) == SubtaskStatus.FAILED
		assert parse_task_status(status_response("partial success")) == SubtaskStatus.PARTIAL_SUCCESS

	def test_parse_task_status_defaults_to_partial(self):
		assert parse_task_status("no verdict") == SubtaskStatus.PARTIAL_SUCCESS
		assert parse_task_status(status_response("great")) == SubtaskStatus.PARTIAL_SUCCESS

	def test_decision_missing_choice_continues(self):
		assert parse_plan_decision("nothing").choice == PlanChoice.CONTINUE

	def test_decision_unknown_choice_continues(self):
		assert parse_plan_decision("<choice>maybe</choice>").choice == PlanChoice.CONTINUE

	def test_decision_stop(self):
		assert parse_plan_decision(choice_response("STOP")).choice == PlanChoice.STOP

	def test_decision_update_with_tasks(self):
		decision = parse_plan_decision(choice_response("update", ["X", "Y"]))
		assert decision.choice == PlanChoice.UPDATE
		assert decision.updated_tasks == ["X", "Y"]

	def test_decision_update_without_block_continues(self):
		assert parse_plan_decision(choice_response("update")).choice == PlanChoice.CONTINUE

	def test_decision_update_with_empty_block_continues(self):
		response = "<choice>update</choice><updated_unfinished_task_plan>\n</updated_unfinished_task_plan>"
		assert parse_plan_decision(response).choice == PlanChoice.CONTINUE


class TestPlan:
	"""Tests for the initial plan."""

	@pytest.mark.asyncio
	async def test_plan_creates_contiguous_subtasks(self):
		agent = ScriptedAgent([tasks_response("Search", "Compute", "Answer")])
		plan = make_plan()

		subtasks = await Planner(agent).plan(plan)

		assert [t.id for t in subtasks] == [1, 2, 3]
		assert [t.name for t in plan.subtasks] == ["Search", "Compute", "Answer"]
		assert all(t.status == SubtaskStatus.NOT_STARTED for t in plan.subtasks)
		assert plan.role_history[-1].role == "planner"

	@pytest.mark.asyncio
	async def test_prompt_includes_mission_and_executors(self):
		agent = ScriptedAgent([tasks_response("Search")])
		plan = make_plan(mission="What is 2+2?", executors=["MathAgent"])

		await Planner(agent).plan(plan)

		assert "What is 2+2?" in agent.prompts[0]
		assert "- MathAgent: MathAgent executor" in agent.prompts[0]

	@pytest.mark.asyncio
	async def test_no_tasks_gives_empty_plan(self):
		plan = make_plan()
		await Planner(ScriptedAgent(["I cannot plan this"])).plan(plan)
		assert plan.subtasks == []
		assert not plan.has_uncompleted_tasks

	@pytest.mark.asyncio
	async def test_capability_error_propagates(self):
		with pytest.raises(CapabilityError):
			await Planner(ScriptedAgent([RuntimeError("down")])).plan(make_plan())


class TestCheck:
	"""Tests for the post-execution status verdict."""

	@pytest.mark.asyncio
	async def test_check_sets_status(self):
		plan = make_plan(names=["Search"])
		task = plan.subtasks[0]
		task.advance(SubtaskStatus.IN_PROGRESS)
		task.advance(SubtaskStatus.SUCCESS)
		task.result = "Paris"
		agent = ScriptedAgent([status_response("failed")])

		status = await Planner(agent).check(plan, task)

		assert status == SubtaskStatus.FAILED
		assert task.status == SubtaskStatus.FAILED
		assert "Paris" in agent.prompts[0]
		assert plan.role_history[-1].task_id == 1

	@pytest.mark.asyncio
	async def test_check_missing_tag_is_partial(self):
		plan = make_plan(names=["Search"])
		task = plan.subtasks[0]
		task.status = SubtaskStatus.SUCCESS

		await Planner(ScriptedAgent(["hmm"])).check(plan, task)

		assert task.status == SubtaskStatus.PARTIAL_SUCCESS


class TestReplan:
	"""Tests for continue / update / stop decisions."""

	def _plan_after_first(self):
		plan = make_plan(names=["A", "B", "C"])
		plan.subtasks[0].status = SubtaskStatus.SUCCESS
		plan.subtasks[0].result = "done A"
		return plan

	@pytest.mark.asyncio
	async def test_continue_leaves_plan_untouched(self):
		plan = self._plan_after_first()
		before = [t.model_copy() for t in plan.subtasks]

		decision = await Planner(ScriptedAgent([choice_response("continue")])).replan(plan, plan.subtasks[0])

		assert decision.choice == PlanChoice.CONTINUE
		assert not decision.applied
		assert plan.subtasks == before
		assert plan.plan_updates == 0

	@pytest.mark.asyncio
	async def test_update_replaces_tail(self):
		plan = self._plan_after_first()

		decision = await Planner(ScriptedAgent([choice_response("update", ["X", "Y"])])).replan(plan, plan.subtasks[0])

		assert decision.applied
		assert [(t.id, t.name) for t in plan.subtasks] == [(1, "A"), (2, "X"), (3, "Y")]
		assert plan.subtasks[0].result == "done A"

	@pytest.mark.asyncio
	async def test_stop(self):
		plan = self._plan_after_first()
		decision = await Planner(ScriptedAgent([choice_response("stop")])).replan(plan, plan.subtasks[0])
		assert decision.choice == PlanChoice.STOP
		assert len(plan.subtasks) == 3

	@pytest.mark.asyncio
	async def test_prompt_splits_finished_and_unfinished(self):
		plan = self._plan_after_first()
		agent = ScriptedAgent([choice_response("continue")])

		await Planner(agent).replan(plan, plan.subtasks[0])

		prompt = agent.prompts[0]
		previous = prompt.split("<previous_task_plan>")[1].split("</previous_task_plan>")[0]
		unfinished = prompt.split("<unfinished_task_plan>")[1].split("</unfinished_task_plan>")[0]
		assert "<task_id:1>A</task_id:1>" in previous
		assert "<task_id:2>" not in previous
		assert "<task_id:2>B</task_id:2>" in unfinished
		assert "<task_id:3>C</task_id:3>" in unfinished

	@pytest.mark.asyncio
	async def test_update_limit_degrades_to_continue(self):
		plan = self._plan_after_first()
		plan.plan_updates = 2

		decision = await Planner(
			ScriptedAgent([choice_response("update", ["X"])]),
			max_plan_updates=2,
		).replan(plan, plan.subtasks[0])

		assert decision.choice == PlanChoice.CONTINUE
		assert not decision.applied
		assert [t.name for t in plan.subtasks] == ["A", "B", "C"]

	@pytest.mark.asyncio
	async def test_unlimited_updates(self):
		plan = self._plan_after_first()
		plan.plan_updates = 50

		decision = await Planner(
			ScriptedAgent([choice_response("update", ["X"])]),
			max_plan_updates=None,
		).replan(plan, plan.subtasks[0])

		assert decision.applied
		assert plan.plan_updates == 51
