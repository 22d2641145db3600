"""Tests for agent capabilities and the executor registry."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mission_orchestrator.agents import ClaudeCLIAgent, ExecutorEntry, ExecutorRegistry, call_agent
from mission_orchestrator.errors import CapabilityError, ConfigurationError
from mission_orchestrator.plans.models import ExecutorInfo

from .helpers import ScriptedAgent


def mock_process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
	process = MagicMock()
	process.communicate = AsyncMock(return_value=(stdout, stderr))
	process.wait = AsyncMock(return_value=returncode)
	process.returncode = returncode
	return process


class TestCallAgent:
	"""Tests for capability error normalisation."""

	@pytest.mark.asyncio
	async def test_passes_response_through(self):
		assert await call_agent(ScriptedAgent(["ok"]), "p") == "ok"

	@pytest.mark.asyncio
	async def test_wraps_other_errors(self):
		with pytest.raises(CapabilityError, match="ValueError: bad"):
			await call_agent(ScriptedAgent([ValueError("bad")]), "p")

	@pytest.mark.asyncio
	async def test_keeps_capability_errors(self):
		with pytest.raises(CapabilityError, match="^quota$"):
			await call_agent(ScriptedAgent([CapabilityError("quota")]), "p")

	@pytest.mark.asyncio
	async def test_none_becomes_empty(self):
		agent = MagicMock()
		agent.invoke = AsyncMock(return_value=None)
		assert await call_agent(agent, "p") == ""


class TestClaudeCLIAgent:
	"""Tests for the subprocess-backed capability."""

	def test_build_args(self):
		agent = ClaudeCLIAgent(model="sonnet", extra_args=["--verbose"])
		assert agent.build_args() == ["claude", "--print", "--output-format", "text", "--model", "sonnet", "--verbose"]

	def test_build_input_prepends_instructions(self):
		agent = ClaudeCLIAgent(instructions="You are a planner.")
		assert agent.build_input("Plan this") == "You are a planner.\n\nPlan this"
		assert ClaudeCLIAgent().build_input("Plan this") == "Plan this"

	@pytest.mark.asyncio
	async def test_invoke_returns_stdout(self):
		process = mock_process(stdout=b"<answer>5</answer>")
		with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as create:
			result = await ClaudeCLIAgent().invoke("Count")

		assert result == "<answer>5</answer>"
		assert create.call_args.args[:2] == ("claude", "--print")
		process.communicate.assert_awaited_once_with(input=b"Count")

	@pytest.mark.asyncio
	async def test_non_zero_exit(self):
		process = mock_process(stderr=b"rate limited", returncode=1)
		with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
			with pytest.raises(CapabilityError, match="rate limited"):
				await ClaudeCLIAgent().invoke("Count")

	@pytest.mark.asyncio
	async def test_missing_command(self):
		with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError())):
			with pytest.raises(CapabilityError, match="not found"):
				await ClaudeCLIAgent(command="no-such-cli").invoke("Count")

	@pytest.mark.asyncio
	async def test_timeout_kills_process(self):
		process = mock_process()
		process.kill = MagicMock()
		with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
			with patch("asyncio.wait_for", AsyncMock(side_effect=asyncio.TimeoutError())):
				with pytest.raises(CapabilityError, match="timed out"):
					await ClaudeCLIAgent(timeout=1).invoke("Count")
		process.kill.assert_called_once()


class TestExecutorRegistry:
	"""Tests for the registry of named executors."""

	def test_register_and_lookup(self):
		agent = ScriptedAgent()
		registry = ExecutorRegistry()
		registry.register(ExecutorInfo(name="SearchAgent"), agent)

		assert "SearchAgent" in registry
		assert len(registry) == 1
		assert registry.get_agent("SearchAgent") is agent
		assert registry.names == ["SearchAgent"]

	def test_duplicate_name(self):
		registry = ExecutorRegistry()
		registry.register(ExecutorInfo(name="A"), ScriptedAgent())
		with pytest.raises(ConfigurationError):
			registry.register(ExecutorInfo(name="A"), ScriptedAgent())

	def test_unknown_name(self):
		with pytest.raises(ConfigurationError):
			ExecutorRegistry().get_agent("Ghost")
		with pytest.raises(ConfigurationError):
			ExecutorRegistry().get_agent(None)

	def test_infos_are_copies(self):
		registry = ExecutorRegistry([ExecutorEntry(info=ExecutorInfo(name="A"), agent=ScriptedAgent())])
		registry.infos[0].description = "changed"
		assert registry.get("A").info.description == ""
