"""
Agent capabilities - the single collaborator interface of the orchestrator.

Every role (planner, assigner, executors, answerer) talks to an object with
one coroutine, ``invoke(prompt) -> str``. ``ClaudeCLIAgent`` provides that
capability by running the Claude CLI in print mode; tests and embedders can
pass any object with the same method.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence, runtime_checkable

from .errors import CapabilityError, ConfigurationError
from .plans.models import ExecutorInfo

logger = logging.getLogger(__name__)


@runtime_checkable
class Agent(Protocol):
	"""Anything that turns a prompt into response text."""

	async def invoke(self, prompt: str) -> str:
		...


async def call_agent(agent: Agent, prompt: str) -> str:
	"""Invoke an agent, normalising every failure into CapabilityError."""
	try:
		response = await agent.invoke(prompt)
	except CapabilityError:
		raise
	except Exception as e:
		raise CapabilityError(f"{type(e).__name__}: {e}") from e
	return response if response is not None else ""


class ClaudeCLIAgent:
	"""
	Agent backed by the Claude CLI in ``--print`` mode.

	Each invocation is an independent subprocess; the prompt is written to
	stdin and stdout is returned as the response.
	"""

	def __init__(
		self,
		command: str = "claude",
		model: Optional[str] = None,
		instructions: Optional[str] = None,
		timeout: float = 300,
		cwd: Optional[str] = None,
		extra_args: Sequence[str] = (),
	):
		"""
		Initialize the agent.

		Args:
			command: CLI executable to run
			model: Optional model alias passed with --model
			instructions: Optional role instructions prepended to every prompt
			timeout: Seconds to wait for a response
			cwd: Working directory for the subprocess
			extra_args: Additional CLI arguments
		"""
		self.command = command
		self.model = model
		self.instructions = instructions
		self.timeout = timeout
		self.cwd = os.path.expanduser(cwd) if cwd else None
		self.extra_args = list(extra_args)

	def build_args(self) -> list[str]:
		args = [self.command, "--print", "--output-format", "text"]
		if self.model:
			args.extend(["--model", self.model])
		args.extend(self.extra_args)
		return args

	def build_input(self, prompt: str) -> str:
		if self.instructions:
			return f"{self.instructions}\n\n{prompt}"
		return prompt

	async def invoke(self, prompt: str) -> str:
		"""
		Send a prompt to the CLI and return its stdout.

		Raises:
			CapabilityError: If the CLI is missing, times out or exits non-zero
		"""
		logger.debug(f"Sending prompt ({len(prompt)} chars) to {self.command}")

		try:
			process = await asyncio.create_subprocess_exec(
				*self.build_args(),
				stdin=asyncio.subprocess.PIPE,
				stdout=asyncio.subprocess.PIPE,
				stderr=asyncio.subprocess.PIPE,
				cwd=self.cwd,
			)
		except FileNotFoundError:
			raise CapabilityError(f"Agent command not found: {self.command}")

		try:
			stdout, stderr = await asyncio.wait_for(
				process.communicate(input=self.build_input(prompt).encode()),
				timeout=self.timeout,
			)
		except asyncio.TimeoutError:
			process.kill()
			await process.wait()
			raise CapabilityError(f"Response timed out after {self.timeout} seconds")

		stdout_text = stdout.decode() if stdout else ""
		stderr_text = stderr.decode() if stderr else ""

		if process.returncode != 0:
			error_msg = stderr_text.strip() or f"Exit code {process.returncode}"
			logger.error(f"Agent CLI error: {error_msg}")
			raise CapabilityError(f"Agent CLI failed: {error_msg}")

		logger.debug(f"Response received ({len(stdout_text)} chars)")
		return stdout_text


@dataclass
class ExecutorEntry:
	"""A registered executor: its descriptor and the capability it dispatches to."""
	info: ExecutorInfo
	agent: Agent


class ExecutorRegistry:
	"""
	Ordered set of named executors available to a mission.

	Passed explicitly into the orchestrator; immutable once the run starts.
	"""

	def __init__(self, entries: Optional[Sequence[ExecutorEntry]] = None):
		self._entries: dict[str, ExecutorEntry] = {}
		for entry in entries or []:
			self.register(entry.info, entry.agent)

	def register(self, info: ExecutorInfo, agent: Agent) -> None:
		"""Add an executor. Names must be unique."""
		if info.name in self._entries:
			raise ConfigurationError(f"Executor already registered: {info.name}")
		self._entries[info.name] = ExecutorEntry(info=info, agent=agent)

	def get(self, name: str) -> Optional[ExecutorEntry]:
		return self._entries.get(name)

	def get_agent(self, name: Optional[str]) -> Agent:
		"""Return the capability bound to ``name``."""
		entry = self.get(name) if name else None
		if entry is None:
			raise ConfigurationError(f"Executor not registered: {name}")
		return entry.agent

	@property
	def infos(self) -> list[ExecutorInfo]:
		return [entry.info.model_copy() for entry in self._entries.values()]

	@property
	def names(self) -> list[str]:
		return list(self._entries)

	def __contains__(self, name: object) -> bool:
		return name in self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def __iter__(self) -> Iterator[ExecutorEntry]:
		return iter(list(self._entries.values()))
