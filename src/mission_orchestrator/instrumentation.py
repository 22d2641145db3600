"""
Instrumentation layer for agent invocation tracking.

Records every Agent capability call in memory for observability and
debugging. Records live only as long as the log object.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .agents import Agent

logger = logging.getLogger(__name__)


@dataclass
class InvocationRecord:
	"""A single recorded agent call."""
	role: str
	prompt_chars: int = 0
	response_chars: int = 0
	duration_seconds: float = 0.0
	timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
	success: bool = True
	error: str = ""


@dataclass
class RoleStats:
	"""Aggregate stats for a role."""
	role: str
	call_count: int
	avg_duration: float
	success_rate: float
	last_called: str


class InvocationLog:
	"""In-memory storage for invocation records."""

	def __init__(self):
		self._records: list[InvocationRecord] = []

	def record(self, record: InvocationRecord) -> None:
		self._records.append(record)

	def query(self, role: Optional[str] = None, limit: int = 100) -> list[InvocationRecord]:
		"""Most recent records first, optionally filtered by role."""
		records = [r for r in self._records if role is None or r.role == role]
		return list(reversed(records))[:limit]

	def get_stats(self) -> list[RoleStats]:
		"""Get aggregate stats per role, busiest first."""
		grouped: dict[str, list[InvocationRecord]] = {}
		for record in self._records:
			grouped.setdefault(record.role, []).append(record)

		stats = [
			RoleStats(
				role=role,
				call_count=len(records),
				avg_duration=sum(r.duration_seconds for r in records) / len(records),
				success_rate=sum(1 for r in records if r.success) * 100.0 / len(records),
				last_called=max(r.timestamp for r in records),
			)
			for role, records in grouped.items()
		]
		stats.sort(key=lambda s: s.call_count, reverse=True)
		return stats

	@property
	def total_duration(self) -> float:
		return sum(r.duration_seconds for r in self._records)

	def clear(self) -> int:
		"""Delete all records. Returns count deleted."""
		count = len(self._records)
		self._records.clear()
		return count

	def __len__(self) -> int:
		return len(self._records)


class InstrumentedAgent:
	"""Wrap an Agent so each invoke is timed and recorded under ``role``."""

	def __init__(self, agent: Agent, role: str, log: InvocationLog):
		self.agent = agent
		self.role = role
		self.log = log

	async def invoke(self, prompt: str) -> str:
		start = time.monotonic()
		success = True
		error = ""
		response = ""
		try:
			response = await self.agent.invoke(prompt)
			return response
		except Exception as exc:
			success = False
			error = str(exc)
			raise
		finally:
			duration = time.monotonic() - start
			self.log.record(InvocationRecord(
				role=self.role,
				prompt_chars=len(prompt),
				response_chars=len(response or ""),
				duration_seconds=round(duration, 4),
				success=success,
				error=error,
			))
			logger.debug(f"{self.role} call finished in {duration:.2f}s (success={success})")
