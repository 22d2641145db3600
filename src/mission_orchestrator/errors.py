"""Exception hierarchy for mission orchestration."""

from typing import Optional


class OrchestratorError(Exception):
	"""Base exception for orchestration errors."""
	pass


class ConfigurationError(OrchestratorError):
	"""Raised when a run cannot proceed with the given setup.

	Covers unknown executor names, incomplete assignments, an empty queue when
	an assignment is requested, and invalid configuration values.
	"""
	pass


class CapabilityError(OrchestratorError):
	"""Raised when an Agent capability call fails (network, timeout, provider)."""
	pass


class MissionFailedError(OrchestratorError):
	"""Raised when a mission aborts. Carries the partial plan."""

	def __init__(self, message: str, plan=None, cause: Optional[BaseException] = None):
		super().__init__(message)
		self.plan = plan
		self.cause = cause
