"""Shared utilities for visualizer views."""

from datetime import datetime
from typing import Optional


def format_duration(seconds: float) -> str:
	"""Format a duration for display. e.g. '1.2s', '45ms', '2m 3s'."""
	if seconds < 0.001:
		return "<1ms"
	if seconds < 1.0:
		return f"{seconds * 1000:.0f}ms"
	if seconds < 60.0:
		return f"{seconds:.1f}s"
	minutes = int(seconds // 60)
	secs = seconds % 60
	return f"{minutes}m {secs:.0f}s"


def elapsed_seconds(started_at: str, ended_at: Optional[str]) -> Optional[float]:
	"""Seconds between two ISO timestamps, None if either is missing or invalid."""
	if not ended_at:
		return None
	try:
		return (datetime.fromisoformat(ended_at) - datetime.fromisoformat(started_at)).total_seconds()
	except (ValueError, TypeError):
		return None


def truncate(text: Optional[str], max_len: int = 80) -> str:
	"""Shorten text to a single display line."""
	if not text:
		return ""
	text = " ".join(text.split())
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."


def status_style(success: bool) -> str:
	"""Return a Rich style string for pass/fail."""
	return "green" if success else "red"


def status_text(success: bool) -> str:
	"""Return pass/fail text."""
	return "OK" if success else "FAIL"
