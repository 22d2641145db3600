"""
Tagged-text protocol - parse delimiter-tagged fields out of agent responses.

Agents answer in free text that carries fields such as ``<task>...</task>``
or ``<choice>...</choice>``. Extraction never raises: a missing, empty-named
or unclosed tag yields ``MISSING`` so each caller can apply its own default.
Nested tags of the same name are not supported.
"""

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Found:
	"""A tag that was present. ``text`` is stripped of surrounding whitespace."""
	text: str

	def __bool__(self) -> bool:
		return True


class _Missing:
	"""Sentinel for an absent or unparseable tag."""

	_instance = None

	def __new__(cls):
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __bool__(self) -> bool:
		return False

	def __repr__(self) -> str:
		return "MISSING"


MISSING = _Missing()

TagResult = Union[Found, _Missing]


def _pattern(tag: str) -> re.Pattern:
	escaped = re.escape(tag)
	return re.compile(rf"<{escaped}>(.*?)</{escaped}>", re.DOTALL)


def extract_tag(text: str, tag: str) -> TagResult:
	"""Return the first ``<tag>...</tag>`` field in ``text``."""
	if not text:
		return MISSING
	match = _pattern(tag).search(text)
	if match is None:
		return MISSING
	return Found(match.group(1).strip())


def extract_all(text: str, tag: str) -> list[str]:
	"""Return every ``<tag>...</tag>`` field in document order, stripped."""
	if not text:
		return []
	return [m.strip() for m in _pattern(tag).findall(text)]


def value_or(result: TagResult, default: str) -> str:
	"""Unwrap a tag result, falling back to ``default`` when missing or blank."""
	if isinstance(result, Found) and result.text:
		return result.text
	return default


def is_yes(result: TagResult) -> bool:
	"""True only for a present tag whose value is ``yes`` (case-insensitive)."""
	return isinstance(result, Found) and result.text.lower() == "yes"
