"""Configuration system using platformdirs for cross-platform paths."""

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import platformdirs

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "mission-orchestrator"
APP_AUTHOR = "mission-orchestrator"
ENV_PREFIX = "MISSION_ORCHESTRATOR_"


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	config_file: Path = field(init=False)
	log_dir: Path = field(init=False)

	# Run settings
	max_tries: int = 1
	summarize: bool = False
	max_plan_updates: Optional[int] = 10

	# Agent CLI
	agent_command: str = "claude"
	model: Optional[str] = None
	planner_model: Optional[str] = None
	assigner_model: Optional[str] = None
	answerer_model: Optional[str] = None
	agent_timeout: float = 300

	log_level: str = "INFO"

	# [[executors]] tables: name, description, strengths, weaknesses, model, instructions
	executors: list[dict[str, Any]] = field(default_factory=list)

	def __post_init__(self) -> None:
		self.config_file = self.config_dir / "config.toml"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)

	def validate(self) -> None:
		"""Raise ConfigurationError for values the orchestrator cannot run with."""
		for key in _SETTING_TYPES:
			_check_setting(key, getattr(self, key))

		if self.max_tries < 1:
			raise ConfigurationError(f"max_tries must be at least 1, got {self.max_tries}")
		if self.max_plan_updates is not None and self.max_plan_updates < 0:
			raise ConfigurationError(f"max_plan_updates cannot be negative, got {self.max_plan_updates}")
		if self.agent_timeout <= 0:
			raise ConfigurationError("agent_timeout must be positive")

		seen: set[str] = set()
		for definition in self.executors:
			name = definition.get("name", "").strip()
			if not name:
				raise ConfigurationError("Every executor needs a name")
			if name in seen:
				raise ConfigurationError(f"Duplicate executor name: {name}")
			seen.add(name)


NoneType = type(None)

# Accepted value types for every non-path setting
_SETTING_TYPES: dict[str, tuple[type, ...]] = {
	"max_tries": (int,),
	"summarize": (bool,),
	"max_plan_updates": (int, NoneType),
	"agent_command": (str,),
	"model": (str, NoneType),
	"planner_model": (str, NoneType),
	"assigner_model": (str, NoneType),
	"answerer_model": (str, NoneType),
	"agent_timeout": (int, float),
	"log_level": (str,),
	"executors": (list,),
}

PATH_SETTINGS = {"config_dir", "data_dir"}

EXECUTOR_KEYS: dict[str, type] = {
	"name": str,
	"description": str,
	"strengths": list,
	"weaknesses": list,
	"model": str,
	"instructions": str,
}


def _type_names(types: tuple[type, ...]) -> str:
	return " or ".join("None" if t is NoneType else t.__name__ for t in types)


def _check_setting(key: str, value: Any) -> None:
	"""Raise ConfigurationError if ``value`` has the wrong type for ``key``."""
	expected = _SETTING_TYPES[key]
	# bool is an int subclass; only accept it where bool is expected
	wrong_bool = isinstance(value, bool) and bool not in expected
	if wrong_bool or not isinstance(value, expected):
		raise ConfigurationError(
			f"{key} must be {_type_names(expected)}, got {type(value).__name__} ({value!r})"
		)
	if key == "executors":
		for index, definition in enumerate(value):
			_check_executor(index, definition)


def _check_executor(index: int, definition: Any) -> None:
	"""Validate one [[executors]] table."""
	if not isinstance(definition, dict):
		raise ConfigurationError(f"executors[{index}] must be a table, got {type(definition).__name__}")
	for key, value in definition.items():
		expected = EXECUTOR_KEYS.get(key)
		if expected is None:
			raise ConfigurationError(
				f"executors[{index}] has unknown key '{key}' (allowed: {', '.join(EXECUTOR_KEYS)})"
			)
		if not isinstance(value, expected):
			raise ConfigurationError(
				f"executors[{index}].{key} must be {expected.__name__}, got {type(value).__name__} ({value!r})"
			)
		if expected is list and not all(isinstance(item, str) for item in value):
			raise ConfigurationError(f"executors[{index}].{key} must be a list of strings")


def _parse_bool(value: str) -> bool:
	return value.strip().lower() in {"1", "true", "yes", "on"}


def _apply_env_overrides(config: Config) -> Config:
	"""Apply MISSION_ORCHESTRATOR_* environment variable overrides."""
	path_map = {
		"CONFIG_DIR": "config_dir",
		"DATA_DIR": "data_dir",
	}
	for suffix, attr in path_map.items():
		val = os.getenv(ENV_PREFIX + suffix)
		if val:
			setattr(config, attr, Path(val))

	converters = {
		"MAX_TRIES": ("max_tries", int),
		"SUMMARIZE": ("summarize", _parse_bool),
		"MAX_PLAN_UPDATES": ("max_plan_updates", int),
		"AGENT_COMMAND": ("agent_command", str),
		"MODEL": ("model", str),
		"AGENT_TIMEOUT": ("agent_timeout", float),
		"LOG_LEVEL": ("log_level", str),
	}
	for suffix, (attr, convert) in converters.items():
		val = os.getenv(ENV_PREFIX + suffix)
		if val:
			try:
				setattr(config, attr, convert(val))
			except ValueError as e:
				raise ConfigurationError(f"Invalid value for {ENV_PREFIX + suffix}: {val}") from e

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	try:
		with open(toml_path, "rb") as f:
			data = tomllib.load(f)
	except tomllib.TOMLDecodeError as e:
		raise ConfigurationError(f"Invalid config file {toml_path}: {e}") from e

	settable = {f.name for f in fields(Config) if f.init}
	for key, val in data.items():
		if key not in settable:
			logger.warning(f"Ignoring unknown key '{key}' in {toml_path}")
			continue
		if key in PATH_SETTINGS:
			if not isinstance(val, str):
				raise ConfigurationError(f"{key} must be a path string, got {type(val).__name__}")
			setattr(config, key, Path(os.path.expanduser(val)))
		else:
			_check_setting(key, val)
			setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# Env may relocate the config dir before the toml file is read
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.validate()
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
