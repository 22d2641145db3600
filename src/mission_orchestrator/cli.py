"""CLI for mission-orchestrator: run, check-answer, and config commands."""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

from rich.console import Console

from .config import Config, get_config
from .errors import ConfigurationError, MissionFailedError
from .instrumentation import InvocationLog
from .logging_config import setup_logging
from .orchestrator.workforce import Workforce
from .plans.models import Subtask, TaskPlan
from .visualizer import (
	render_invocation_stats,
	render_invocation_timeline,
	render_plan_progress,
	render_run_summary,
)


def _load_config_or_exit() -> Config:
	try:
		return get_config()
	except ConfigurationError as e:
		print(f"Configuration error: {e}", file=sys.stderr)
		sys.exit(1)


def _apply_run_overrides(config: Config, args: argparse.Namespace) -> Config:
	"""Apply command line flags on top of the loaded config."""
	if getattr(args, "max_tries", None) is not None:
		config.max_tries = args.max_tries
	if getattr(args, "summarize", False):
		config.summarize = True
	if getattr(args, "max_plan_updates", None) is not None:
		config.max_plan_updates = args.max_plan_updates
	return config


def cmd_run(args: argparse.Namespace) -> None:
	"""Run a mission and print its final answer."""
	config = _apply_run_overrides(_load_config_or_exit(), args)
	setup_logging(level=config.log_level, log_dir=config.log_dir)

	console = Console()
	invocation_log = InvocationLog()

	quiet = args.json or args.markdown

	async def on_mission_started(plan: TaskPlan) -> None:
		if not quiet:
			console.print(f"[dim]Mission {plan.trace_id} started[/dim]")

	async def on_subtask_finished(plan: TaskPlan, task: Subtask) -> None:
		if not quiet:
			console.print(f"[dim]Task {task.id} finished: {task.status.value}[/dim]")

	try:
		workforce = Workforce.from_config(
			config,
			invocation_log=invocation_log,
			on_subtask_finished=on_subtask_finished,
			on_mission_started=on_mission_started,
		)
	except ConfigurationError as e:
		print(f"Configuration error: {e}", file=sys.stderr)
		sys.exit(1)

	failed = False
	try:
		plan = asyncio.run(workforce.run(args.mission))
	except MissionFailedError as e:
		failed = True
		plan = e.plan
		if plan is None:
			print(f"Error: {e}", file=sys.stderr)
			sys.exit(1)

	if args.json:
		print(plan.to_run_result().model_dump_json(indent=2))
	elif args.markdown:
		print(plan.to_markdown())
	else:
		render_plan_progress(plan, console=console)
		render_run_summary(plan, console=console)

	if args.stats:
		stats_console = Console(stderr=True) if quiet else console
		render_invocation_stats(invocation_log, console=stats_console)
		render_invocation_timeline(invocation_log, console=stats_console)

	if failed:
		sys.exit(1)


def cmd_check_answer(args: argparse.Namespace) -> None:
	"""Judge whether a model answer matches the ground truth."""
	config = _load_config_or_exit()
	setup_logging(level=config.log_level, log_dir=config.log_dir)

	try:
		workforce = Workforce.from_config(config)
		equivalent = asyncio.run(
			workforce.check_answer(args.question, args.model_answer, args.ground_truth)
		)
	except Exception as e:
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)

	print("equivalent" if equivalent else "not equivalent")
	if not equivalent:
		sys.exit(1)


def cmd_config(args: argparse.Namespace) -> None:
	"""Print the effective configuration."""
	config = _load_config_or_exit()
	data = {key: str(value) if isinstance(value, Path) else value for key, value in asdict(config).items()}
	data["config_file_exists"] = config.config_file.exists()
	print(json.dumps(data, indent=2))


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="mission-orchestrator",
		description="Plan, delegate and answer multi-step missions with LLM agents",
	)
	subparsers = parser.add_subparsers(dest="command")

	# run
	run_parser = subparsers.add_parser("run", help="Run a mission to its final answer")
	run_parser.add_argument("mission", type=str, help="The mission text")
	run_parser.add_argument("--max-tries", type=int, default=None, help="Attempts per subtask")
	run_parser.add_argument("--summarize", action="store_true", help="Summarize successful subtask results")
	run_parser.add_argument(
		"--max-plan-updates",
		type=int,
		default=None,
		help="Plan revisions allowed per run",
	)
	run_parser.add_argument("--json", action="store_true", help="Print the run result as JSON")
	run_parser.add_argument("--markdown", action="store_true", help="Print the plan as a markdown report")
	run_parser.add_argument("--stats", action="store_true", help="Show agent invocation stats and timeline")
	run_parser.set_defaults(func=cmd_run)

	# check-answer
	check_parser = subparsers.add_parser("check-answer", help="Compare an answer with the ground truth")
	check_parser.add_argument("question", type=str)
	check_parser.add_argument("model_answer", type=str)
	check_parser.add_argument("ground_truth", type=str)
	check_parser.set_defaults(func=cmd_check_answer)

	# config
	config_parser = subparsers.add_parser("config", help="Show the effective configuration")
	config_parser.set_defaults(func=cmd_config)

	return parser


def main() -> None:
	"""CLI entry point."""
	parser = build_parser()
	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	args.func(args)
