"""Rich views for agent invocation statistics."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from ..instrumentation import InvocationLog
from .utils import format_duration, status_style, status_text


def render_invocation_stats(log: InvocationLog, console: Optional[Console] = None) -> None:
	"""Render a table of aggregate stats per role."""
	console = console or Console()
	stats = log.get_stats()

	if not stats:
		console.print("[dim]No agent invocations recorded.[/dim]")
		return

	table = Table(title="Agent Invocations")
	table.add_column("Role", style="cyan")
	table.add_column("Calls", justify="right")
	table.add_column("Avg Duration", justify="right")
	table.add_column("Success %", justify="right")

	for s in stats:
		success_style = "green" if s.success_rate >= 90 else ("yellow" if s.success_rate >= 70 else "red")
		table.add_row(
			s.role,
			str(s.call_count),
			format_duration(s.avg_duration),
			f"[{success_style}]{s.success_rate:.1f}%[/{success_style}]",
		)

	console.print(table)
	console.print(f"[dim]Total agent time: {format_duration(log.total_duration)}[/dim]")


def render_invocation_timeline(log: InvocationLog, console: Optional[Console] = None, limit: int = 50) -> None:
	"""Render the most recent invocations."""
	console = console or Console()
	records = log.query(limit=limit)

	if not records:
		console.print("[dim]No agent invocations recorded.[/dim]")
		return

	table = Table(title=f"Invocation Timeline (last {len(records)})")
	table.add_column("Role", style="cyan")
	table.add_column("Prompt", justify="right")
	table.add_column("Response", justify="right")
	table.add_column("Duration", justify="right")
	table.add_column("Status", justify="center")

	for r in records:
		style = status_style(r.success)
		table.add_row(
			r.role,
			str(r.prompt_chars),
			str(r.response_chars),
			format_duration(r.duration_seconds),
			f"[{style}]{status_text(r.success)}[/{style}]",
		)

	console.print(table)
