"""Rich views for mission plan progress."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from ..plans.models import RunStatus, SubtaskStatus, TaskPlan
from .utils import elapsed_seconds, format_duration, truncate

STATUS_ICONS = {
	SubtaskStatus.NOT_STARTED: "[dim]\\[ ][/dim]",
	SubtaskStatus.IN_PROGRESS: "[yellow]\\[~][/yellow]",
	SubtaskStatus.SUCCESS: "[green]\\[x][/green]",
	SubtaskStatus.PARTIAL_SUCCESS: "[yellow]\\[/][/yellow]",
	SubtaskStatus.FAILED: "[red]\\[!][/red]",
}

RUN_STYLES = {
	RunStatus.PENDING: "dim",
	RunStatus.RUNNING: "yellow",
	RunStatus.COMPLETED: "green",
	RunStatus.FAILED: "red",
}


def render_plan_progress(plan: TaskPlan, console: Optional[Console] = None) -> None:
	"""Render the plan as a Rich Tree of subtasks."""
	console = console or Console()

	progress = plan.get_progress()
	tree = Tree(
		f"[bold]{escape(truncate(plan.mission, 100))}[/bold]  "
		f"[dim]({progress['finished_tasks']}/{progress['total_tasks']} subtasks finished)[/dim]"
	)

	if not plan.subtasks:
		tree.add("[dim]No subtasks planned[/dim]")

	for task in plan.subtasks:
		icon = STATUS_ICONS.get(task.status, "[ ]")
		executor = f" [cyan]@{escape(task.assigned_executor)}[/cyan]" if task.assigned_executor else ""
		branch = tree.add(f"{icon} {task.id}. {escape(task.name)}{executor}")
		if task.result:
			branch.add(f"[dim]{escape(truncate(task.result))}[/dim]")

	console.print(tree)


def render_run_summary(plan: TaskPlan, console: Optional[Console] = None) -> None:
	"""Render a summary panel for a run."""
	console = console or Console()

	progress = plan.get_progress()
	style = RUN_STYLES.get(plan.status, "white")

	lines = []
	lines.append(f"[bold]Mission:[/bold] {escape(plan.mission)}")
	lines.append(f"[bold]Status:[/bold] [{style}]{plan.status.value}[/{style}]")
	lines.append(
		f"[bold]Subtasks:[/bold] {progress['finished_tasks']}/{progress['total_tasks']} finished, "
		f"{plan.plan_updates} plan updates"
	)

	duration = elapsed_seconds(plan.started_at, plan.ended_at)
	if duration is not None:
		lines.append(f"[bold]Duration:[/bold] {format_duration(duration)}")

	if plan.final_answer is not None:
		lines.append("")
		lines.append(f"[bold]Answer:[/bold] {escape(plan.final_answer)}")

	if plan.error:
		lines.append("")
		lines.append(f"[bold red]Error:[/bold red] {escape(plan.error)}")

	console.print(Panel("\n".join(lines), title=f"Run: {escape(plan.trace_id)}", border_style="cyan"))
