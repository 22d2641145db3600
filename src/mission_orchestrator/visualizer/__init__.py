"""Visualizer package - Rich terminal views for mission runs."""

from .invocation_stats import render_invocation_stats, render_invocation_timeline
from .plan_progress import render_plan_progress, render_run_summary

__all__ = [
	"render_plan_progress",
	"render_run_summary",
	"render_invocation_stats",
	"render_invocation_timeline",
]
