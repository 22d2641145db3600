"""Tests for mission-orchestrator."""
