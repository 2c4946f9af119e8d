"""Reporting helpers for flywarm CLI output."""
from __future__ import annotations

from .renderer import render_config_summary, render_run_json, render_run_report

__all__ = [
    "render_config_summary",
    "render_run_json",
    "render_run_report",
]
