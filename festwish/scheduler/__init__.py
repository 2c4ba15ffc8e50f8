"""Daily festival scheduling."""

from .daily_scheduler import DailyScheduler, format_run_summary

__all__ = ['DailyScheduler', 'format_run_summary']
