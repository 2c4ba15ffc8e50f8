"""Festival event sources."""

from .calendarific_client import CalendarificClient

__all__ = ['CalendarificClient']
