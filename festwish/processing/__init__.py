"""
FestWish Processing Module
=========================

Festival classification and per-guild filtering.
"""

from .classifier import (
    CATEGORY_KEYWORDS,
    MAJOR_FESTIVALS,
    classify,
    is_major,
    should_notify,
    filter_events,
)

__all__ = [
    'CATEGORY_KEYWORDS',
    'MAJOR_FESTIVALS',
    'classify',
    'is_major',
    'should_notify',
    'filter_events',
]
