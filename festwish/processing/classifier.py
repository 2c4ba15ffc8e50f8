"""
Festival Classification
======================

Keyword tables that map a holiday name to a festival category, plus the
"major festival" heuristic used by the major-only filter.
"""

import re
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from ..models import Category, EventRecord, GuildSettings

# Checked in declaration order; first match wins.
CATEGORY_KEYWORDS: Dict[Category, Tuple[str, ...]] = {
    Category.HINDU: (
        "diwali", "deepavali", "navratri", "holi", "ram navami", "rama navami",
        "krishna", "janmashtami", "ganesh", "chaturthi", "mahashivratri",
        "shivaratri", "shivratri", "dussehra", "vijayadashami", "pongal",
        "makar sankranti", "onam", "raksha bandhan", "karva", "karwa",
    ),
    Category.MUSLIM: (
        "eid", "fitr", "adha", "ramadan", "ramzan", "bakrid", "milad", "mawlid",
        "ashura", "muharram", "shab-e-barat",
    ),
    Category.CHRISTIAN: (
        "christ", "christmas", "easter", "good friday", "palm sunday", "epiphany",
    ),
}

MAJOR_FESTIVALS: Tuple[str, ...] = (
    # Hindu
    "diwali", "deepavali", "navratri", "holi", "dussehra", "vijayadashami",
    "janmashtami", "krishna janmashtami", "ram navami", "ganesh chaturthi",
    "maha shivaratri", "mahashivratri", "pongal", "makar sankranti", "onam",
    "raksha bandhan", "karva chauth", "karwa chauth",
    # Muslim
    "eid al-fitr", "eid-ul-fitr", "eid al adha", "eid-ul-adha", "eid al-adha",
    "eid-e-milad", "milad-un-nabi", "mawlid an-nabi", "ashura", "muharram",
    "shab-e-barat",
    # Christian
    "christmas", "good friday", "easter", "palm sunday",
)


# Generic words that contain a keyword ("holi" in "holiday"); blanked before matching
_IGNORED_WORDS = re.compile(r"holidays?")


def _compile(keywords: Iterable[str]) -> Pattern[str]:
    # Substring match so "Holika Dahana" and "Thiruvonam" still classify
    alternation = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(alternation)


_CATEGORY_PATTERNS: List[Tuple[Category, Pattern[str]]] = [
    (category, _compile(keywords)) for category, keywords in CATEGORY_KEYWORDS.items()
]


def classify(name: str) -> Optional[Category]:
    """Map a festival name to its category, or None if no keyword matches."""
    lowered = _IGNORED_WORDS.sub(" ", (name or "").lower())
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return None


def is_major(event: EventRecord) -> bool:
    """Decide whether a festival is 'major'.

    True when the name contains an allow-listed festival, when the provider
    classifies it as religious and not a mere observance, or when it is a
    national holiday. Everything else is treated as minor.
    """
    name = event.name.lower()
    if any(key in name for key in MAJOR_FESTIVALS):
        return True

    tags = " ".join(event.type_tags).lower()
    primary = event.primary_type.lower()
    if "relig" in primary and "observance" not in tags:
        return True
    if "national holiday" in tags:
        return True

    return False


def should_notify(event: EventRecord, settings: GuildSettings) -> bool:
    category = classify(event.name)
    if category is None or category not in settings.religions:
        return False
    return is_major(event) if settings.major_only else True


def filter_events(
    events: Iterable[EventRecord], settings: GuildSettings
) -> List[Tuple[EventRecord, Category]]:
    """Festivals a guild should receive, paired with their category."""
    selected = []
    for event in events:
        if should_notify(event, settings):
            selected.append((event, classify(event.name)))
    return selected
