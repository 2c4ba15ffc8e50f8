"""
Festival Classification Tests
=============================

Tests for keyword classification, the major-festival heuristic and the
per-guild filter.
"""

import pytest

from festwish.models import Category, GuildSettings
from festwish.processing.classifier import (
    CATEGORY_KEYWORDS, MAJOR_FESTIVALS, classify, filter_events, is_major, should_notify,
)


class TestClassify:

    @pytest.mark.parametrize("name,expected", [
        ("Diwali/Deepavali", Category.HINDU),
        ("Holi", Category.HINDU),
        ("Holika Dahana", Category.HINDU),
        ("Onam", Category.HINDU),
        ("Thiruvonam", Category.HINDU),
        ("Rama Navami", Category.HINDU),
        ("Janmashtami", Category.HINDU),
        ("Ganesh Chaturthi/Vinayaka Chaturthi", Category.HINDU),
        ("Eid al-Fitr", Category.MUSLIM),
        ("Bakrid/Eid ul-Adha", Category.MUSLIM),
        ("Muharram/Ashura", Category.MUSLIM),
        ("Milad un-Nabi/Id-e-Milad", Category.MUSLIM),
        ("Christmas", Category.CHRISTIAN),
        ("Good Friday", Category.CHRISTIAN),
        ("Easter Day", Category.CHRISTIAN),
        ("Independence Day", None),
        ("Gandhi Jayanti", None),
        ("", None),
    ])
    def test_known_names(self, name, expected):
        assert classify(name) == expected

    def test_case_insensitive(self):
        assert classify("DIWALI") == Category.HINDU

    def test_holiday_is_not_holi(self):
        assert classify("Bank Holiday") is None
        assert classify("Holiday for Holi") == Category.HINDU

    def test_substring_variants_kept_by_filter(self, make_event):
        events = [
            make_event("Holika Dahana", "Restricted Holiday", ["Observance"]),
            make_event("Thiruvonam", "Restricted Holiday", ["Observance"]),
        ]
        selected = filter_events(events, GuildSettings(major_only=True))
        assert [(e.name, c) for e, c in selected] == [
            ("Holika Dahana", Category.HINDU), ("Thiruvonam", Category.HINDU),
        ]

    def test_every_keyword_classifies_to_its_category(self):
        for category, keywords in CATEGORY_KEYWORDS.items():
            for keyword in keywords:
                assert classify(keyword) == category, keyword

    def test_hindu_checked_first(self):
        assert classify("Holi and Easter") == Category.HINDU


class TestIsMajor:

    def test_allow_list_wins_regardless_of_types(self, make_event):
        for name in ("Diwali", "Christmas", "Eid al-Fitr", "Good Friday"):
            assert is_major(make_event(name, "Observance", ["Observance"])), name

    def test_allow_list_is_non_empty(self):
        assert "diwali" in MAJOR_FESTIVALS

    def test_religious_without_observance(self, make_event):
        event = make_event("Chhath Puja", "Religious Holiday", ["Hinduism"])
        assert is_major(event)

    def test_religious_observance_is_minor(self, make_event):
        event = make_event("Chhath Puja", "Religious Holiday", ["Observance", "Hinduism"])
        assert not is_major(event)

    def test_national_holiday(self, make_event):
        event = make_event("Republic Day", "Gazetted Holiday", ["National holiday"])
        assert is_major(event)

    def test_conservative_default(self, make_event):
        assert not is_major(make_event("Bhai Dooj", "Restricted Holiday", ["Optional holiday"]))


class TestFiltering:

    def test_hindu_only_guild(self, sample_events):
        settings = GuildSettings(religions=["hindu"], major_only=False)
        selected = filter_events(sample_events, settings)
        assert [(e.name, c) for e, c in selected] == [("Diwali/Deepavali", Category.HINDU)]

    def test_unclassified_events_excluded(self, make_event):
        settings = GuildSettings(major_only=False)
        assert not should_notify(make_event("Gandhi Jayanti", "Gazetted Holiday", ["National holiday"]), settings)

    def test_major_only_drops_minor(self, make_event):
        event = make_event("Krishna Govardhan", "Restricted Holiday", ["Observance"])
        assert classify(event.name) == Category.HINDU
        assert not should_notify(event, GuildSettings(major_only=True))
        assert should_notify(event, GuildSettings(major_only=False))

    def test_allow_listed_minor_type_still_major(self, make_event):
        event = make_event("Karwa Chauth", "Restricted Holiday", ["Observance"])
        assert should_notify(event, GuildSettings(major_only=True))

    def test_default_settings_keep_major_festivals(self, sample_events):
        names = [e.name for e, _ in filter_events(sample_events, GuildSettings())]
        assert names == ["Diwali/Deepavali", "Eid al-Fitr", "Christmas"]
