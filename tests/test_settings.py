"""Property-based tests for per-user field settings.

**Feature: trading-journal**
"""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradeflow.constants import INITIAL_OPTIONS
from tradeflow.db.store import JournalStore
from tradeflow.errors import (
    DuplicateOptionError,
    NotAuthenticatedError,
    OptionNotFoundError,
    StoreError,
)
from tradeflow.models import JournalField
from tradeflow.services.settings import SettingsService


VOCABULARY_FIELDS = [f for f in JournalField if f.has_vocabulary]

option_text = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd")),
    min_size=1,
    max_size=15,
)


class TestLazySeeding:
    """
    **Feature: trading-journal, Property 6: Lazy Option Seeding**

    *For any* field with a vocabulary, the first read returns and persists
    the built-in options.
    """

    @pytest.mark.parametrize("field", VOCABULARY_FIELDS)
    def test_first_read_seeds(self, settings_service: SettingsService, field: JournalField):
        options = settings_service.get_options(field, "alice")

        assert options == INITIAL_OPTIONS[field]
        stored = settings_service.store.get_field_settings("alice", field)
        assert stored.options == INITIAL_OPTIONS[field]

    @pytest.mark.parametrize("field", [JournalField.RR_RATIO, JournalField.TRADINGVIEW_CHART_URL])
    def test_free_input_fields_have_no_options(self, settings_service: SettingsService, field):
        assert settings_service.get_options(field, "alice") == []
        settings_service.add_option(field, "alice", "x")
        assert settings_service.store.get_field_settings("alice", field).options is None

    def test_requires_owner(self, settings_service: SettingsService):
        with pytest.raises(NotAuthenticatedError):
            settings_service.get_options(JournalField.POI, "  ")


class TestOptionEditing:
    """
    **Feature: trading-journal, Property 7: Option Add/Remove/Rename**

    *For any* option added to a field it becomes selectable; after removal
    it is gone; renaming replaces it in place.
    """

    @given(value=option_text)
    @settings(max_examples=30, deadline=None)
    def test_add_then_remove(self, value: str):
        """*For any* new option, add makes it present and remove drops it."""
        with tempfile.TemporaryDirectory() as tmpdir:
            service = SettingsService(JournalStore(Path(tmpdir) / "test.db"))
            before = service.get_options(JournalField.POI, "alice")

            service.add_option(JournalField.POI, "alice", f"  {value}  ")
            assert value in service.get_options(JournalField.POI, "alice")

            service.add_option(JournalField.POI, "alice", value)
            assert service.get_options(JournalField.POI, "alice").count(value) == 1

            service.remove_option(JournalField.POI, "alice", value)
            after = service.get_options(JournalField.POI, "alice")
            assert value not in after
            assert after == [o for o in before if o != value]

    def test_blank_add_is_noop(self, settings_service: SettingsService):
        before = settings_service.get_options(JournalField.POI, "alice")
        settings_service.add_option(JournalField.POI, "alice", "   ")
        assert settings_service.get_options(JournalField.POI, "alice") == before

    def test_rename_keeps_position(self, settings_service: SettingsService):
        settings_service.rename_option(JournalField.POI, "alice", "Fair Value Gap", "FVG")

        options = settings_service.get_options(JournalField.POI, "alice")
        assert options[1] == "FVG"
        assert "Fair Value Gap" not in options

    def test_rename_missing_raises(self, settings_service: SettingsService):
        with pytest.raises(OptionNotFoundError):
            settings_service.rename_option(JournalField.POI, "alice", "Nope", "Still Nope")

    def test_rename_onto_existing_raises(self, settings_service: SettingsService):
        with pytest.raises(DuplicateOptionError):
            settings_service.rename_option(JournalField.POI, "alice", "Trendline", "Order Block")
        assert "Trendline" in settings_service.get_options(JournalField.POI, "alice")

    def test_options_partitioned_by_owner(self, settings_service: SettingsService):
        settings_service.add_option(JournalField.PAIR, "alice", "XAU/USD")
        assert "XAU/USD" not in settings_service.get_options(JournalField.PAIR, "bob")


class TestDefaultConsistency:
    """
    **Feature: trading-journal, Property 8: Default Follows Options**

    *For any* option that is the current default, removing it clears a
    single-value default and drops only that value from a multi-value one.
    """

    def test_remove_single_default_clears_it(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.SESSION, "alice", "London")
        settings_service.remove_option(JournalField.SESSION, "alice", "London")

        assert settings_service.get_default(JournalField.SESSION, "alice") is None

    @given(
        defaults=st.lists(
            st.sampled_from(INITIAL_OPTIONS[JournalField.PSYCHOLOGY]),
            min_size=2,
            max_size=4,
            unique=True,
        )
    )
    @settings(max_examples=25, deadline=None)
    def test_remove_one_of_many_defaults_keeps_others(self, defaults: list[str]):
        """*For any* multi-value default, removing one value keeps the rest."""
        with tempfile.TemporaryDirectory() as tmpdir:
            service = SettingsService(JournalStore(Path(tmpdir) / "test.db"))
            service.set_default(JournalField.PSYCHOLOGY, "alice", defaults)

            service.remove_option(JournalField.PSYCHOLOGY, "alice", defaults[0])

            assert service.get_default(JournalField.PSYCHOLOGY, "alice") == defaults[1:]

    def test_remove_last_multi_default_clears_it(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.TP, "alice", ["Liquidity"])
        settings_service.remove_option(JournalField.TP, "alice", "Liquidity")

        assert settings_service.get_default(JournalField.TP, "alice") is None

    def test_remove_other_option_keeps_default(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.SESSION, "alice", "London")
        settings_service.remove_option(JournalField.SESSION, "alice", "Asian")

        assert settings_service.get_default(JournalField.SESSION, "alice") == "London"

    def test_rename_rewrites_single_default(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.SESSION, "alice", "New York")
        settings_service.rename_option(JournalField.SESSION, "alice", "New York", "NY")

        assert settings_service.get_default(JournalField.SESSION, "alice") == "NY"

    def test_rename_rewrites_multi_default(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.SL, "alice", ["Structure", "Fixed Pips"])
        settings_service.rename_option(JournalField.SL, "alice", "Fixed Pips", "Pips")

        assert settings_service.get_default(JournalField.SL, "alice") == ["Structure", "Pips"]

    def test_empty_list_clears_default(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.POI, "alice", ["Order Block"])
        settings_service.set_default(JournalField.POI, "alice", [])

        assert settings_service.get_default(JournalField.POI, "alice") is None

    def test_form_defaults(self, settings_service: SettingsService):
        settings_service.set_default(JournalField.SESSION, "alice", "London")
        settings_service.set_default(JournalField.RR_RATIO, "alice", 2.0)
        settings_service.get_options(JournalField.POI, "alice")

        assert settings_service.get_form_defaults("alice") == {
            JournalField.SESSION: "London",
            JournalField.RR_RATIO: 2.0,
        }


class TestSeedAllInitialSettings:
    """
    **Feature: trading-journal, Property 9: Idempotent Seeding**

    *For any* number of repeated seeding runs, every vocabulary field is
    seeded exactly once and existing options are never overwritten.
    """

    def test_seeds_every_vocabulary_field_once(self, settings_service: SettingsService):
        settings_service.add_option(JournalField.PAIR, "alice", "XAU/USD")

        seeded = settings_service.seed_all_initial_settings("alice")

        assert set(seeded) == set(VOCABULARY_FIELDS) - {JournalField.PAIR}
        assert "XAU/USD" in settings_service.get_options(JournalField.PAIR, "alice")
        assert settings_service.seed_all_initial_settings("alice") == []

    def test_missing_owner_skipped(self, settings_service: SettingsService):
        assert settings_service.seed_all_initial_settings(None) == []
        assert settings_service.seed_all_initial_settings("  ") == []

    def test_store_errors_are_swallowed(self):
        store = MagicMock()
        store.seed_field_options.side_effect = StoreError("disk full")

        assert SettingsService(store).seed_all_initial_settings("alice") == []
