"""Per-owner field vocabularies and default values.

Every option list is created lazily from INITIAL_OPTIONS the first time it
is read. Changes to a vocabulary keep the field's default consistent with
the remaining options.
"""

import logging
from typing import Optional

from tradeflow.constants import INITIAL_OPTIONS
from tradeflow.db.store import JournalStore
from tradeflow.errors import (
    DuplicateOptionError,
    NotAuthenticatedError,
    OptionNotFoundError,
    StoreError,
)
from tradeflow.models import DefaultValue, JournalField

logger = logging.getLogger(__name__)


def require_owner(owner: Optional[str]) -> str:
    """Return the owner key or raise if there is no identity."""
    if not owner or not owner.strip():
        raise NotAuthenticatedError("You must be logged in to access journal data.")
    return owner.strip()


class SettingsService:
    """Reads and writes field options and defaults for one store."""

    def __init__(self, store: JournalStore):
        """Initialize the service.

        Args:
            store: Journal store holding the settings.
        """
        self.store = store

    # ==================== Options ====================

    def get_options(self, field: JournalField, owner: str) -> list[str]:
        """Get the selectable values of a field, seeding them on first access.

        Args:
            field: Journal field.
            owner: Owner key.

        Returns:
            Option list. Empty for fields without a vocabulary.
        """
        owner = require_owner(owner)
        if not field.has_vocabulary:
            return []

        settings = self.store.get_field_settings(owner, field)
        if settings.options is not None:
            return list(settings.options)

        initial = list(INITIAL_OPTIONS.get(field, []))
        self.store.save_field_options(owner, field, initial)
        logger.debug("Seeded %d options for %s (%s)", len(initial), field.value, owner)
        return initial

    def add_option(self, field: JournalField, owner: str, value: str) -> None:
        """Append a value to a field's vocabulary if not already present."""
        owner = require_owner(owner)
        if not field.has_vocabulary:
            return
        value = value.strip()
        if not value:
            return

        options = self.get_options(field, owner)
        if value not in options:
            self.store.save_field_options(owner, field, [*options, value])

    def remove_option(self, field: JournalField, owner: str, value: str) -> None:
        """Remove a value from a field's vocabulary.

        If the value is the current default it is cleared; if it is one of
        several default values only that value is dropped.
        """
        owner = require_owner(owner)
        if not field.has_vocabulary:
            return

        options = self.get_options(field, owner)
        self.store.save_field_options(owner, field, [o for o in options if o != value])

        current = self.get_default(field, owner)
        if current is None:
            return
        if isinstance(current, str) and current == value:
            self.set_default(field, owner, None)
        elif isinstance(current, list) and value in current:
            remaining = [d for d in current if d != value]
            self.set_default(field, owner, remaining or None)

    def rename_option(self, field: JournalField, owner: str, old_value: str, new_value: str) -> None:
        """Rename a value in a field's vocabulary, rewriting the default to match.

        Raises:
            OptionNotFoundError: If old_value is not an option.
            DuplicateOptionError: If new_value is already another option.
        """
        owner = require_owner(owner)
        if not field.has_vocabulary:
            return
        new_value = new_value.strip()
        if not new_value:
            return

        options = self.get_options(field, owner)
        if old_value not in options:
            raise OptionNotFoundError(f'Option "{old_value}" not found in {field.value}.')
        if new_value == old_value:
            return
        if new_value in options:
            raise DuplicateOptionError(f'Option "{new_value}" already exists in {field.value}.')

        self.store.save_field_options(
            owner, field, [new_value if o == old_value else o for o in options]
        )

        current = self.get_default(field, owner)
        if isinstance(current, str) and current == old_value:
            self.set_default(field, owner, new_value)
        elif isinstance(current, list) and old_value in current:
            self.set_default(
                field, owner, [new_value if d == old_value else d for d in current]
            )

    # ==================== Defaults ====================

    def get_default(self, field: JournalField, owner: str) -> Optional[DefaultValue]:
        """Get the default value of a field, or None if unset."""
        owner = require_owner(owner)
        return self.store.get_field_settings(owner, field).default

    def set_default(self, field: JournalField, owner: str, value: Optional[DefaultValue]) -> None:
        """Set the default value of a field. None or an empty list clears it."""
        owner = require_owner(owner)
        if isinstance(value, list) and not value:
            value = None
        self.store.save_field_default(owner, field, value)

    def get_form_defaults(self, owner: str) -> dict[JournalField, DefaultValue]:
        """Get every stored default value, keyed by field."""
        owner = require_owner(owner)
        return {
            field: settings.default
            for field, settings in self.store.get_all_field_settings(owner).items()
            if settings.default is not None
        }

    # ==================== Seeding ====================

    def seed_all_initial_settings(self, owner: Optional[str]) -> list[JournalField]:
        """Seed every missing vocabulary for an owner.

        Best effort: store errors are logged and never raised, so this can
        run at login without interrupting the user.

        Returns:
            The fields that were seeded (empty on failure).
        """
        if not owner or not owner.strip():
            logger.warning("Owner missing. Skipping seeding of user settings.")
            return []
        owner = owner.strip()

        initial = {f: opts for f, opts in INITIAL_OPTIONS.items() if f.has_vocabulary}
        try:
            seeded = self.store.seed_field_options(owner, initial)
        except StoreError as e:
            logger.error("Error seeding initial settings for user %s: %s", owner, e)
            return []

        if seeded:
            logger.info("Seeded initial settings for user %s: %s", owner, [f.value for f in seeded])
        else:
            logger.info("Initial settings already up-to-date for user %s", owner)
        return seeded
