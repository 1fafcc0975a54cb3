"""Journal entry and custom column operations, scoped by owner."""

import logging
import uuid
from datetime import datetime
from typing import Optional

from tradeflow.db.store import JournalStore
from tradeflow.errors import CustomColumnError, EntryNotFoundError
from tradeflow.models import CustomColumn, JournalEntry, JournalEntryInput
from tradeflow.services.settings import require_owner

logger = logging.getLogger(__name__)


NOT_FOUND_MESSAGE = "Entry not found or permission denied."


class JournalService:
    """CRUD for journal entries on top of a JournalStore.

    Every entry operation takes the owner key explicitly; an entry that
    belongs to someone else behaves exactly like a missing one.
    """

    def __init__(self, store: JournalStore):
        self.store = store

    # ==================== Entries ====================

    def add_entry(self, form: JournalEntryInput, owner: str) -> JournalEntry:
        """Store a new entry for an owner.

        Args:
            form: Validated form data.
            owner: Owner key.

        Returns:
            The stored entry with its generated ID.
        """
        owner = require_owner(owner)
        entry = JournalEntry(
            id=uuid.uuid4().hex,
            owner=owner,
            created_at=datetime.now(),
            **form.model_dump(),
        )
        self.store.add_entry(entry)
        logger.info("Added journal entry %s for %s", entry.id, owner)
        return entry

    def get_entry(self, entry_id: str, owner: str) -> Optional[JournalEntry]:
        """Get one of the owner's entries, or None."""
        owner = require_owner(owner)
        entry = self.store.get_entry(entry_id)
        if entry is None:
            return None
        if entry.owner != owner:
            logger.warning(
                "User %s attempted to fetch entry %s belonging to another user",
                owner,
                entry_id,
            )
            return None
        return entry

    def list_entries(self, owner: str, ascending: bool = False) -> list[JournalEntry]:
        """Get all of the owner's entries, newest first unless ascending."""
        owner = require_owner(owner)
        return self.store.list_entries(owner, ascending=ascending)

    def count_entries(self, owner: str) -> int:
        """Number of entries the owner has."""
        owner = require_owner(owner)
        return self.store.count_entries(owner)

    def update_entry(self, entry_id: str, owner: str, form: JournalEntryInput) -> JournalEntry:
        """Replace the editable fields of an entry.

        Owner and creation time are preserved.

        Raises:
            EntryNotFoundError: If the entry does not exist for this owner.
        """
        existing = self.get_entry(entry_id, owner)
        if existing is None:
            raise EntryNotFoundError(NOT_FOUND_MESSAGE)

        updated = JournalEntry(
            id=existing.id,
            owner=existing.owner,
            created_at=existing.created_at,
            **form.model_dump(),
        )
        if self.store.replace_entry(updated) == 0:
            raise EntryNotFoundError(NOT_FOUND_MESSAGE)
        return updated

    def update_custom_data(self, entry_id: str, owner: str, custom_data: dict[str, str]) -> None:
        """Replace the custom column values of an entry.

        Raises:
            EntryNotFoundError: If the entry does not exist for this owner.
        """
        owner = require_owner(owner)
        if self.store.update_custom_data(entry_id, owner, dict(custom_data)) == 0:
            raise EntryNotFoundError(NOT_FOUND_MESSAGE)

    def delete_entry(self, entry_id: str, owner: str) -> None:
        """Permanently delete one entry.

        Raises:
            EntryNotFoundError: If the entry does not exist for this owner.
        """
        owner = require_owner(owner)
        if self.store.delete_entry(entry_id, owner) == 0:
            raise EntryNotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Deleted journal entry %s for %s", entry_id, owner)

    def delete_all_entries(self, owner: str) -> int:
        """Permanently delete every entry of an owner, all or nothing.

        Returns:
            Number of entries deleted.
        """
        owner = require_owner(owner)
        deleted = self.store.delete_entries_for_owner(owner)
        logger.info("Deleted %d journal entries for %s", deleted, owner)
        return deleted

    # ==================== Custom Columns ====================

    def list_custom_columns(self) -> list[CustomColumn]:
        """Get all custom column definitions ordered by name."""
        return self.store.list_custom_columns()

    def add_custom_column(self, name: str) -> CustomColumn:
        """Define a new custom column.

        Raises:
            CustomColumnError: If the name is blank.
            DuplicateColumnError: If the name is taken.
        """
        name = name.strip()
        if not name:
            raise CustomColumnError("Custom column name cannot be empty.")
        column = CustomColumn(id=uuid.uuid4().hex, name=name, created_at=datetime.now())
        self.store.add_custom_column(column)
        return column

    def remove_custom_column(self, column_id: str) -> bool:
        """Remove a custom column definition; stored values are kept."""
        return self.store.remove_custom_column(column_id)
