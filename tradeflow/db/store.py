"""SQLite journal store for TradeFlow.

Journal entries and field settings are partitioned by owner key. Custom
column definitions are global.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional

from tradeflow.errors import DuplicateColumnError, StoreError
from tradeflow.models import CustomColumn, FieldSettings, JournalEntry, JournalField

logger = logging.getLogger(__name__)


_ENTRY_COLUMNS = (
    "id, owner, pair, date, direction, premarket_condition, poi, reaction_to_poi, "
    "entry_type, session, psychology, outcome, rr_ratio, tradingview_chart_url, "
    "tp, sl, custom_data, created_at"
)


def format_store_error(base_message: str, error: Exception) -> str:
    """Append the underlying database error to a user-facing message."""
    return f"{base_message} Store error: {error}"


def _load_json(text: Optional[str]):
    """Decode a JSON column, passing through legacy plain-text values."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class JournalStore:
    """SQLite-based document store for journal data."""

    REQUIRED_TABLES = [
        "journal_entries",
        "user_settings",
        "custom_columns",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Cursor]:
        """Run a unit of work in a single transaction.

        Commits on success and rolls back on any error, so a failed
        operation never leaves partial state behind. Database errors are
        logged and re-raised as StoreError.

        Args:
            action: Short description used in error messages.
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error("Could not open journal store %s: %s", self.db_path, e)
            raise StoreError(format_store_error(f"Failed to {action}.", e)) from e
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise StoreError(format_store_error(f"Failed to {action}.", e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        with self._transaction("initialize journal store") as cursor:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    owner TEXT NOT NULL,
                    pair TEXT NOT NULL,
                    date TEXT NOT NULL,
                    direction TEXT NOT NULL,
                    premarket_condition TEXT NOT NULL,
                    poi TEXT NOT NULL,
                    reaction_to_poi TEXT NOT NULL,
                    entry_type TEXT NOT NULL,
                    session TEXT,
                    psychology TEXT NOT NULL,
                    outcome TEXT NOT NULL,
                    rr_ratio REAL,
                    tradingview_chart_url TEXT,
                    tp TEXT NOT NULL,
                    sl TEXT NOT NULL,
                    custom_data TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_journal_entries_owner_date
                ON journal_entries (owner, date)
            """)

            # One row per (owner, field); NULL options means not seeded yet
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS user_settings (
                    owner TEXT NOT NULL,
                    field TEXT NOT NULL,
                    options TEXT,
                    default_value TEXT,
                    PRIMARY KEY (owner, field)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS custom_columns (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL
                )
            """)

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        with self._transaction("list tables") as cursor:
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]

    # ==================== Journal Entries ====================

    @staticmethod
    def _entry_params(entry: JournalEntry) -> dict:
        return {
            "id": entry.id,
            "owner": entry.owner,
            "pair": entry.pair,
            "date": entry.date.isoformat(),
            "direction": entry.direction.value,
            "premarket_condition": json.dumps(entry.premarket_condition),
            "poi": json.dumps(entry.poi),
            "reaction_to_poi": json.dumps(entry.reaction_to_poi),
            "entry_type": entry.entry_type,
            "session": entry.session,
            "psychology": json.dumps(entry.psychology),
            "outcome": entry.outcome.value,
            "rr_ratio": entry.rr_ratio,
            "tradingview_chart_url": entry.tradingview_chart_url,
            "tp": json.dumps(entry.tp),
            "sl": json.dumps(entry.sl),
            "custom_data": json.dumps(entry.custom_data),
            "created_at": entry.created_at.isoformat(),
        }

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> JournalEntry:
        return JournalEntry(
            id=row["id"],
            owner=row["owner"],
            pair=row["pair"],
            date=date.fromisoformat(row["date"]),
            direction=row["direction"],
            premarket_condition=_load_json(row["premarket_condition"]),
            poi=_load_json(row["poi"]),
            reaction_to_poi=_load_json(row["reaction_to_poi"]),
            entry_type=row["entry_type"],
            session=row["session"] or "",
            psychology=_load_json(row["psychology"]),
            outcome=row["outcome"],
            rr_ratio=row["rr_ratio"],
            tradingview_chart_url=row["tradingview_chart_url"],
            tp=_load_json(row["tp"]),
            sl=_load_json(row["sl"]),
            custom_data=_load_json(row["custom_data"]) or {},
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def add_entry(self, entry: JournalEntry) -> None:
        """Insert a new journal entry.

        Args:
            entry: Entry to store.
        """
        with self._transaction("add journal entry") as cursor:
            cursor.execute(
                f"""
                INSERT INTO journal_entries ({_ENTRY_COLUMNS})
                VALUES (:id, :owner, :pair, :date, :direction, :premarket_condition,
                        :poi, :reaction_to_poi, :entry_type, :session, :psychology,
                        :outcome, :rr_ratio, :tradingview_chart_url, :tp, :sl,
                        :custom_data, :created_at)
                """,
                self._entry_params(entry),
            )

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        """Get an entry by ID regardless of owner.

        Args:
            entry_id: Entry ID.

        Returns:
            Entry if found, None otherwise.
        """
        with self._transaction("fetch journal entry") as cursor:
            cursor.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM journal_entries WHERE id = ?",
                (entry_id,),
            )
            row = cursor.fetchone()
            return self._row_to_entry(row) if row else None

    def list_entries(self, owner: str, ascending: bool = False) -> list[JournalEntry]:
        """Get all entries for an owner ordered by trade date.

        Args:
            owner: Owner key.
            ascending: Oldest first when True, newest first otherwise.

        Returns:
            List of journal entries.
        """
        order = "ASC" if ascending else "DESC"
        with self._transaction(f"fetch journal entries for user {owner}") as cursor:
            cursor.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM journal_entries
                WHERE owner = ?
                ORDER BY date {order}, rowid {order}
                """,
                (owner,),
            )
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    def replace_entry(self, entry: JournalEntry) -> int:
        """Overwrite the editable fields of an entry owned by entry.owner.

        Owner and creation time are never changed.

        Returns:
            Number of rows updated (0 if the entry was not found for the owner).
        """
        params = self._entry_params(entry)
        with self._transaction("update journal entry") as cursor:
            cursor.execute(
                """
                UPDATE journal_entries SET
                    pair = :pair, date = :date, direction = :direction,
                    premarket_condition = :premarket_condition, poi = :poi,
                    reaction_to_poi = :reaction_to_poi, entry_type = :entry_type,
                    session = :session, psychology = :psychology, outcome = :outcome,
                    rr_ratio = :rr_ratio, tradingview_chart_url = :tradingview_chart_url,
                    tp = :tp, sl = :sl, custom_data = :custom_data
                WHERE id = :id AND owner = :owner
                """,
                params,
            )
            return cursor.rowcount

    def update_custom_data(self, entry_id: str, owner: str, custom_data: dict[str, str]) -> int:
        """Replace the custom column values of an entry.

        Returns:
            Number of rows updated.
        """
        with self._transaction("save custom data") as cursor:
            cursor.execute(
                "UPDATE journal_entries SET custom_data = ? WHERE id = ? AND owner = ?",
                (json.dumps(custom_data), entry_id, owner),
            )
            return cursor.rowcount

    def delete_entry(self, entry_id: str, owner: str) -> int:
        """Delete one entry.

        Returns:
            Number of rows deleted.
        """
        with self._transaction("delete journal entry") as cursor:
            cursor.execute(
                "DELETE FROM journal_entries WHERE id = ? AND owner = ?",
                (entry_id, owner),
            )
            return cursor.rowcount

    def delete_entries_for_owner(self, owner: str) -> int:
        """Delete every entry of an owner in a single transaction.

        Returns:
            Number of rows deleted.
        """
        with self._transaction(f"delete all journal entries for user {owner}") as cursor:
            cursor.execute("DELETE FROM journal_entries WHERE owner = ?", (owner,))
            return cursor.rowcount

    def count_entries(self, owner: str) -> int:
        """Count entries for an owner."""
        with self._transaction("count journal entries") as cursor:
            cursor.execute(
                "SELECT COUNT(*) AS count FROM journal_entries WHERE owner = ?",
                (owner,),
            )
            return cursor.fetchone()["count"]

    # ==================== Field Settings ====================

    @staticmethod
    def _row_to_settings(owner: str, field: JournalField, row: Optional[sqlite3.Row]) -> FieldSettings:
        if row is None:
            return FieldSettings(owner=owner, field=field)
        return FieldSettings(
            owner=owner,
            field=field,
            options=_load_json(row["options"]),
            default=_load_json(row["default_value"]),
        )

    def get_field_settings(self, owner: str, field: JournalField) -> FieldSettings:
        """Get the stored options and default of one field.

        Args:
            owner: Owner key.
            field: Journal field.

        Returns:
            FieldSettings, with options None if never seeded.
        """
        with self._transaction(f"fetch settings for {field.value}") as cursor:
            cursor.execute(
                "SELECT options, default_value FROM user_settings WHERE owner = ? AND field = ?",
                (owner, field.value),
            )
            return self._row_to_settings(owner, field, cursor.fetchone())

    def get_all_field_settings(self, owner: str) -> dict[JournalField, FieldSettings]:
        """Get the stored settings of every field that has a row."""
        with self._transaction(f"fetch settings for user {owner}") as cursor:
            cursor.execute(
                "SELECT field, options, default_value FROM user_settings WHERE owner = ?",
                (owner,),
            )
            settings = {}
            for row in cursor.fetchall():
                try:
                    field = JournalField(row["field"])
                except ValueError:
                    logger.warning("Ignoring settings for unknown field %r", row["field"])
                    continue
                settings[field] = self._row_to_settings(owner, field, row)
            return settings

    def save_field_options(self, owner: str, field: JournalField, options: list[str]) -> None:
        """Upsert the option list of a field. Last writer wins."""
        with self._transaction(f"update options for {field.value}") as cursor:
            cursor.execute(
                """
                INSERT INTO user_settings (owner, field, options)
                VALUES (?, ?, ?)
                ON CONFLICT (owner, field) DO UPDATE SET options = excluded.options
                """,
                (owner, field.value, json.dumps(options)),
            )

    def save_field_default(self, owner: str, field: JournalField, default) -> None:
        """Upsert the default value of a field; None removes it."""
        value = None if default is None else json.dumps(default)
        with self._transaction(f"set default for {field.value}") as cursor:
            cursor.execute(
                """
                INSERT INTO user_settings (owner, field, default_value)
                VALUES (?, ?, ?)
                ON CONFLICT (owner, field) DO UPDATE SET default_value = excluded.default_value
                """,
                (owner, field.value, value),
            )

    def seed_field_options(self, owner: str, initial: dict[JournalField, list[str]]) -> list[JournalField]:
        """Store initial options for every field that has none yet.

        Fields that already have options are left untouched, so running
        this repeatedly or concurrently is harmless.

        Returns:
            The fields that were seeded.
        """
        with self._transaction(f"seed settings for user {owner}") as cursor:
            cursor.execute(
                "SELECT field FROM user_settings WHERE owner = ? AND options IS NOT NULL",
                (owner,),
            )
            existing = {row["field"] for row in cursor.fetchall()}
            seeded = []
            for field, options in initial.items():
                if field.value in existing:
                    continue
                cursor.execute(
                    """
                    INSERT INTO user_settings (owner, field, options)
                    VALUES (?, ?, ?)
                    ON CONFLICT (owner, field) DO UPDATE SET options = excluded.options
                    WHERE user_settings.options IS NULL
                    """,
                    (owner, field.value, json.dumps(options)),
                )
                seeded.append(field)
            return seeded

    # ==================== Custom Columns ====================

    def list_custom_columns(self) -> list[CustomColumn]:
        """Get all custom column definitions ordered by name."""
        with self._transaction("fetch custom column definitions") as cursor:
            cursor.execute("SELECT id, name, created_at FROM custom_columns ORDER BY name")
            return [
                CustomColumn(
                    id=row["id"],
                    name=row["name"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]

    def add_custom_column(self, column: CustomColumn) -> None:
        """Insert a custom column definition.

        Raises:
            DuplicateColumnError: If a column with the same name exists.
        """
        with self._transaction(f'add custom column "{column.name}"') as cursor:
            cursor.execute("SELECT 1 FROM custom_columns WHERE name = ?", (column.name,))
            if cursor.fetchone():
                raise DuplicateColumnError(
                    f'A custom column with the name "{column.name}" already exists.'
                )
            try:
                cursor.execute(
                    "INSERT INTO custom_columns (id, name, created_at) VALUES (?, ?, ?)",
                    (column.id, column.name, column.created_at.isoformat()),
                )
            except sqlite3.IntegrityError:
                raise DuplicateColumnError(
                    f'A custom column with the name "{column.name}" already exists.'
                ) from None

    def remove_custom_column(self, column_id: str) -> bool:
        """Delete a custom column definition.

        Stored custom data that uses the column name is left in place.

        Returns:
            True if a definition was removed.
        """
        with self._transaction("remove custom column definition") as cursor:
            cursor.execute("DELETE FROM custom_columns WHERE id = ?", (column_id,))
            return cursor.rowcount > 0
