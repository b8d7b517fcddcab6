"""Write-through persistence of catalog, invoices and settings.

State lives under three independent keys (``products``, ``invoices``,
``settings``), each holding a JSON document. The default backend is a SQLite
key-value table; an in-memory backend serves tests and throwaway sessions.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, TypeVar

import structlog

from pos_ledger.config import DB_PATH
from pos_ledger.models import AppSettings, Invoice, Product
from pos_ledger.settings import default_settings

logger = structlog.get_logger(__name__)

PRODUCTS_KEY = "products"
INVOICES_KEY = "invoices"
SETTINGS_KEY = "settings"

T = TypeVar("T")


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteKeyValueStore:
    """Durable key-value pairs in a single SQLite table."""

    def __init__(self, db_path: str = DB_PATH) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        db_file = Path(self.db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(db_file)

    def bootstrap_schema(self) -> None:
        """Create the state table if it does not already exist."""
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ledger_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> str | None:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT value FROM ledger_state WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return row[0]

    def put(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                INSERT INTO ledger_state (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, _utc_now_iso()),
            )


class MemoryKeyValueStore:
    """Dict-backed store with the same interface as the SQLite one."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass
class LoadedState:
    """State read at startup, with defaults for anything missing."""

    products: list[Product] = field(default_factory=list)
    invoices: list[Invoice] = field(default_factory=list)
    settings: AppSettings = field(default_factory=default_settings)


def dump_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False)


class PersistenceGateway:
    """Serialize ledger state to a key-value store and read it back."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load(self) -> LoadedState:
        """Read all three keys; unreadable keys fall back to defaults."""
        state = LoadedState()
        products = self._read(PRODUCTS_KEY, lambda raw: [Product.from_dict(p) for p in _as_list(raw)])
        if products is not None:
            state.products = products
        invoices = self._read(INVOICES_KEY, lambda raw: [Invoice.from_dict(i) for i in _as_list(raw)])
        if invoices is not None:
            state.invoices = invoices
        settings = self._read(SETTINGS_KEY, AppSettings.from_dict)
        if settings is not None:
            state.settings = settings
        logger.info(
            "state_loaded",
            products=len(state.products),
            invoices=len(state.invoices),
            app_name=state.settings.app_name,
        )
        return state

    def save_products(self, products: Iterable[Product]) -> None:
        self.store.put(PRODUCTS_KEY, dump_json([product.to_dict() for product in products]))

    def save_invoices(self, invoices: Iterable[Invoice]) -> None:
        self.store.put(INVOICES_KEY, dump_json([invoice.to_dict() for invoice in invoices]))

    def save_settings(self, settings: AppSettings) -> None:
        self.store.put(SETTINGS_KEY, dump_json(settings.to_dict()))

    def _read(self, key: str, parse: Callable[[Any], T]) -> T | None:
        try:
            raw = self.store.get(key)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("state_read_failed", key=key, error=str(exc))
            return None
        if raw is None:
            return None
        try:
            return parse(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            # json.JSONDecodeError is a ValueError.
            logger.warning("state_unparsable", key=key, error=repr(exc))
            return None


def _as_list(raw: Any) -> list[Any]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return raw
