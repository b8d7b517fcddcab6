"""Entry point for the pos-ledger Textual app."""

from __future__ import annotations

from pos_ledger.config import DB_PATH, DEBUG_LOG_PATH, SALES_REPORT_PATH, SNAPSHOT_PATH
from pos_ledger.ledger import Ledger
from pos_ledger.ledger_app import LedgerApp
from pos_ledger.logging_setup import configure_logging
from pos_ledger.persistence import PersistenceGateway, SqliteKeyValueStore


def build_ledger(db_path: str = DB_PATH) -> Ledger:
    """Open the SQLite store and load persisted state into a ledger."""
    store = SqliteKeyValueStore(db_path)
    store.bootstrap_schema()
    return Ledger(PersistenceGateway(store))


def main() -> None:
    """Run the Textual application."""
    configure_logging(DEBUG_LOG_PATH)
    LedgerApp(build_ledger(), snapshot_path=SNAPSHOT_PATH, sales_report_path=SALES_REPORT_PATH).run()


if __name__ == "__main__":
    main()
