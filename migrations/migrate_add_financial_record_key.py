#!/usr/bin/env python3
"""Migration script to add the unique event key to financial_records.

Databases created before the key existed may hold the same domain event
more than once. This migration adds a unique index on
(reference_type, reference, description) so that repeated recorder calls
are rejected by the store:

- Duplicate groups are listed first. Without --drop-duplicates the
  migration stops so an operator can review them.
- With --drop-duplicates, the oldest record of each group is kept and the
  rest are deleted. Their journal entries are left in place; run
  `posledger report reconcile` and post correcting entries as needed.

Usage:
    python migrations/migrate_add_financial_record_key.py [--db-path PATH] [--drop-duplicates]
"""

import sys
from pathlib import Path

# Add src to path so we can import posledger modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import func, inspect, text
from posledger.database.factories import create_sqlite_database
from posledger.database.models import FinancialRecord

INDEX_NAME = "uq_financial_record_event"


def key_exists(engine) -> bool:
    """Check if the unique key exists as a constraint or an index.

    Args:
        engine: SQLAlchemy engine

    Returns:
        True if the key exists, False otherwise
    """
    inspector = inspect(engine)
    names = {c["name"] for c in inspector.get_unique_constraints("financial_records")}
    names |= {i["name"] for i in inspector.get_indexes("financial_records")}
    return INDEX_NAME in names


def find_duplicates(session) -> list[tuple[str, str, str, list[int]]]:
    """Find groups of records sharing the same event key.

    Returns:
        List of (reference_type, reference, description, record ids oldest first)
    """
    groups = (
        session.query(
            FinancialRecord.reference_type,
            FinancialRecord.reference,
            FinancialRecord.description,
        )
        .filter(
            FinancialRecord.reference_type.isnot(None),
            FinancialRecord.reference.isnot(None),
        )
        .group_by(
            FinancialRecord.reference_type,
            FinancialRecord.reference,
            FinancialRecord.description,
        )
        .having(func.count(FinancialRecord.id) > 1)
        .all()
    )

    duplicates = []
    for reference_type, reference, description in groups:
        ids = [
            row.id
            for row in session.query(FinancialRecord.id)
            .filter(
                FinancialRecord.reference_type == reference_type,
                FinancialRecord.reference == reference,
                FinancialRecord.description == description,
            )
            .order_by(FinancialRecord.created_at, FinancialRecord.id)
        ]
        duplicates.append((reference_type, reference, description, ids))
    return duplicates


def migrate_database(database_path: str | None = None, drop_duplicates: bool = False) -> None:
    """Migrate database to add the financial record event key.

    Args:
        database_path: Path to database file. If None, uses default location.
        drop_duplicates: Delete all but the oldest record of each duplicate group

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")

            if key_exists(engine):
                print(f"Migration already applied: {INDEX_NAME} exists on financial_records")
                return

            duplicates = find_duplicates(session)
            if duplicates:
                print(f"Found {len(duplicates)} duplicate event group(s):")
                for reference_type, reference, description, ids in duplicates:
                    print(f"  {reference_type} {reference} '{description}': records {ids}")

                if not drop_duplicates:
                    raise Exception("Duplicates must be resolved first (rerun with --drop-duplicates)")

                extra_ids = [record_id for *_, ids in duplicates for record_id in ids[1:]]
                session.query(FinancialRecord).filter(FinancialRecord.id.in_(extra_ids)).delete(
                    synchronize_session=False
                )
                session.commit()
                print(f"  Deleted {len(extra_ids)} duplicate record(s)")
        finally:
            session.close()

        print("Starting migration: adding unique event key...")
        with engine.begin() as conn:
            conn.execute(
                text(
                    f"CREATE UNIQUE INDEX {INDEX_NAME} "
                    "ON financial_records (reference_type, reference, description)"
                )
            )
            print(f"  Added index: {INDEX_NAME}")

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add the financial record event key"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides POSLEDGER_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--drop-duplicates",
        action="store_true",
        help="Keep only the oldest record of each duplicate event",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, drop_duplicates=args.drop_duplicates)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
