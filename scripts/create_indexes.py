#!/usr/bin/env python3
"""
Create MongoDB indexes for the booking collections.
Run from the project root: python3 scripts/create_indexes.py
"""
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mentor_booking.config import get_config
from mentor_booking.db.mongo import SESSIONS, USERS, PAYMENTS, ensure_indexes, get_database


def create_indexes():
    """Create all indexes the booking service relies on."""
    config = get_config()
    db = get_database(config)

    print(f"Creating indexes for database: {db.name}")
    print("-" * 50)

    ensure_indexes(db)

    print("\n📊 Index Summary:")
    for collection_name in (SESSIONS, USERS, PAYMENTS):
        print(f"\n  {collection_name}:")
        for idx in db[collection_name].list_indexes():
            if idx["name"] != "_id_":
                unique = " (unique)" if idx.get("unique") else ""
                print(f"    - {idx['name']}: {dict(idx['key'])}{unique}")

    print("\n" + "=" * 50)
    print("✅ All indexes created successfully!")
    print("=" * 50)


if __name__ == "__main__":
    create_indexes()
