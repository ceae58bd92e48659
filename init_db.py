#!/usr/bin/env python3
"""
Database initialization script
Creates the tables and loads menu data from a SQL file (menu_seed.sql by default).
"""
import os
import sqlite3
import sys

from config import load_settings
from database.connection import DatabaseConnection


def init_database(db_path: str, sql_path: str = "menu_seed.sql") -> bool:
    """Initialize database with the seed SQL file"""

    if not os.path.exists(sql_path):
        print(f"❌ {sql_path} not found.")
        return False

    try:
        # Create schema first so the seed script can rely on it
        db = DatabaseConnection(db_path)

        with open(sql_path, "r", encoding="utf-8") as f:
            sql_content = f.read()

        with db.get_connection() as conn:
            conn.executescript(sql_content)
            conn.commit()

            items_count = conn.execute("SELECT COUNT(*) FROM MenuItems").fetchone()[0]
            options_count = sum(
                conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in ("MenuItemVariants", "MenuItemAddons", "MenuItemFlavors")
            )

        print("✅ Database initialized!")
        print(f"📊 MenuItems: {items_count}")
        print(f"📊 Options (variants/add-ons/flavors): {options_count}")
        return True

    except (sqlite3.Error, OSError) as e:
        print(f"❌ Database initialization failed: {str(e)}")
        return False


if __name__ == "__main__":
    print("=== WildEats database initialization ===")
    seed_file = sys.argv[1] if len(sys.argv) > 1 else "menu_seed.sql"
    if not init_database(load_settings().db_path, seed_file):
        sys.exit(1)
