"""
Database connection management
"""
import sqlite3
from contextlib import contextmanager
from typing import Generator


class DatabaseConnection:
    # Manages the sqlite database file used for the menu catalog and cart storage

    def __init__(self, db_path: str = "wildeats.db"):
        # Set the database file path and make sure the schema exists
        self.db_path = db_path
        self.init_database()

    def init_database(self):
        # Create the tables if they are missing
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # Key-value slots (one namespaced key per persisted cart)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS Storage (
                slot_key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            ''')

            # Menu items, prices in centavos
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS MenuItems (
                item_id INTEGER PRIMARY KEY,
                shop_id INTEGER NOT NULL,
                shop_name TEXT NOT NULL,
                name TEXT NOT NULL,
                price INTEGER NOT NULL CHECK (price >= 0),
                available INTEGER NOT NULL DEFAULT 1,
                description TEXT
            )
            ''')

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS MenuItemVariants (
                variant_id INTEGER PRIMARY KEY,
                item_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                additional_price INTEGER NOT NULL DEFAULT 0 CHECK (additional_price >= 0),
                FOREIGN KEY(item_id) REFERENCES MenuItems(item_id)
            )
            ''')

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS MenuItemAddons (
                addon_id INTEGER PRIMARY KEY,
                item_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                price INTEGER NOT NULL DEFAULT 0 CHECK (price >= 0),
                FOREIGN KEY(item_id) REFERENCES MenuItems(item_id)
            )
            ''')

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS MenuItemFlavors (
                flavor_id INTEGER PRIMARY KEY,
                item_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                FOREIGN KEY(item_id) REFERENCES MenuItems(item_id)
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # Open a connection and always close it afterwards
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
        finally:
            conn.close()
