"""
Database repository classes
"""
import sqlite3
from typing import List, Optional

from models.menu import MenuItem, MenuItemOptions
from models.modifiers import Variant, Flavor, Addon
from models.errors import PersistenceUnavailable
from .connection import DatabaseConnection


class MenuRepository:
    # Menu catalog data access (menu items and their options)

    def __init__(self, db_connection: DatabaseConnection):
        # Inject the DatabaseConnection instance
        self.db = db_connection

    def find_menu_items(self, shop_id: Optional[int] = None, available_only: bool = False) -> List[MenuItem]:
        # List menu items, optionally for one shop
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            sql = """
            SELECT item_id, shop_id, shop_name, name, price, available, description
            FROM MenuItems
            WHERE 1 = 1
            """
            params = []

            if shop_id is not None:
                sql += " AND shop_id = ?"
                params.append(shop_id)
            if available_only:
                sql += " AND available = 1"

            sql += " ORDER BY item_id"
            cursor.execute(sql, params)

            return [self._row_to_menu_item(row) for row in cursor.fetchall()]

    def get_menu_item(self, item_id: int) -> Optional[MenuItem]:
        # Look up one menu item by id
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT item_id, shop_id, shop_name, name, price, available, description
            FROM MenuItems WHERE item_id = ?
            """, (item_id,))

            result = cursor.fetchone()
            return self._row_to_menu_item(result) if result else None

    def get_options(self, item_id: int) -> MenuItemOptions:
        # Variants, add-ons and flavors of a menu item, in id order
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            SELECT variant_id, name, additional_price FROM MenuItemVariants
            WHERE item_id = ? ORDER BY variant_id
            """, (item_id,))
            variants = [Variant(row[0], row[1], row[2]) for row in cursor.fetchall()]

            cursor.execute("""
            SELECT addon_id, name, price FROM MenuItemAddons
            WHERE item_id = ? ORDER BY addon_id
            """, (item_id,))
            addons = [Addon(row[0], row[1], row[2]) for row in cursor.fetchall()]

            cursor.execute("""
            SELECT flavor_id, name FROM MenuItemFlavors
            WHERE item_id = ? ORDER BY flavor_id
            """, (item_id,))
            flavors = [Flavor(row[0], row[1]) for row in cursor.fetchall()]

            return MenuItemOptions(variants=variants, addons=addons, flavors=flavors)

    def add_menu_item(self, menu_item: MenuItem):
        # Insert or replace a menu item
        with self.db.get_connection() as conn:
            conn.execute("""
            INSERT OR REPLACE INTO MenuItems (item_id, shop_id, shop_name, name, price, available, description)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                menu_item.item_id, menu_item.shop_id, menu_item.shop_name, menu_item.name,
                menu_item.price, int(menu_item.available), menu_item.description
            ))
            conn.commit()

    def add_variant(self, item_id: int, variant: Variant):
        with self.db.get_connection() as conn:
            conn.execute("""
            INSERT OR REPLACE INTO MenuItemVariants (variant_id, item_id, name, additional_price)
            VALUES (?, ?, ?, ?)
            """, (variant.id, item_id, variant.name, variant.additional_price))
            conn.commit()

    def add_addon(self, item_id: int, addon: Addon):
        with self.db.get_connection() as conn:
            conn.execute("""
            INSERT OR REPLACE INTO MenuItemAddons (addon_id, item_id, name, price)
            VALUES (?, ?, ?, ?)
            """, (addon.id, item_id, addon.name, addon.price))
            conn.commit()

    def add_flavor(self, item_id: int, flavor: Flavor):
        with self.db.get_connection() as conn:
            conn.execute("""
            INSERT OR REPLACE INTO MenuItemFlavors (flavor_id, item_id, name)
            VALUES (?, ?, ?)
            """, (flavor.id, item_id, flavor.name))
            conn.commit()

    @staticmethod
    def _row_to_menu_item(row) -> MenuItem:
        return MenuItem(
            item_id=row[0],
            shop_id=row[1],
            shop_name=row[2],
            name=row[3],
            price=row[4],
            available=bool(row[5]),
            description=row[6]
        )


class StorageRepository:
    # Durable key-value slots, one string value per key.
    # Every sqlite failure surfaces as PersistenceUnavailable.

    def __init__(self, db_connection: DatabaseConnection):
        # Inject the DatabaseConnection instance
        self.db = db_connection

    def get(self, slot_key: str) -> Optional[str]:
        # Read the stored value, None when the slot is empty
        try:
            with self.db.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM Storage WHERE slot_key = ?", (slot_key,))
                result = cursor.fetchone()
                return result[0] if result else None
        except sqlite3.Error as e:
            raise PersistenceUnavailable(f"Could not read storage slot {slot_key}: {e}") from e

    def set(self, slot_key: str, value: str):
        # Write the value, last write wins
        try:
            with self.db.get_connection() as conn:
                conn.execute("""
                INSERT INTO Storage (slot_key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(slot_key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """, (slot_key, value))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceUnavailable(f"Could not write storage slot {slot_key}: {e}") from e

    def delete(self, slot_key: str) -> bool:
        # Remove the slot; returns whether anything was deleted
        try:
            with self.db.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM Storage WHERE slot_key = ?", (slot_key,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise PersistenceUnavailable(f"Could not delete storage slot {slot_key}: {e}") from e
