"""
Database package for the WildEats cart
Contains database connection and repository classes
"""

from .connection import DatabaseConnection
from .repository import MenuRepository, StorageRepository

__all__ = [
    'DatabaseConnection',
    'MenuRepository', 'StorageRepository'
]
