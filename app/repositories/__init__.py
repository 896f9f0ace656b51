"""
Repository layer для абстракции работы с базой данных
"""

from app.repositories.base import BaseRepository
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.order_repository import OrderRepository


__all__ = [
    "BaseRepository",
    "CatalogRepository",
    "OrderRepository",
]
