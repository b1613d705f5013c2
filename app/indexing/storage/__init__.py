"""
Storage layer exports.
"""

from app.indexing.storage.base import CheckStorage
from app.indexing.storage.sqlalchemy_storage import SQLAlchemyCheckStorage

__all__ = ["CheckStorage", "SQLAlchemyCheckStorage"]
