from .record_repository import SQLAlchemyRecordRepository

__all__ = [
    "SQLAlchemyRecordRepository",
]
