from .record import (
    DEFAULT_STATUS,
    PERSONNEL,
    REPLACEABLE_FIELDS,
    USER,
    VARIANTS,
    Record,
    RecordVariant,
    get_variant,
)
from .record_patch import RecordPatch

__all__ = [
    "DEFAULT_STATUS",
    "PERSONNEL",
    "REPLACEABLE_FIELDS",
    "USER",
    "VARIANTS",
    "Record",
    "RecordVariant",
    "get_variant",
    "RecordPatch",
]
