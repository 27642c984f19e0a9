from .record import (
    ErrorEnvelope,
    ItemEnvelope,
    ListEnvelope,
    MessageEnvelope,
    MetadataValue,
    PersonnelResponse,
    PersonnelWrite,
    RecordResponse,
    RecordWrite,
    UserResponse,
    UserWrite,
)

__all__ = [
    "ErrorEnvelope",
    "ItemEnvelope",
    "ListEnvelope",
    "MessageEnvelope",
    "MetadataValue",
    "PersonnelResponse",
    "PersonnelWrite",
    "RecordResponse",
    "RecordWrite",
    "UserResponse",
    "UserWrite",
]
