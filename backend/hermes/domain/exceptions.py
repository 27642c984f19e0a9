"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str, field: str = "id"):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.field = field
        super().__init__(f"{entity_type} with {field} '{entity_id}' not found")


class ConflictError(Exception):
    """Raised when a write would violate a uniqueness invariant."""


class DuplicateEntityError(ConflictError):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class IdentityConflictError(ConflictError):
    """Raised when a chat identity is already linked to a different record."""

    def __init__(self, entity_type: str, chat_identity: str):
        self.entity_type = entity_type
        self.chat_identity = chat_identity
        super().__init__(
            f"Chat identity '{chat_identity}' is already linked to a different {entity_type}"
        )


class RecordValidationError(Exception):
    """Raised when input is missing a required field or is otherwise malformed."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        self.message = message
        self.fields = fields
        super().__init__(message)


class UnlinkedIdentityError(Exception):
    """Raised when a chat identity has not been linked to any record."""

    def __init__(self, chat_identity: str):
        self.chat_identity = chat_identity
        super().__init__(f"Chat identity '{chat_identity}' is not linked")


class TransientBackendError(Exception):
    """Raised when the persistence backend is unreachable or timed out.

    Not retried automatically; callers surface a generic "try again" message.
    """

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Backend unavailable during {operation}{detail}")


class ChatTransportError(Exception):
    """Raised when the chat platform API returns an error."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")
