"""Error taxonomy for the chat core.

Each error carries a short public message plus optional ``details``; the API
layer turns them into ``{"error": ..., "details": ...}`` responses.
"""


class ChatError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, details: str | None = None):
        super().__init__(details or self.message)
        self.details = details


class ValidationError(ChatError):
    """Bad input, e.g. an empty message. Raised before any side effect."""
    status_code = 400
    message = "Invalid request"


class NotFoundError(ChatError):
    """Unknown game id. Raised before storage is touched."""
    status_code = 404
    message = "Game not found"


class StorageError(ChatError):
    """A record could not be read, written or deleted.

    A failed write may or may not have landed; callers may retry but the retry
    is not guaranteed to be idempotent.
    """
    status_code = 500
    message = "Failed to access chat history"


class ProviderError(ChatError):
    """The completion provider failed or returned no content.

    The user's message is already committed when this is raised.
    """
    status_code = 502
    message = "Failed to process message"
