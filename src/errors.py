"""Exception taxonomy shared by the store, onboarding service and tools."""


class ToolServiceError(Exception):
    """Base class for errors raised by this service."""


class ValidationError(ToolServiceError):
    """A mandatory field is missing or malformed."""


class NotFoundError(ToolServiceError):
    """No record exists for the requested key."""


class DuplicateKeyError(ToolServiceError):
    """A record with the same key already exists."""


class ConcurrentUpdateError(ToolServiceError):
    """A record kept changing underneath an update until retries ran out."""


class AlreadyConfirmedError(ToolServiceError):
    """Payment was already confirmed and the policy refuses to run again."""


class CollaboratorError(ToolServiceError):
    """A call to a third-party collaborator failed or timed out."""

    def __init__(self, message: str, collaborator: str = "") -> None:
        super().__init__(message)
        self.collaborator = collaborator
