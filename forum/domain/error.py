"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ForbiddenError(DomainError):
    """Raised on an ownership or permission violation.

    Also covers a recipient that has switched off the channel an action
    would reach them on (e.g. direct messages).
    """

    def __init__(self, message: str):
        super().__init__(message)


class InvalidArgumentError(DomainError):
    """Raised when an argument is malformed (e.g. an unknown vote direction)."""

    def __init__(self, message: str):
        super().__init__(message)


class ConflictError(DomainError):
    """Raised when a concurrent mutation could not be applied after retrying."""

    def __init__(self, resource: str, identifier: str, attempts: int):
        self.resource = resource
        self.identifier = identifier
        self.attempts = attempts
        super().__init__(
            f"Concurrent update on {resource} {identifier} "
            f"could not be applied after {attempts} attempts"
        )
