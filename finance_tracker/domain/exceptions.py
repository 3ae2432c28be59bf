"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """Record cannot be normalized into a domain entity"""

    pass


class RecordNotFoundError(DomainException):
    """Requested record does not exist for this user"""

    pass


class StorageError(DomainException):
    """Storage backend failed to fetch or persist records"""

    pass


class AuthServiceError(DomainException):
    """Auth provider returned an error or is unavailable"""

    pass
