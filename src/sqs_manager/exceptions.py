"""
Module: exceptions.py
Description: Exception hierarchy for the SQS manager.

Every error raised by this package derives from SQSManagerError so callers
can catch the whole family in one place. Validation errors are raised before
any request reaches the queue service.

Key Components:
- InvalidArgumentError: malformed or out-of-policy input
- PayloadTooLargeError: serialized request exceeds the wire size cap
- BatchLimitExceededError: too many entries for a single batch request
- InvalidStateError: required field read before it was set
- AttributeFormatError: attribute value cannot be decoded as requested
- RemoteServiceError: error reported by the queue service
"""

from typing import Optional


class SQSManagerError(Exception):
    """Base class for all SQS manager errors."""


class InvalidArgumentError(SQSManagerError):
    """
    Raised when an argument violates a naming, size or range rule.

    Attributes:
        param_name: Name of the offending parameter (if known)
    """

    def __init__(self, message: str, param_name: Optional[str] = None):
        super().__init__(message)
        self.param_name = param_name


class PayloadTooLargeError(InvalidArgumentError):
    """Raised when the serialized request is larger than the service accepts."""

    def __init__(self, actual_size: int, max_size: int, param_name: Optional[str] = "request"):
        super().__init__(
            f"Request cannot exceed a size of {max_size} bytes. Actual size was {actual_size}. "
            "Try to reduce the message size -or- check the number of attributes specified.",
            param_name=param_name
        )
        self.actual_size = actual_size
        self.max_size = max_size


class BatchLimitExceededError(InvalidArgumentError):
    """Raised when a single batch request would carry too many entries."""

    def __init__(self, count: int, max_entries: int, param_name: Optional[str] = None):
        super().__init__(
            f"Maximum number of entries per batch request is {max_entries}. Actual count was {count}.",
            param_name=param_name
        )
        self.count = count
        self.max_entries = max_entries


class InvalidStateError(SQSManagerError):
    """Raised when a required value is read before it has been assigned."""


class AttributeFormatError(SQSManagerError):
    """Raised when a message attribute cannot be decoded as the requested type."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class RemoteServiceError(SQSManagerError):
    """
    Opaque wrapper for an error reported by the queue service.

    The original botocore exception is chained as ``__cause__``.

    Attributes:
        operation: Remote operation that failed (e.g. 'SendMessageBatch')
        error_code: Error code reported by the service
        error_message: Error message reported by the service
    """

    def __init__(self, operation: str, error_code: str, error_message: str):
        super().__init__(f"{operation} failed: {error_code}: {error_message}")
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
