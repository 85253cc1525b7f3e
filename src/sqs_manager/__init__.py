"""
Package: sqs_manager
Description: Async client-side managers for Amazon SQS.

Adds validation, typed message attributes and batch partitioning on top
of the SQS API:

- QueueManager: create, delete, list and configure queues
- StandardMessageQueueManager / FifoMessageQueueManager: send, receive,
  delete and purge messages, including any-size batch operations
"""

from .exceptions import (
    AttributeFormatError,
    BatchLimitExceededError,
    InvalidArgumentError,
    InvalidStateError,
    PayloadTooLargeError,
    RemoteServiceError,
    SQSManagerError,
)
from .models import (
    BatchOptions,
    FifoReceiveOptions,
    FifoSendOptions,
    ListQueuesOptions,
    ManagerOptions,
    QueueAttributeOptions,
    QueueOptions,
    ReceiveOptions,
    SendOptions,
)
from .sqs_queue import (
    FifoMessageQueueManager,
    QueueManager,
    StandardMessageQueueManager,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeFormatError",
    "BatchLimitExceededError",
    "BatchOptions",
    "FifoMessageQueueManager",
    "FifoReceiveOptions",
    "FifoSendOptions",
    "InvalidArgumentError",
    "InvalidStateError",
    "ListQueuesOptions",
    "ManagerOptions",
    "PayloadTooLargeError",
    "QueueAttributeOptions",
    "QueueManager",
    "QueueOptions",
    "ReceiveOptions",
    "RemoteServiceError",
    "SQSManagerError",
    "SendOptions",
    "StandardMessageQueueManager",
]
