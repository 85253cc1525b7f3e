"""
Package: sqs_queue
Description: Async SQS managers for queue and message operations.

Provides queue lifecycle management and queue-bound message managers
for standard and FIFO queues, each running on one aioboto3 client.
"""

from .dispatch import BatchState, PartitionDispatcher
from .fifo import FifoMessageQueueManager
from .manager import RemoteQueueClient, SQSManager
from .message_queue import MessageQueueManager
from .queue_manager import QueueManager
from .standard import StandardMessageQueueManager

__all__ = [
    "BatchState",
    "FifoMessageQueueManager",
    "MessageQueueManager",
    "PartitionDispatcher",
    "QueueManager",
    "RemoteQueueClient",
    "SQSManager",
    "StandardMessageQueueManager",
]
