"""
Module: models
Description: Package initialization for pydantic data models.

This package contains the attribute models and codec, and the
per-operation option models used by the SQS managers.
"""

from .attributes import (
    AttributeNameCollection,
    MessageAttributeType,
    MessageAttributeValue,
    MessageSystemAttributeName,
    QueueAttributeName,
    decode_binary,
    decode_number,
    decode_string,
    encode_attribute,
)
from .options import (
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

__all__ = [
    "AttributeNameCollection",
    "BatchOptions",
    "FifoReceiveOptions",
    "FifoSendOptions",
    "ListQueuesOptions",
    "ManagerOptions",
    "MessageAttributeType",
    "MessageAttributeValue",
    "MessageSystemAttributeName",
    "QueueAttributeName",
    "QueueAttributeOptions",
    "QueueOptions",
    "ReceiveOptions",
    "SendOptions",
    "decode_binary",
    "decode_number",
    "decode_string",
    "encode_attribute",
]
