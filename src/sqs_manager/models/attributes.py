"""
Module: attributes.py
Description: Message attribute models and codec.

Converts application values (text, numbers, bytes) into the typed
attribute representation used by SQS and back. The wire type tag is
'{BaseType}' or '{BaseType}.{label}', where the optional label marks an
application-defined subtype (e.g. 'Number.float', 'Binary.gzip').

Key Components:
- MessageAttributeType: base attribute types (String, Number, Binary)
- MessageAttributeValue: typed attribute value with wire conversion
- encode_attribute(): add a typed value to an attribute mapping
- decode_string() / decode_number() / decode_binary(): typed readers
- AttributeNameCollection: ordered, validated set of attribute names
- QueueAttributeName / MessageSystemAttributeName: service constants

Dependencies: pydantic, decimal, math
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, MutableMapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sqs_manager.exceptions import AttributeFormatError, InvalidArgumentError
from sqs_manager.utils.validators import (
    MAX_ATTRIBUTE_NAME_LENGTH,
    validate_attribute_name,
    validate_non_empty_name,
)

N = TypeVar('N', int, float, Decimal)

ALL_ATTRIBUTES = "All"


class MessageAttributeType(str, Enum):
    """Base data types understood by the queue service."""

    STRING = "String"
    NUMBER = "Number"
    BINARY = "Binary"


class QueueAttributeName(str, Enum):
    """Queue attribute names accepted by GetQueueAttributes."""

    ALL = "All"
    POLICY = "Policy"
    VISIBILITY_TIMEOUT = "VisibilityTimeout"
    MAXIMUM_MESSAGE_SIZE = "MaximumMessageSize"
    MESSAGE_RETENTION_PERIOD = "MessageRetentionPeriod"
    APPROXIMATE_NUMBER_OF_MESSAGES = "ApproximateNumberOfMessages"
    APPROXIMATE_NUMBER_OF_MESSAGES_NOT_VISIBLE = "ApproximateNumberOfMessagesNotVisible"
    APPROXIMATE_NUMBER_OF_MESSAGES_DELAYED = "ApproximateNumberOfMessagesDelayed"
    CREATED_TIMESTAMP = "CreatedTimestamp"
    LAST_MODIFIED_TIMESTAMP = "LastModifiedTimestamp"
    QUEUE_ARN = "QueueArn"
    DELAY_SECONDS = "DelaySeconds"
    RECEIVE_MESSAGE_WAIT_TIME_SECONDS = "ReceiveMessageWaitTimeSeconds"
    REDRIVE_POLICY = "RedrivePolicy"
    FIFO_QUEUE = "FifoQueue"
    CONTENT_BASED_DEDUPLICATION = "ContentBasedDeduplication"
    KMS_MASTER_KEY_ID = "KmsMasterKeyId"
    KMS_DATA_KEY_REUSE_PERIOD_SECONDS = "KmsDataKeyReusePeriodSeconds"


class MessageSystemAttributeName(str, Enum):
    """System attribute names that can be requested on receive."""

    ALL = "All"
    SENDER_ID = "SenderId"
    SENT_TIMESTAMP = "SentTimestamp"
    APPROXIMATE_RECEIVE_COUNT = "ApproximateReceiveCount"
    APPROXIMATE_FIRST_RECEIVE_TIMESTAMP = "ApproximateFirstReceiveTimestamp"
    SEQUENCE_NUMBER = "SequenceNumber"
    MESSAGE_DEDUPLICATION_ID = "MessageDeduplicationId"
    MESSAGE_GROUP_ID = "MessageGroupId"
    AWS_TRACE_HEADER = "AWSTraceHeader"


class MessageAttributeValue(BaseModel):
    """
    Typed message attribute value.

    Exactly one of string_value / binary_value is populated, matching the
    base type of data_type.

    Attributes:
        data_type: Type tag, e.g. 'String', 'Number.int', 'Binary.png'
        string_value: Payload for String and Number attributes
        binary_value: Payload for Binary attributes
    """

    model_config = ConfigDict(frozen=True)

    data_type: str = Field(..., min_length=1, max_length=MAX_ATTRIBUTE_NAME_LENGTH)
    string_value: Optional[str] = None
    binary_value: Optional[bytes] = None

    @model_validator(mode='after')
    def validate_payload(self) -> 'MessageAttributeValue':
        """Ensure the populated payload matches the declared base type."""
        base = self.data_type.split(".", 1)[0]
        if base not in {t.value for t in MessageAttributeType}:
            raise ValueError(f"data_type must start with String, Number or Binary, got '{self.data_type}'")
        if base == MessageAttributeType.BINARY.value:
            if self.binary_value is None or self.string_value is not None:
                raise ValueError("Binary attributes carry binary_value only")
        elif self.string_value is None or self.binary_value is not None:
            raise ValueError(f"{base} attributes carry string_value only")
        return self

    @property
    def base_type(self) -> MessageAttributeType:
        return MessageAttributeType(self.data_type.split(".", 1)[0])

    @property
    def label(self) -> Optional[str]:
        parts = self.data_type.split(".", 1)
        return parts[1] if len(parts) == 2 else None

    def to_wire(self) -> Dict[str, Any]:
        """Convert to the dictionary shape expected by the SQS API."""
        if self.base_type is MessageAttributeType.BINARY:
            return {'DataType': self.data_type, 'BinaryValue': self.binary_value}
        return {'DataType': self.data_type, 'StringValue': self.string_value}

    @classmethod
    def from_wire(cls, value: Mapping[str, Any]) -> 'MessageAttributeValue':
        """
        Build a MessageAttributeValue from an SQS attribute dictionary.

        Raises:
            AttributeFormatError: If the dictionary is not a valid attribute
        """
        try:
            return cls(
                data_type=value.get('DataType'),
                string_value=value.get('StringValue'),
                binary_value=value.get('BinaryValue')
            )
        except (ValidationError, AttributeError) as e:
            raise AttributeFormatError(f"Malformed message attribute: {e}") from e


AttributeMapping = Mapping[str, Union[MessageAttributeValue, Mapping[str, Any]]]


def _data_type(base: MessageAttributeType, label: Optional[str]) -> str:
    if label is None:
        return base.value
    validate_non_empty_name(label, "label")
    return f"{base.value}.{label}"


def _format_number(value: Union[int, float, Decimal]) -> str:
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError("Number attributes must be finite", "value")
        return repr(value)
    if not value.is_finite():
        raise InvalidArgumentError("Number attributes must be finite", "value")
    return str(value)


def encode_attribute(
    attributes: MutableMapping[str, MessageAttributeValue],
    name: str,
    value: Any,
    label: Optional[str] = None
) -> MessageAttributeValue:
    """
    Encode a value and add it to an attribute mapping.

    The base type is taken from the runtime type of value: int, float and
    Decimal become Number, str becomes String, bytes-like objects and
    readable binary streams become Binary. Streams are read to the end and
    copied, so no reference to the stream is kept.

    Args:
        attributes: Mapping receiving the encoded attribute
        name: Attribute name
        value: Value to encode
        label: Optional custom type label appended to the type tag

    Returns:
        The encoded MessageAttributeValue

    Raises:
        InvalidArgumentError: If the mapping is missing, the name is invalid
            or already present, or the value type is unsupported

    Example:
        >>> attrs = {}
        >>> encode_attribute(attrs, "Priority", 5, label="int").data_type
        'Number.int'
    """
    if attributes is None:
        raise InvalidArgumentError("attributes cannot be None", "attributes")
    validate_attribute_name(name)
    if name in attributes:
        raise InvalidArgumentError(f"Attribute '{name}' has already been added.", "name")

    if value is None or isinstance(value, bool):
        raise InvalidArgumentError(
            f"Unsupported attribute value type: {type(value).__name__}", "value"
        )
    if isinstance(value, (int, float, Decimal)):
        encoded = MessageAttributeValue(
            data_type=_data_type(MessageAttributeType.NUMBER, label),
            string_value=_format_number(value)
        )
    elif isinstance(value, str):
        encoded = MessageAttributeValue(
            data_type=_data_type(MessageAttributeType.STRING, label),
            string_value=value
        )
    elif isinstance(value, (bytes, bytearray, memoryview)):
        encoded = MessageAttributeValue(
            data_type=_data_type(MessageAttributeType.BINARY, label),
            binary_value=bytes(value)
        )
    elif hasattr(value, 'read'):
        data = value.read()
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidArgumentError("Binary streams must yield bytes", "value")
        encoded = MessageAttributeValue(
            data_type=_data_type(MessageAttributeType.BINARY, label),
            binary_value=bytes(data)
        )
    else:
        raise InvalidArgumentError(
            f"Unsupported attribute value type: {type(value).__name__}", "value"
        )

    attributes[name] = encoded
    return encoded


def to_wire_attributes(attributes: Mapping[str, MessageAttributeValue]) -> Dict[str, Dict[str, Any]]:
    """Convert an attribute mapping to the SQS MessageAttributes shape."""
    return {name: value.to_wire() for name, value in attributes.items()}


def _lookup(attributes: Optional[AttributeMapping], key: str) -> Optional[MessageAttributeValue]:
    if attributes is None:
        raise InvalidArgumentError("attributes cannot be None", "attributes")
    value = attributes.get(key)
    if value is None:
        return None
    if isinstance(value, MessageAttributeValue):
        return value
    return MessageAttributeValue.from_wire(value)


def decode_string(attributes: Optional[AttributeMapping], key: str) -> Optional[str]:
    """
    Read a String (or Number) attribute as text.

    Returns:
        The string value, or None when key is absent

    Raises:
        AttributeFormatError: If the attribute is Binary
    """
    attribute = _lookup(attributes, key)
    if attribute is None:
        return None
    if attribute.base_type is MessageAttributeType.BINARY:
        raise AttributeFormatError(f"Attribute '{key}' is Binary, not String", key)
    return attribute.string_value


def decode_number(
    attributes: Optional[AttributeMapping],
    key: str,
    number_type: Type[N] = int
) -> N:
    """
    Read a Number attribute and parse it as number_type.

    Args:
        attributes: Attribute mapping (models or SQS dictionaries)
        key: Attribute name
        number_type: int, float or Decimal

    Returns:
        Parsed number, or number_type() (zero) when key is absent

    Raises:
        AttributeFormatError: If the attribute is not a Number or does not
            parse as number_type
    """
    attribute = _lookup(attributes, key)
    if attribute is None:
        return number_type()
    if attribute.base_type is not MessageAttributeType.NUMBER:
        raise AttributeFormatError(
            f"Attribute '{key}' is {attribute.base_type.value}, not Number", key
        )
    try:
        return number_type(attribute.string_value)
    except (ValueError, ArithmeticError) as e:
        raise AttributeFormatError(
            f"Attribute '{key}' value '{attribute.string_value}' cannot be parsed as {number_type.__name__}",
            key
        ) from e


def decode_binary(attributes: Optional[AttributeMapping], key: str) -> Optional[bytes]:
    """
    Read a Binary attribute.

    Returns:
        The bytes payload, or None when key is absent

    Raises:
        AttributeFormatError: If the attribute is not Binary
    """
    attribute = _lookup(attributes, key)
    if attribute is None:
        return None
    if attribute.base_type is not MessageAttributeType.BINARY:
        raise AttributeFormatError(
            f"Attribute '{key}' is {attribute.base_type.value}, not Binary", key
        )
    return attribute.binary_value


class AttributeNameCollection:
    """
    Ordered collection of unique, validated message attribute names.

    Iteration follows insertion order; equality ignores order.
    """

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        for name in names or ():
            self.add(name)

    def add(self, name: str) -> None:
        """
        Add a name to the collection.

        Raises:
            InvalidArgumentError: If the name is invalid or already present
        """
        validate_attribute_name(name)
        if name in self._names:
            raise InvalidArgumentError("Name has already been added.", "name")
        self._names.append(name)

    def add_all(self) -> None:
        """Request every attribute ('All')."""
        if ALL_ATTRIBUTES not in self._names:
            self._names.append(ALL_ATTRIBUTES)

    def remove(self, name: str) -> bool:
        """Remove a name, returning True if it was present."""
        if name in self._names:
            self._names.remove(name)
            return True
        return False

    def to_list(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeNameCollection):
            return NotImplemented
        return set(self._names) == set(other._names)

    def __repr__(self) -> str:
        return f"AttributeNameCollection({self._names!r})"
