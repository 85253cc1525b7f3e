"""
Module: options.py
Description: Per-operation option models for queue and message operations.

Options are plain pydantic models built by the caller and passed by value
into a single manager call. Numeric and duration options are silently
clamped into their documented range (on construction and on assignment);
identifier options (message group id, deduplication id, receive request
attempt id) are validated and rejected instead.

Key Components:
- SendOptions / FifoSendOptions: send, send_batch and send_many options
- ReceiveOptions / FifoReceiveOptions: receive and receive_many options
- BatchOptions: delete_batch options
- QueueOptions: queue attributes with typed, clamped accessors
- QueueAttributeOptions / ListQueuesOptions: queue inspection options
- ManagerOptions: botocore client configuration

Dependencies: pydantic, aiobotocore, datetime
"""

from datetime import timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from aiobotocore.config import AioConfig
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from sqs_manager.config.settings import Settings
from sqs_manager.exceptions import InvalidStateError
from sqs_manager.models.attributes import (
    AttributeNameCollection,
    MessageAttributeValue,
    MessageSystemAttributeName,
    QueueAttributeName,
    encode_attribute,
)
from sqs_manager.utils.batch_helpers import MAX_BATCH_ENTRIES, IdGenerator, default_batch_request_id
from sqs_manager.utils.validators import (
    MAX_MESSAGE_IDENTIFIER_LENGTH,
    MAX_REQUEST_SIZE,
    QUEUE_NAME_CHARACTERS,
    validate_character_set,
    validate_message_identifier,
)

C = TypeVar('C')

MIN_MESSAGE_DELAY = timedelta(0)
MAX_MESSAGE_DELAY = timedelta(seconds=15)

MIN_VISIBILITY_TIMEOUT = timedelta(0)
MAX_VISIBILITY_TIMEOUT = timedelta(hours=12)
DEFAULT_VISIBILITY_TIMEOUT = timedelta(seconds=30)

MIN_MESSAGE_RETENTION_PERIOD = timedelta(minutes=1)
MAX_MESSAGE_RETENTION_PERIOD = timedelta(days=14)

MIN_MESSAGE_SIZE = 1024
MAX_MESSAGE_SIZE = MAX_REQUEST_SIZE

MIN_RECEIVE_WAIT_TIME = timedelta(0)
MAX_RECEIVE_WAIT_TIME = timedelta(seconds=20)

MIN_KMS_DATA_KEY_REUSE_PERIOD = timedelta(seconds=1)
MAX_KMS_DATA_KEY_REUSE_PERIOD = timedelta(hours=24)

MIN_NUMBER_OF_MESSAGES = 1
MAX_NUMBER_OF_MESSAGES = MAX_BATCH_ENTRIES

MIN_LIST_RESULTS = 1
MAX_LIST_RESULTS = 1000


def _clamp(value: Optional[C], minimum: C, maximum: C) -> Optional[C]:
    if value is None:
        return None
    return max(minimum, min(value, maximum))


def _seconds(value: timedelta) -> str:
    return str(int(value.total_seconds()))


def _unique(values: List[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


class _Options(BaseModel):
    model_config = ConfigDict(
        validate_assignment=True,
        arbitrary_types_allowed=True
    )


class BatchOptions(_Options):
    """
    Options for batch operations that only need entry ids.

    Attributes:
        batch_request_id_generator: Maps a 1-based position to an entry id
    """

    batch_request_id_generator: Optional[IdGenerator] = Field(default=default_batch_request_id)

    @field_validator('batch_request_id_generator', mode='after')
    @classmethod
    def default_id_generator(cls, v: Optional[IdGenerator]) -> IdGenerator:
        return v or default_batch_request_id


class _MessageAttributeOptions(BatchOptions):
    message_attributes: Dict[str, MessageAttributeValue] = Field(default_factory=dict)

    def add_attribute(self, name: str, value: Any, label: Optional[str] = None):
        """
        Encode value and attach it to every message sent with these options.

        Returns:
            self, so calls can be chained
        """
        encode_attribute(self.message_attributes, name, value, label)
        return self


class SendOptions(_MessageAttributeOptions):
    """
    Options for sending to a standard queue.

    Attributes:
        delay: Delivery delay, clamped to [0s, 15s]
        message_attributes: Attributes attached to every message
        batch_request_id_generator: Maps a 1-based position to an entry id
    """

    delay: timedelta = Field(default=MIN_MESSAGE_DELAY)

    @field_validator('delay', mode='after')
    @classmethod
    def clamp_delay(cls, v: timedelta) -> timedelta:
        return _clamp(v, MIN_MESSAGE_DELAY, MAX_MESSAGE_DELAY)


class FifoSendOptions(_MessageAttributeOptions):
    """
    Options for sending to a FIFO queue.

    message_group_id must be assigned before it can be read; reading it
    while unset raises InvalidStateError.

    Attributes:
        message_group_id: Group that orders the messages (required)
        message_deduplication_id: Deduplication id for single sends
        batch_message_deduplication_id_generator: Maps a 1-based position to
            a deduplication id for batch sends
    """

    message_deduplication_id: Optional[str] = None
    batch_message_deduplication_id_generator: Optional[IdGenerator] = None

    _message_group_id: Optional[str] = PrivateAttr(default=None)

    def __init__(self, message_group_id: Optional[str] = None, **data: Any):
        super().__init__(**data)
        if message_group_id is not None:
            self.message_group_id = message_group_id

    @property
    def message_group_id(self) -> str:
        if self._message_group_id is None or not self._message_group_id.strip():
            raise InvalidStateError("A first-in-first-out message must be assigned a message_group_id.")
        return self._message_group_id

    @message_group_id.setter
    def message_group_id(self, value: str) -> None:
        validate_message_identifier(value, MAX_MESSAGE_IDENTIFIER_LENGTH, "message_group_id")
        self._message_group_id = value

    @field_validator('message_deduplication_id', mode='after')
    @classmethod
    def validate_deduplication_id(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            validate_message_identifier(v, MAX_MESSAGE_IDENTIFIER_LENGTH, "message_deduplication_id")
        return v


class ReceiveOptions(_Options):
    """
    Options for receiving from a queue.

    Attributes:
        max_number_of_messages: Messages per receive call, clamped to [1, 10]
        visibility_timeout: Hidden period after receive, clamped to [0s, 12h]
        wait_time: Long-poll wait, clamped to [0s, 20s]
        attribute_names: System attributes to return with each message
        message_attribute_names: Message attributes to return with each message
    """

    max_number_of_messages: int = Field(default=MIN_NUMBER_OF_MESSAGES)
    visibility_timeout: timedelta = Field(default=DEFAULT_VISIBILITY_TIMEOUT)
    wait_time: timedelta = Field(default=MIN_RECEIVE_WAIT_TIME)
    attribute_names: List[MessageSystemAttributeName] = Field(default_factory=list)
    message_attribute_names: AttributeNameCollection = Field(default_factory=AttributeNameCollection)

    @field_validator('max_number_of_messages', mode='after')
    @classmethod
    def clamp_max_number_of_messages(cls, v: int) -> int:
        return _clamp(v, MIN_NUMBER_OF_MESSAGES, MAX_NUMBER_OF_MESSAGES)

    @field_validator('visibility_timeout', mode='after')
    @classmethod
    def clamp_visibility_timeout(cls, v: timedelta) -> timedelta:
        return _clamp(v, MIN_VISIBILITY_TIMEOUT, MAX_VISIBILITY_TIMEOUT)

    @field_validator('wait_time', mode='after')
    @classmethod
    def clamp_wait_time(cls, v: timedelta) -> timedelta:
        return _clamp(v, MIN_RECEIVE_WAIT_TIME, MAX_RECEIVE_WAIT_TIME)

    @field_validator('attribute_names', mode='after')
    @classmethod
    def unique_attribute_names(cls, v: List[MessageSystemAttributeName]) -> List[MessageSystemAttributeName]:
        return _unique(v)

    @field_validator('message_attribute_names', mode='before')
    @classmethod
    def build_message_attribute_names(cls, v: Any) -> AttributeNameCollection:
        if isinstance(v, AttributeNameCollection):
            return v
        return AttributeNameCollection(v)


class FifoReceiveOptions(ReceiveOptions):
    """
    Options for receiving from a FIFO queue.

    Attributes:
        receive_request_attempt_id: Deduplication token for receive retries
    """

    receive_request_attempt_id: Optional[str] = None

    @field_validator('receive_request_attempt_id', mode='after')
    @classmethod
    def validate_receive_request_attempt_id(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            validate_message_identifier(v, MAX_MESSAGE_IDENTIFIER_LENGTH, "receive_request_attempt_id")
        return v


class QueueOptions(_Options):
    """
    Queue attributes used when creating or updating a queue.

    Unset (None) fields are not sent to the service. Durations and sizes
    are clamped into the ranges accepted by the service.
    """

    delay: Optional[timedelta] = None
    visibility_timeout: Optional[timedelta] = None
    message_retention_period: Optional[timedelta] = None
    maximum_message_size: Optional[int] = None
    receive_message_wait_time: Optional[timedelta] = None
    kms_master_key_id: Optional[str] = None
    kms_data_key_reuse_period: Optional[timedelta] = None
    policy: Optional[str] = None
    redrive_policy: Optional[str] = None
    fifo_queue: bool = False
    content_based_deduplication: Optional[bool] = None

    @field_validator('delay', mode='after')
    @classmethod
    def clamp_delay(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        return _clamp(v, MIN_MESSAGE_DELAY, MAX_MESSAGE_DELAY)

    @field_validator('visibility_timeout', mode='after')
    @classmethod
    def clamp_visibility_timeout(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        return _clamp(v, MIN_VISIBILITY_TIMEOUT, MAX_VISIBILITY_TIMEOUT)

    @field_validator('message_retention_period', mode='after')
    @classmethod
    def clamp_message_retention_period(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        return _clamp(v, MIN_MESSAGE_RETENTION_PERIOD, MAX_MESSAGE_RETENTION_PERIOD)

    @field_validator('maximum_message_size', mode='after')
    @classmethod
    def clamp_maximum_message_size(cls, v: Optional[int]) -> Optional[int]:
        return _clamp(v, MIN_MESSAGE_SIZE, MAX_MESSAGE_SIZE)

    @field_validator('receive_message_wait_time', mode='after')
    @classmethod
    def clamp_receive_message_wait_time(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        return _clamp(v, MIN_RECEIVE_WAIT_TIME, MAX_RECEIVE_WAIT_TIME)

    @field_validator('kms_data_key_reuse_period', mode='after')
    @classmethod
    def clamp_kms_data_key_reuse_period(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        return _clamp(v, MIN_KMS_DATA_KEY_REUSE_PERIOD, MAX_KMS_DATA_KEY_REUSE_PERIOD)

    def get_attributes(self) -> Dict[str, str]:
        """
        Build the attribute mapping sent to CreateQueue / SetQueueAttributes.

        Returns:
            Mapping of SQS attribute name to string value
        """
        attributes: Dict[str, str] = {}
        if self.delay is not None:
            attributes[QueueAttributeName.DELAY_SECONDS.value] = _seconds(self.delay)
        if self.visibility_timeout is not None:
            attributes[QueueAttributeName.VISIBILITY_TIMEOUT.value] = _seconds(self.visibility_timeout)
        if self.message_retention_period is not None:
            attributes[QueueAttributeName.MESSAGE_RETENTION_PERIOD.value] = _seconds(self.message_retention_period)
        if self.maximum_message_size is not None:
            attributes[QueueAttributeName.MAXIMUM_MESSAGE_SIZE.value] = str(self.maximum_message_size)
        if self.receive_message_wait_time is not None:
            attributes[QueueAttributeName.RECEIVE_MESSAGE_WAIT_TIME_SECONDS.value] = _seconds(
                self.receive_message_wait_time
            )
        if self.kms_master_key_id is not None:
            attributes[QueueAttributeName.KMS_MASTER_KEY_ID.value] = self.kms_master_key_id
        if self.kms_data_key_reuse_period is not None:
            attributes[QueueAttributeName.KMS_DATA_KEY_REUSE_PERIOD_SECONDS.value] = _seconds(
                self.kms_data_key_reuse_period
            )
        if self.policy is not None:
            attributes[QueueAttributeName.POLICY.value] = self.policy
        if self.redrive_policy is not None:
            attributes[QueueAttributeName.REDRIVE_POLICY.value] = self.redrive_policy
        # Standard queues reject an explicit FifoQueue=false
        if self.fifo_queue:
            attributes[QueueAttributeName.FIFO_QUEUE.value] = "true"
        if self.content_based_deduplication is not None:
            attributes[QueueAttributeName.CONTENT_BASED_DEDUPLICATION.value] = (
                "true" if self.content_based_deduplication else "false"
            )
        return attributes

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> 'QueueOptions':
        """
        Parse a GetQueueAttributes mapping into typed options.

        Unknown attribute names are ignored.
        """
        def duration(name: QueueAttributeName) -> Optional[timedelta]:
            value = attributes.get(name.value)
            return None if value is None else timedelta(seconds=float(value))

        def flag(name: QueueAttributeName) -> Optional[bool]:
            value = attributes.get(name.value)
            return None if value is None else value.strip().lower() == "true"

        size = attributes.get(QueueAttributeName.MAXIMUM_MESSAGE_SIZE.value)
        return cls(
            delay=duration(QueueAttributeName.DELAY_SECONDS),
            visibility_timeout=duration(QueueAttributeName.VISIBILITY_TIMEOUT),
            message_retention_period=duration(QueueAttributeName.MESSAGE_RETENTION_PERIOD),
            maximum_message_size=None if size is None else int(size),
            receive_message_wait_time=duration(QueueAttributeName.RECEIVE_MESSAGE_WAIT_TIME_SECONDS),
            kms_master_key_id=attributes.get(QueueAttributeName.KMS_MASTER_KEY_ID.value),
            kms_data_key_reuse_period=duration(QueueAttributeName.KMS_DATA_KEY_REUSE_PERIOD_SECONDS),
            policy=attributes.get(QueueAttributeName.POLICY.value),
            redrive_policy=attributes.get(QueueAttributeName.REDRIVE_POLICY.value),
            fifo_queue=bool(flag(QueueAttributeName.FIFO_QUEUE)),
            content_based_deduplication=flag(QueueAttributeName.CONTENT_BASED_DEDUPLICATION),
        )


class QueueAttributeOptions(_Options):
    """Queue attribute names to request from GetQueueAttributes."""

    attribute_names: List[QueueAttributeName] = Field(default_factory=list)

    @field_validator('attribute_names', mode='after')
    @classmethod
    def unique_attribute_names(cls, v: List[QueueAttributeName]) -> List[QueueAttributeName]:
        return _unique(v)


class ListQueuesOptions(_Options):
    """
    Options for listing queues.

    Attributes:
        queue_name_prefix: Only return queues whose name starts with this prefix
        max_results: Page size, clamped to [1, 1000]
        next_token: Continuation token from a previous page
    """

    queue_name_prefix: Optional[str] = None
    max_results: Optional[int] = None
    next_token: Optional[str] = None

    @field_validator('queue_name_prefix', mode='after')
    @classmethod
    def validate_queue_name_prefix(cls, v: Optional[str]) -> Optional[str]:
        if v:
            validate_character_set(v, QUEUE_NAME_CHARACTERS | frozenset("."), "queue_name_prefix")
        return v

    @field_validator('max_results', mode='after')
    @classmethod
    def clamp_max_results(cls, v: Optional[int]) -> Optional[int]:
        return _clamp(v, MIN_LIST_RESULTS, MAX_LIST_RESULTS)


class ManagerOptions(_Options):
    """
    Client configuration shared by every call of one manager.

    Retries are configured here and performed by aiobotocore; the managers
    themselves never retry.
    """

    region_name: str = "us-east-1"
    endpoint_url: Optional[str] = None
    connect_timeout: float = Field(default=5.0, gt=0)
    read_timeout: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(default=4, ge=1)
    max_pool_connections: int = Field(default=64, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> 'ManagerOptions':
        return cls(
            region_name=settings.aws_region,
            endpoint_url=settings.endpoint_url,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            max_attempts=settings.max_attempts,
            max_pool_connections=settings.max_pool_connections,
        )

    def to_botocore_config(self) -> AioConfig:
        return AioConfig(
            region_name=self.region_name,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            retries={'max_attempts': self.max_attempts, 'mode': 'standard'},
            max_pool_connections=self.max_pool_connections,
        )
