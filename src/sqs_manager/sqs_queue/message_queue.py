"""
Module: message_queue.py
Description: Message operations bound to a single queue.

Implements the send, receive and delete families shared by standard and
FIFO queues. Batch calls accept at most 10 entries; the *_many variants
partition any number of items into batches and send them in order, with
entry ids numbered across the whole input.

Key Components:
- MessageQueueManager: abstract base for queue-bound message operations
- send / send_batch / send_many: message publishing
- receive / receive_many: message consumption
- delete / delete_batch / delete_many / purge: message removal

Dependencies: aioboto3 (through SQSManager)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from sqs_manager.config.settings import settings
from sqs_manager.exceptions import InvalidArgumentError
from sqs_manager.models.attributes import QueueAttributeName
from sqs_manager.models.options import BatchOptions, ManagerOptions, QueueAttributeOptions, ReceiveOptions
from sqs_manager.sqs_queue.dispatch import PartitionDispatcher
from sqs_manager.sqs_queue.manager import SQSManager
from sqs_manager.utils.batch_helpers import assign_ids, ensure_unique_ids, validate_batch_size
from sqs_manager.utils.logger import get_logger
from sqs_manager.utils.request_size import ensure_request_size
from sqs_manager.utils.validators import queue_region_from_url, validate_non_empty_name, validate_queue_url

logger = get_logger(__name__)


def _log_failed_entries(operation: str, queue_url: str, response: Dict[str, Any]) -> None:
    failed = response.get('Failed') or []
    if failed:
        logger.warning(
            "Batch entries rejected by SQS",
            operation=operation,
            queue_url=queue_url,
            failed_count=len(failed),
            failed_ids=[entry.get('Id') for entry in failed]
        )


class MessageQueueManager(SQSManager, ABC):
    """
    Base class for message operations on one queue.

    Subclasses supply the send options type and the per-message request
    parameters for their queue kind.

    Attributes:
        queue_url: URL of the queue all operations target
    """

    send_options_class = BatchOptions
    receive_options_class = ReceiveOptions

    def __init__(self, queue_url: str, options: Optional[ManagerOptions] = None, **kwargs: Any):
        """
        Initialize the manager for one queue.

        Args:
            queue_url: URL of the queue
            options: Client configuration; when omitted the region is taken
                from the queue URL (falling back to settings)
            **kwargs: client / session, see SQSManager
        """
        validate_queue_url(queue_url)
        if options is None:
            options = ManagerOptions.from_settings(settings)
            region = queue_region_from_url(queue_url)
            if region is not None:
                options.region_name = region
        self.queue_url = queue_url
        super().__init__(options=options, **kwargs)

    # Send

    def _send_options(self, options):
        if options is None:
            return self.send_options_class()
        if not isinstance(options, self.send_options_class):
            raise InvalidArgumentError(
                f"options must be a {self.send_options_class.__name__} instance", "options"
            )
        return options

    @abstractmethod
    def _message_params(self, options) -> Dict[str, Any]:
        """Request parameters added to a single SendMessage call."""

    @abstractmethod
    def _entry_params(self, options, position: int) -> Dict[str, Any]:
        """Request parameters added to the batch entry at 1-based position."""

    async def send(self, message: str, options=None) -> Dict[str, Any]:
        """
        Send one message.

        Args:
            message: Message body
            options: Send options for this queue kind

        Returns:
            SendMessage response (contains 'MessageId')

        Raises:
            InvalidArgumentError: If the message is blank
            PayloadTooLargeError: If the serialized request exceeds 256 KB
            RemoteServiceError: If the service rejects the request
        """
        validate_non_empty_name(message, "message")
        options = self._send_options(options)
        params = {'QueueUrl': self.queue_url, 'MessageBody': message}
        params.update(self._message_params(options))
        ensure_request_size('SendMessage', params)

        response = await self._call('SendMessage', **params)
        logger.info(
            "Message sent to SQS",
            queue_url=self.queue_url,
            message_id=response.get('MessageId')
        )
        return response

    def _build_send_batch(self, messages: List[str], options, start_counter: int) -> Dict[str, Any]:
        pairs = list(assign_ids(messages, options.batch_request_id_generator, start_counter))
        validate_batch_size(pairs)
        ensure_unique_ids(pairs)

        entries = []
        for position, (entry_id, message) in enumerate(pairs, start=start_counter + 1):
            validate_non_empty_name(message, "message")
            entry = {'Id': entry_id, 'MessageBody': message}
            entry.update(self._entry_params(options, position))
            entries.append(entry)

        params = {'QueueUrl': self.queue_url, 'Entries': entries}
        return ensure_request_size('SendMessageBatch', params)

    async def _send_batch_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._call('SendMessageBatch', **params)
        _log_failed_entries('SendMessageBatch', self.queue_url, response)
        logger.info(
            "Message batch sent to SQS",
            queue_url=self.queue_url,
            entries=len(params['Entries']),
            successful=len(response.get('Successful') or [])
        )
        return response

    async def send_batch(self, messages: Iterable[str], options=None) -> Dict[str, Any]:
        """
        Send up to 10 messages in one request.

        Raises:
            InvalidArgumentError: If messages is empty or an id is repeated
            BatchLimitExceededError: If more than 10 messages are given
            PayloadTooLargeError: If the serialized request exceeds 256 KB
        """
        if messages is None:
            raise InvalidArgumentError("messages cannot be None", "messages")
        messages = list(messages)
        if not messages:
            raise InvalidArgumentError("messages cannot be empty", "messages")
        options = self._send_options(options)
        return await self._send_batch_request(self._build_send_batch(messages, options, 0))

    async def send_many(self, messages: Iterable[str], options=None) -> List[Dict[str, Any]]:
        """
        Send any number of messages as consecutive batches of up to 10.

        Entry ids continue across batches (Entry1..Entry10, Entry11..). The
        first failing batch stops the operation and its error is raised.

        Returns:
            One SendMessageBatch response per batch
        """
        if messages is None:
            raise InvalidArgumentError("messages cannot be None", "messages")
        options = self._send_options(options)
        dispatcher = PartitionDispatcher('SendMessageBatch', self.queue_url)
        return await dispatcher.run(
            messages,
            lambda chunk, processed: self._build_send_batch(chunk, options, processed),
            self._send_batch_request
        )

    # Receive

    def _receive_options(self, options):
        if options is None:
            return self.receive_options_class()
        if not isinstance(options, self.receive_options_class):
            raise InvalidArgumentError(
                f"options must be a {self.receive_options_class.__name__} instance", "options"
            )
        return options

    def _receive_params(self, options) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            'QueueUrl': self.queue_url,
            'MaxNumberOfMessages': options.max_number_of_messages,
            'VisibilityTimeout': int(options.visibility_timeout.total_seconds()),
            'WaitTimeSeconds': int(options.wait_time.total_seconds()),
        }
        if options.attribute_names:
            params['AttributeNames'] = [name.value for name in options.attribute_names]
        if options.message_attribute_names:
            params['MessageAttributeNames'] = options.message_attribute_names.to_list()
        return params

    async def _receive_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._call('ReceiveMessage', **params)
        logger.debug(
            "Messages received from SQS",
            queue_url=self.queue_url,
            count=len(response.get('Messages') or [])
        )
        return response

    async def receive(self, options=None) -> Dict[str, Any]:
        """
        Receive up to options.max_number_of_messages messages.

        Returns:
            ReceiveMessage response ('Messages' is absent when none arrived)
        """
        options = self._receive_options(options)
        return await self._receive_request(self._receive_params(options))

    async def approximate_number_of_messages(self) -> int:
        """Return the approximate number of visible messages in the queue."""
        response = await self.get_attributes(
            QueueAttributeOptions(attribute_names=[QueueAttributeName.APPROXIMATE_NUMBER_OF_MESSAGES])
        )
        attributes = response.get('Attributes') or {}
        return int(attributes.get(QueueAttributeName.APPROXIMATE_NUMBER_OF_MESSAGES.value, 0))

    async def receive_many(self, approximate_count: int = 200, options=None) -> List[Dict[str, Any]]:
        """
        Receive roughly approximate_count messages with concurrent receive calls.

        The count is capped to the current queue depth. Receive calls are
        issued until the requested count is covered (each call asks for
        options.max_number_of_messages). Duplicates or fewer messages than
        requested are possible and are not corrected. The first failing call
        cancels the calls still in flight and its error is raised.

        Args:
            approximate_count: Number of messages wanted (must be > 0)
            options: Receive options used by every receive call

        Returns:
            One ReceiveMessage response per receive call
        """
        if approximate_count <= 0:
            raise InvalidArgumentError(
                "approximate_count must have a value that is greater than 0.", "approximate_count"
            )
        options = self._receive_options(options)

        available = await self.approximate_number_of_messages()
        remaining = min(approximate_count, available)

        params = self._receive_params(options)
        requests = []
        while remaining > 0:
            requests.append(dict(params))
            remaining -= options.max_number_of_messages

        logger.info(
            "Receiving messages from SQS",
            queue_url=self.queue_url,
            requested=approximate_count,
            available=available,
            receive_calls=len(requests)
        )
        dispatcher = PartitionDispatcher('ReceiveMessage', self.queue_url)
        return await dispatcher.run_concurrent(requests, self._receive_request)

    # Delete

    async def delete(self, receipt_handle: str) -> Dict[str, Any]:
        """Delete one message by receipt handle."""
        validate_non_empty_name(receipt_handle, "receipt_handle")
        response = await self._call('DeleteMessage', QueueUrl=self.queue_url, ReceiptHandle=receipt_handle)
        logger.info("Message deleted from SQS", queue_url=self.queue_url)
        return response

    def _build_delete_batch(
        self,
        receipt_handles: List[str],
        options: BatchOptions,
        start_counter: int
    ) -> Dict[str, Any]:
        pairs = list(assign_ids(receipt_handles, options.batch_request_id_generator, start_counter))
        validate_batch_size(pairs)
        ensure_unique_ids(pairs)
        entries = []
        for entry_id, receipt_handle in pairs:
            validate_non_empty_name(receipt_handle, "receipt_handle")
            entries.append({'Id': entry_id, 'ReceiptHandle': receipt_handle})
        return {'QueueUrl': self.queue_url, 'Entries': entries}

    async def _delete_batch_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._call('DeleteMessageBatch', **params)
        _log_failed_entries('DeleteMessageBatch', self.queue_url, response)
        logger.info(
            "Message batch deleted from SQS",
            queue_url=self.queue_url,
            entries=len(params['Entries'])
        )
        return response

    async def delete_batch(
        self,
        receipt_handles: Iterable[str],
        options: Optional[BatchOptions] = None
    ) -> Dict[str, Any]:
        """
        Delete up to 10 messages in one request.

        Raises:
            BatchLimitExceededError: If more than 10 receipt handles are given
        """
        if receipt_handles is None:
            raise InvalidArgumentError("receipt_handles cannot be None", "receipt_handles")
        receipt_handles = list(receipt_handles)
        if not receipt_handles:
            raise InvalidArgumentError("receipt_handles cannot be empty", "receipt_handles")
        options = options or BatchOptions()
        return await self._delete_batch_request(self._build_delete_batch(receipt_handles, options, 0))

    async def delete_many(
        self,
        receipt_handles: Iterable[str],
        options: Optional[BatchOptions] = None
    ) -> List[Dict[str, Any]]:
        """
        Delete any number of messages as consecutive batches of up to 10.

        Returns:
            One DeleteMessageBatch response per batch
        """
        if receipt_handles is None:
            raise InvalidArgumentError("receipt_handles cannot be None", "receipt_handles")
        options = options or BatchOptions()
        dispatcher = PartitionDispatcher('DeleteMessageBatch', self.queue_url)
        return await dispatcher.run(
            receipt_handles,
            lambda chunk, processed: self._build_delete_batch(chunk, options, processed),
            self._delete_batch_request
        )

    async def purge(self) -> Dict[str, Any]:
        """Delete every message in the queue."""
        response = await self._call('PurgeQueue', QueueUrl=self.queue_url)
        logger.info("Queue purged", queue_url=self.queue_url)
        return response

    async def get_attributes(self, options: Optional[QueueAttributeOptions] = None) -> Dict[str, Any]:
        """Fetch attributes of this queue."""
        return await self.get_queue_attributes(self.queue_url, options)
