"""
Module: fifo.py
Description: Message manager for FIFO queues.

FIFO sends require a message group id. Single sends may carry a fixed
deduplication id; batch sends derive one per message from
FifoSendOptions.batch_message_deduplication_id_generator (or rely on
content-based deduplication configured on the queue).
"""

from typing import Any, Dict, Optional

from sqs_manager.exceptions import InvalidArgumentError
from sqs_manager.models.attributes import to_wire_attributes
from sqs_manager.models.options import FifoReceiveOptions, FifoSendOptions, ManagerOptions
from sqs_manager.sqs_queue.message_queue import MessageQueueManager
from sqs_manager.utils.validators import (
    FIFO_SUFFIX,
    queue_name_from_url,
    validate_message_identifier,
    validate_queue_url,
)


class FifoMessageQueueManager(MessageQueueManager):
    """
    Message operations for a FIFO queue.

    Raises:
        InvalidArgumentError: If queue_url does not name a '.fifo' queue
    """

    send_options_class = FifoSendOptions
    receive_options_class = FifoReceiveOptions

    def __init__(self, queue_url: str, options: Optional[ManagerOptions] = None, **kwargs: Any):
        validate_queue_url(queue_url)
        if not queue_name_from_url(queue_url).endswith(FIFO_SUFFIX):
            raise InvalidArgumentError(
                f"queue_url must point to a FIFO queue (name ending in {FIFO_SUFFIX})", "queue_url"
            )
        super().__init__(queue_url, options, **kwargs)

    def _common_params(self, options: FifoSendOptions) -> Dict[str, Any]:
        params: Dict[str, Any] = {'MessageGroupId': options.message_group_id}
        if options.message_attributes:
            params['MessageAttributes'] = to_wire_attributes(options.message_attributes)
        return params

    def _message_params(self, options: FifoSendOptions) -> Dict[str, Any]:
        params = self._common_params(options)
        if options.message_deduplication_id is not None:
            params['MessageDeduplicationId'] = options.message_deduplication_id
        return params

    def _entry_params(self, options: FifoSendOptions, position: int) -> Dict[str, Any]:
        params = self._common_params(options)
        generator = options.batch_message_deduplication_id_generator
        if generator is not None:
            deduplication_id = generator(position)
            validate_message_identifier(deduplication_id, param_name="message_deduplication_id")
            params['MessageDeduplicationId'] = deduplication_id
        return params

    def _receive_params(self, options: FifoReceiveOptions) -> Dict[str, Any]:
        params = super()._receive_params(options)
        if options.receive_request_attempt_id is not None:
            params['ReceiveRequestAttemptId'] = options.receive_request_attempt_id
        return params
