"""
Module: standard.py
Description: Message manager for standard (best-effort ordered) queues.
"""

from typing import Any, Dict

from sqs_manager.models.attributes import to_wire_attributes
from sqs_manager.models.options import ReceiveOptions, SendOptions
from sqs_manager.sqs_queue.message_queue import MessageQueueManager


class StandardMessageQueueManager(MessageQueueManager):
    """
    Message operations for a standard queue.

    Every message sent with the same SendOptions gets the same delay and
    message attributes.

    Example:
        >>> manager = StandardMessageQueueManager(queue_url)
        >>> options = SendOptions(delay=5).add_attribute("Source", "billing")
        >>> responses = await manager.send_many(bodies, options)
    """

    send_options_class = SendOptions
    receive_options_class = ReceiveOptions

    def _message_params(self, options: SendOptions) -> Dict[str, Any]:
        params: Dict[str, Any] = {'DelaySeconds': int(options.delay.total_seconds())}
        if options.message_attributes:
            params['MessageAttributes'] = to_wire_attributes(options.message_attributes)
        return params

    def _entry_params(self, options: SendOptions, position: int) -> Dict[str, Any]:
        return self._message_params(options)
