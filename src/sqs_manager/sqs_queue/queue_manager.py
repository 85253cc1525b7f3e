"""
Module: queue_manager.py
Description: Queue lifecycle operations.

Creates, deletes, lists and configures queues. Queue names are validated
before any request is sent; FIFO queues get the '.fifo' suffix appended
automatically.
"""

from typing import Any, Dict, Optional

from sqs_manager.exceptions import InvalidArgumentError
from sqs_manager.models.options import ListQueuesOptions, QueueAttributeOptions, QueueOptions
from sqs_manager.sqs_queue.manager import SQSManager
from sqs_manager.utils.logger import get_logger
from sqs_manager.utils.validators import (
    FIFO_SUFFIX,
    MAX_QUEUE_NAME_LENGTH,
    queue_region_from_url,
    validate_name_length,
    validate_queue_name,
    validate_queue_url,
)

logger = get_logger(__name__)


def _is_url(name_or_url: str) -> bool:
    return isinstance(name_or_url, str) and name_or_url.startswith(('http://', 'https://'))


class QueueManager(SQSManager):
    """
    Manager for queue-level operations in one region.

    Example:
        >>> async with QueueManager() as queues:
        ...     created = await queues.create_queue("orders", QueueOptions(fifo_queue=True))
        ...     created["QueueUrl"]
        'https://sqs.us-east-1.amazonaws.com/123456789012/orders.fifo'
    """

    async def create_queue(self, name: str, options: Optional[QueueOptions] = None) -> Dict[str, Any]:
        """
        Create a queue.

        Args:
            name: Queue name (without or with the '.fifo' suffix)
            options: Queue attributes

        Returns:
            CreateQueue response (contains 'QueueUrl')

        Raises:
            InvalidArgumentError: If the name is invalid
            RemoteServiceError: If the service rejects the request
        """
        validate_queue_name(name)
        options = options or QueueOptions()
        if options.fifo_queue and not name.endswith(FIFO_SUFFIX):
            name = name + FIFO_SUFFIX
            validate_name_length(name, MAX_QUEUE_NAME_LENGTH)

        params: Dict[str, Any] = {'QueueName': name}
        attributes = options.get_attributes()
        if attributes:
            params['Attributes'] = attributes

        response = await self._call('CreateQueue', **params)
        logger.info(
            "Queue created",
            queue_name=name,
            queue_url=response.get('QueueUrl'),
            fifo=options.fifo_queue
        )
        return response

    async def get_queue_url(self, name: str) -> Dict[str, Any]:
        """
        Resolve a queue name to its URL.

        Returns:
            GetQueueUrl response (contains 'QueueUrl')
        """
        validate_queue_name(name)
        return await self._call('GetQueueUrl', QueueName=name)

    async def _resolve_queue_url(self, name_or_url: str) -> str:
        if _is_url(name_or_url):
            validate_queue_url(name_or_url)
            region = queue_region_from_url(name_or_url)
            if region is not None and region != self.region_name:
                raise InvalidArgumentError(
                    f"The specified queue_url resolves to AWS {region} but was expected to be AWS {self.region_name}.",
                    "queue_url"
                )
            return name_or_url
        response = await self.get_queue_url(name_or_url)
        return response['QueueUrl']

    async def delete_queue(self, name_or_url: str) -> Dict[str, Any]:
        """
        Delete a queue by name or URL.

        Raises:
            InvalidArgumentError: If the name is invalid or the URL points to
                another region
        """
        queue_url = await self._resolve_queue_url(name_or_url)
        response = await self._call('DeleteQueue', QueueUrl=queue_url)
        logger.info("Queue deleted", queue_url=queue_url)
        return response

    async def list_queues(self, options: Optional[ListQueuesOptions] = None) -> Dict[str, Any]:
        """
        List queues, optionally filtered by name prefix.

        Returns:
            ListQueues response ('QueueUrls' is absent when nothing matches)
        """
        options = options or ListQueuesOptions()
        params: Dict[str, Any] = {}
        if options.queue_name_prefix:
            params['QueueNamePrefix'] = options.queue_name_prefix
        if options.max_results is not None:
            params['MaxResults'] = options.max_results
        if options.next_token:
            params['NextToken'] = options.next_token
        return await self._call('ListQueues', **params)

    async def set_queue_attributes(self, name_or_url: str, options: QueueOptions) -> Dict[str, Any]:
        """
        Update queue attributes.

        Raises:
            InvalidArgumentError: If options set no attribute
        """
        if options is None:
            raise InvalidArgumentError("options cannot be None", "options")
        attributes = options.get_attributes()
        if not attributes:
            raise InvalidArgumentError("options must set at least one attribute", "options")

        queue_url = await self._resolve_queue_url(name_or_url)
        response = await self._call('SetQueueAttributes', QueueUrl=queue_url, Attributes=attributes)
        logger.info("Queue attributes updated", queue_url=queue_url, attributes=sorted(attributes))
        return response

    async def get_queue_attributes(
        self,
        name_or_url: str,
        options: Optional[QueueAttributeOptions] = None
    ) -> Dict[str, Any]:
        """Fetch queue attributes by name or URL."""
        queue_url = await self._resolve_queue_url(name_or_url)
        return await super().get_queue_attributes(queue_url, options)

    async def get_queue_options(self, name_or_url: str) -> QueueOptions:
        """
        Fetch every queue attribute and parse it into QueueOptions.
        """
        response = await self.get_queue_attributes(
            name_or_url,
            QueueAttributeOptions(attribute_names=["All"])
        )
        return QueueOptions.from_attributes(response.get('Attributes', {}))
