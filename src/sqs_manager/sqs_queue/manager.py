"""
Module: manager.py
Description: Base SQS manager owning the remote client.

Holds one long-lived aioboto3 SQS client per manager. The client context
is entered lazily on first use and exited through close() or
``async with``. Every remote call goes through _call(), which logs the
outcome and converts botocore errors into RemoteServiceError.

Key Components:
- RemoteQueueClient: protocol of the remote queue operations used
- SQSManager: client lifecycle, error translation, queue attributes

Dependencies: aioboto3, botocore
"""

import asyncio
from contextlib import AsyncExitStack
from typing import Any, Dict, Optional, Protocol

from aioboto3 import Session
from botocore import xform_name
from botocore.exceptions import BotoCoreError, ClientError

from sqs_manager.config.settings import settings
from sqs_manager.exceptions import RemoteServiceError
from sqs_manager.models.options import ManagerOptions, QueueAttributeOptions
from sqs_manager.utils.logger import get_logger
from sqs_manager.utils.validators import validate_queue_url

logger = get_logger(__name__)


class RemoteQueueClient(Protocol):
    """Remote queue operations consumed by the managers (an aioboto3 SQS client)."""

    async def create_queue(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def delete_queue(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def list_queues(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def get_queue_url(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def set_queue_attributes(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def get_queue_attributes(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def send_message(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def send_message_batch(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def receive_message(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def delete_message(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def delete_message_batch(self, **kwargs: Any) -> Dict[str, Any]: ...

    async def purge_queue(self, **kwargs: Any) -> Dict[str, Any]: ...


class SQSManager:
    """
    Base class for queue and message managers.

    The remote client holds no per-call state, so one manager can serve
    any number of sequential or concurrent calls.

    Attributes:
        options: Client configuration (region, endpoint, timeouts)
        session: aioboto3 session used to create the client
    """

    def __init__(
        self,
        options: Optional[ManagerOptions] = None,
        client: Optional[RemoteQueueClient] = None,
        session: Optional[Session] = None
    ):
        """
        Initialize the manager.

        Args:
            options: Client configuration, defaults to values from settings
            client: Pre-built remote client (the manager will not close it)
            session: aioboto3 session, a new one is created when omitted
        """
        self.options = options or ManagerOptions.from_settings(settings)
        self.session = session or Session()
        self._client = client
        self._exit_stack: Optional[AsyncExitStack] = None
        self._client_lock = asyncio.Lock()

        logger.info(
            "SQS manager initialized",
            manager=type(self).__name__,
            region=self.options.region_name,
            endpoint_url=self.options.endpoint_url
        )

    @property
    def region_name(self) -> str:
        return self.options.region_name

    async def _get_client(self) -> RemoteQueueClient:
        if self._client is not None:
            return self._client

        async with self._client_lock:
            if self._client is None:
                exit_stack = AsyncExitStack()
                self._client = await exit_stack.enter_async_context(
                    self.session.client(
                        'sqs',
                        region_name=self.options.region_name,
                        endpoint_url=self.options.endpoint_url,
                        config=self.options.to_botocore_config()
                    )
                )
                self._exit_stack = exit_stack
                logger.debug("SQS client opened", region=self.options.region_name)
        return self._client

    async def close(self) -> None:
        """Close the client created by this manager (injected clients are left open)."""
        if self._exit_stack is None:
            return
        exit_stack, self._exit_stack = self._exit_stack, None
        self._client = None
        await exit_stack.aclose()
        logger.debug("SQS client closed", region=self.options.region_name)

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _call(self, operation: str, **params: Any) -> Dict[str, Any]:
        """
        Invoke a remote operation.

        Args:
            operation: SQS operation name (e.g. 'SendMessageBatch')
            **params: Request parameters

        Returns:
            Response dictionary from the service

        Raises:
            RemoteServiceError: If the service or transport reports an error
        """
        client = await self._get_client()
        method = getattr(client, xform_name(operation))
        queue_url = params.get('QueueUrl')

        try:
            response = await method(**params)

        except ClientError as e:
            error = e.response.get('Error', {})
            logger.error(
                "SQS operation failed",
                operation=operation,
                queue_url=queue_url,
                error_code=error.get('Code'),
                error_message=error.get('Message')
            )
            raise RemoteServiceError(
                operation,
                error.get('Code', 'Unknown'),
                error.get('Message', str(e))
            ) from e

        except BotoCoreError as e:
            logger.error(
                "SQS transport error",
                operation=operation,
                queue_url=queue_url,
                error=str(e)
            )
            raise RemoteServiceError(operation, type(e).__name__, str(e)) from e

        logger.debug("SQS operation completed", operation=operation, queue_url=queue_url)
        return response

    async def get_queue_attributes(
        self,
        queue_url: str,
        options: Optional[QueueAttributeOptions] = None
    ) -> Dict[str, Any]:
        """
        Fetch queue attributes.

        Args:
            queue_url: URL of the queue
            options: Attribute names to request (none requests the defaults)

        Returns:
            GetQueueAttributes response
        """
        validate_queue_url(queue_url)
        options = options or QueueAttributeOptions()
        params: Dict[str, Any] = {'QueueUrl': queue_url}
        if options.attribute_names:
            params['AttributeNames'] = [name.value for name in options.attribute_names]
        return await self._call('GetQueueAttributes', **params)
