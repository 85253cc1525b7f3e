"""
Module: dispatch.py
Description: Dispatch of partitioned batch requests.

Drives a multi-request operation (send many, delete many, receive many)
through its states. For batch operations every partition is turned into
a request before the first one is sent, so an invalid partition stops
the operation before any request reaches the service. Batch requests are
then sent one after another; receive requests are sent concurrently. The
first failure (or cancellation) stops the operation, outstanding
requests are cancelled and no partial result is returned. Requests
already completed are not rolled back.
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, TypeVar

from sqs_manager.exceptions import InvalidStateError
from sqs_manager.utils.batch_helpers import MAX_BATCH_ENTRIES, partition
from sqs_manager.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')
R = TypeVar('R')

RequestBuilder = Callable[[List[T], int], Dict[str, Any]]
RequestSender = Callable[[Dict[str, Any]], Awaitable[R]]


class BatchState(str, Enum):
    """Lifecycle of one multi-request operation."""

    IDLE = "idle"
    PARTITIONING = "partitioning"
    DISPATCHING = "dispatching"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


class PartitionDispatcher:
    """
    Runs one multi-request operation.

    Attributes:
        operation: Name used in log entries (e.g. 'SendMessageBatch')
        queue_url: Queue the operation targets
        state: Current BatchState
        processed: Number of items turned into requests so far
        dispatched: Number of requests completed successfully
    """

    def __init__(self, operation: str, queue_url: str, partition_size: int = MAX_BATCH_ENTRIES):
        self.operation = operation
        self.queue_url = queue_url
        self.partition_size = partition_size
        self.state = BatchState.IDLE
        self.processed = 0
        self.dispatched = 0

    def _transition(self, state: BatchState, **context: Any) -> None:
        logger.debug(
            "Batch operation state changed",
            operation=self.operation,
            queue_url=self.queue_url,
            previous_state=self.state.value,
            state=state.value,
            **context
        )
        self.state = state

    def _start(self) -> None:
        if self.state is not BatchState.IDLE:
            raise InvalidStateError("A PartitionDispatcher can only be run once")
        self._transition(BatchState.PARTITIONING)

    def _cancelled(self) -> None:
        self._transition(BatchState.FAILED, dispatched=self.dispatched)
        logger.warning(
            "Batch operation cancelled",
            operation=self.operation,
            queue_url=self.queue_url,
            dispatched=self.dispatched
        )

    def _failed(self, error: Exception) -> None:
        self._transition(BatchState.FAILED, dispatched=self.dispatched)
        logger.error(
            "Batch operation failed",
            operation=self.operation,
            queue_url=self.queue_url,
            dispatched=self.dispatched,
            error=str(error)
        )

    def _finish(self, results: List[R]) -> List[R]:
        self._transition(BatchState.AGGREGATING, partitions=len(results))
        self._transition(BatchState.DONE)
        logger.info(
            "Batch operation completed",
            operation=self.operation,
            queue_url=self.queue_url,
            items=self.processed,
            partitions=len(results)
        )
        return results

    async def run(
        self,
        items: Iterable[T],
        build: RequestBuilder,
        send: RequestSender
    ) -> List[R]:
        """
        Partition items, build one request per partition and send them in order.

        Args:
            items: Items to process
            build: Builds the request for a partition; receives the partition
                and the number of items in earlier partitions
            send: Sends one request and returns its response

        Returns:
            One response per partition, in partition order

        Raises:
            InvalidStateError: If the dispatcher has already been run
        """
        self._start()
        results: List[R] = []
        try:
            requests = []
            for chunk in partition(items, self.partition_size):
                requests.append(build(chunk, self.processed))
                self.processed += len(chunk)

            for index, request in enumerate(requests):
                self._transition(BatchState.DISPATCHING, partition_index=index)
                results.append(await send(request))
                self.dispatched += 1

        except asyncio.CancelledError:
            self._cancelled()
            raise

        except Exception as e:
            self._failed(e)
            raise

        return self._finish(results)

    async def run_concurrent(
        self,
        requests: Iterable[Dict[str, Any]],
        send: RequestSender
    ) -> List[R]:
        """
        Send prepared requests concurrently.

        The first request to fail cancels every request still in flight,
        and its error is raised once they have finished cancelling.

        Args:
            requests: Requests to send
            send: Sends one request and returns its response

        Returns:
            One response per request, in request order

        Raises:
            InvalidStateError: If the dispatcher has already been run
        """
        self._start()
        tasks: List[asyncio.Task] = []
        try:
            requests = list(requests)
            self.processed = len(requests)
            self._transition(BatchState.DISPATCHING, requests=len(requests))
            tasks = [asyncio.ensure_future(send(request)) for request in requests]

            if tasks:
                done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
                self.dispatched = sum(
                    1 for task in done if not task.cancelled() and task.exception() is None
                )
                for task in tasks:
                    if task in done and not task.cancelled() and task.exception() is not None:
                        raise task.exception()

            results = [task.result() for task in tasks]

        except asyncio.CancelledError:
            self._cancelled()
            raise

        except Exception as e:
            self._failed(e)
            raise

        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return self._finish(results)
