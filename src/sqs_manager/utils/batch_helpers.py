"""
Module: batch_helpers.py
Description: Utility functions for batch operations.

Splits arbitrarily long sequences into service-sized partitions, assigns
request-scoped entry ids, and merges per-partition batch responses.

Key Components:
- partition(): Lazily split an iterable into ordered slices
- assign_ids(): Pair items with generated batch entry ids
- ensure_unique_ids(): Reject duplicate entry ids within one batch
- validate_batch_size(): Enforce the per-batch entry limit
- merge_batch_responses(): Combine Successful/Failed lists

Dependencies: itertools, typing
"""

from itertools import islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Sequence, Tuple, TypeVar

from sqs_manager.exceptions import BatchLimitExceededError, InvalidArgumentError

T = TypeVar('T')

# Maximum number of entries per batch request
MAX_BATCH_ENTRIES = 10

IdGenerator = Callable[[int], str]


def default_batch_request_id(position: int) -> str:
    """
    Default batch entry id generator.

    Example:
        >>> default_batch_request_id(1)
        'Entry1'
    """
    return f"Entry{position}"


def partition(items: Iterable[T], size: int = MAX_BATCH_ENTRIES) -> Iterator[List[T]]:
    """
    Split an iterable into ordered slices of at most size items.

    The result is lazy and can only be consumed once. The final slice may
    hold fewer than size items; no item is dropped or duplicated.

    Args:
        items: Items to split
        size: Maximum size of each slice

    Raises:
        InvalidArgumentError: If size is not positive

    Example:
        >>> list(partition([1, 2, 3, 4, 5], 2))
        [[1, 2], [3, 4], [5]]
    """
    if items is None:
        raise InvalidArgumentError("items cannot be None", "items")
    if size <= 0:
        raise InvalidArgumentError("size must be positive", "size")
    return _partition(iter(items), size)


def _partition(iterator: Iterator[T], size: int) -> Iterator[List[T]]:
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def assign_ids(
    items: Iterable[T],
    id_generator: IdGenerator = default_batch_request_id,
    start_counter: int = 0
) -> Iterator[Tuple[str, T]]:
    """
    Pair each item with an id produced from its 1-based position.

    The counter is incremented before each call, so start_counter=0 gives
    ids for positions 1, 2, 3, ... and start_counter=7 gives 8, 9, 10, ...

    Args:
        items: Items to label
        id_generator: Function mapping a position to an entry id
        start_counter: Number of items already processed by earlier batches

    Returns:
        Lazy iterator of (id, item) pairs
    """
    if id_generator is None:
        id_generator = default_batch_request_id
    counter = start_counter
    for item in items:
        counter += 1
        yield id_generator(counter), item


def ensure_unique_ids(entries: Sequence[Tuple[str, Any]]) -> None:
    """
    Validate that entry ids are non-empty strings and unique within one batch.

    Raises:
        InvalidArgumentError: If an id is blank or appears twice
    """
    seen = set()
    for entry_id, _ in entries:
        if not isinstance(entry_id, str) or not entry_id.strip():
            raise InvalidArgumentError("Batch entry id must be a non-empty string", "id_generator")
        if entry_id in seen:
            raise InvalidArgumentError(
                f"Batch entry id '{entry_id}' is not unique within the batch",
                "id_generator"
            )
        seen.add(entry_id)


def validate_batch_size(items: Sequence[Any], max_size: int = MAX_BATCH_ENTRIES) -> None:
    """
    Validate that a batch doesn't exceed the maximum allowed size.

    Raises:
        BatchLimitExceededError: If batch size exceeds maximum

    Example:
        >>> validate_batch_size([1, 2, 3], 5)  # OK
        >>> validate_batch_size([1, 2, 3], 2)  # Raises BatchLimitExceededError
    """
    if len(items) > max_size:
        raise BatchLimitExceededError(len(items), max_size, "items")


def merge_batch_responses(responses: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Merge per-partition batch responses into a single view.

    Example:
        >>> merge_batch_responses([
        ...     {"Successful": [{"Id": "Entry1"}], "Failed": []},
        ...     {"Successful": [{"Id": "Entry11"}]}
        ... ])
        {'Successful': [{'Id': 'Entry1'}, {'Id': 'Entry11'}], 'Failed': []}
    """
    merged = {"Successful": [], "Failed": []}
    for response in responses:
        merged["Successful"].extend(response.get("Successful", []))
        merged["Failed"].extend(response.get("Failed", []))
    return merged
