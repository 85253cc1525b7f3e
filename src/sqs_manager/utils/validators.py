"""
Module: validators.py
Description: Fail-fast precondition checks for queue names, attribute
names, message identifiers and request sizes.

Every validator is a pure function that either returns None or raises.
Callers chain several validators before a request object is built, so
an invalid request is never sent to the queue service.

Key Components:
- Primitive validators: non-empty, length, character set, period rules,
  reserved prefixes, request size
- Composite validators: validate_queue_name(), validate_attribute_name(),
  validate_message_identifier(), validate_queue_url()

Dependencies: string, urllib
"""

import re
import string
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlparse

from sqs_manager.exceptions import InvalidArgumentError, PayloadTooLargeError

PERIOD = "."

FIFO_SUFFIX = ".fifo"

MAX_QUEUE_NAME_LENGTH = 80
MAX_ATTRIBUTE_NAME_LENGTH = 256
MAX_MESSAGE_IDENTIFIER_LENGTH = 128

# Serialized request cap (256 KB)
MAX_REQUEST_SIZE = 256 * 1024

RESERVED_PREFIXES = ("AWS", "Amazon")

ALPHANUMERIC_CHARACTERS: FrozenSet[str] = frozenset(string.ascii_letters + string.digits)

QUEUE_NAME_CHARACTERS: FrozenSet[str] = ALPHANUMERIC_CHARACTERS | frozenset("_-")

ATTRIBUTE_NAME_CHARACTERS: FrozenSet[str] = QUEUE_NAME_CHARACTERS | frozenset(PERIOD)

MESSAGE_IDENTIFIER_PUNCTUATION = "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"

MESSAGE_IDENTIFIER_CHARACTERS: FrozenSet[str] = (
    ALPHANUMERIC_CHARACTERS | frozenset(MESSAGE_IDENTIFIER_PUNCTUATION)
)

_QUEUE_URL_REGION = re.compile(r"^sqs\.([a-z0-9-]+)\.amazonaws\.com(\.cn)?$")


def validate_non_empty_name(name: Optional[str], param_name: str = "name") -> None:
    """
    Validate that a name is a non-blank string.

    Raises:
        InvalidArgumentError: If name is None, not a string, or whitespace only
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"{param_name} must be a non-empty string", param_name)


def validate_name_length(name: str, max_length: int, param_name: str = "name") -> None:
    """
    Validate that a name does not exceed max_length characters.

    Raises:
        InvalidArgumentError: If the name is longer than max_length
    """
    if len(name) > max_length:
        raise InvalidArgumentError(
            f"{param_name} cannot exceed a length of {max_length} characters. "
            f"Actual size was {len(name)}.",
            param_name
        )


def validate_character_set(
    name: str,
    allowed: FrozenSet[str],
    param_name: str = "name",
    description: str = "only alphanumeric characters, underscore (_) and hyphen (-) are allowed"
) -> None:
    """
    Validate that every character of name belongs to the allowed alphabet.

    Args:
        name: Value to check
        allowed: Set of permitted characters
        param_name: Parameter name used in the error message
        description: Human readable description of the alphabet

    Raises:
        InvalidArgumentError: If any character is outside the alphabet
    """
    invalid = [c for c in name if c not in allowed]
    if invalid:
        raise InvalidArgumentError(
            f"One or more characters in the {param_name} are invalid; {description}.",
            param_name
        )


def validate_no_leading_or_trailing_period(name: str, param_name: str = "name") -> None:
    """Reject names that start or end with a period."""
    if name.startswith(PERIOD) or name.endswith(PERIOD):
        raise InvalidArgumentError(
            f"{param_name} must not start or end with a period (.).",
            param_name
        )


def validate_no_consecutive_periods(name: str, param_name: str = "name") -> None:
    """Reject names with periods in succession."""
    if PERIOD * 2 in name:
        raise InvalidArgumentError(
            f"{param_name} cannot have periods in succession (..).",
            param_name
        )


def validate_no_reserved_prefix(
    name: str,
    prefixes: Iterable[str] = RESERVED_PREFIXES,
    param_name: str = "name"
) -> None:
    """
    Reject names starting with a reserved prefix, ignoring case.

    Raises:
        InvalidArgumentError: If name starts with any of the prefixes
    """
    prefixes = tuple(prefixes)
    lowered = name.lower()
    if any(lowered.startswith(prefix.lower()) for prefix in prefixes):
        raise InvalidArgumentError(
            f"{param_name} cannot start with {' or '.join(prefixes)} (or any casing variants).",
            param_name
        )


def validate_request_size(serialized_size: int, max_bytes: int = MAX_REQUEST_SIZE) -> None:
    """
    Validate the fully serialized size of a request.

    Args:
        serialized_size: Size in bytes of the request as it would be transmitted
        max_bytes: Maximum allowed size in bytes

    Raises:
        PayloadTooLargeError: If serialized_size exceeds max_bytes
    """
    if serialized_size > max_bytes:
        raise PayloadTooLargeError(serialized_size, max_bytes)


def validate_queue_name(name: Optional[str]) -> None:
    """
    Validate a queue name.

    A trailing '.fifo' suffix is accepted; the remaining part may only
    contain alphanumeric characters, underscores and hyphens. The length
    limit covers the suffix.
    """
    validate_non_empty_name(name)
    validate_name_length(name, MAX_QUEUE_NAME_LENGTH)
    base_name = name[:-len(FIFO_SUFFIX)] if name.endswith(FIFO_SUFFIX) else name
    validate_non_empty_name(base_name)
    validate_character_set(base_name, QUEUE_NAME_CHARACTERS)


def validate_attribute_name(name: Optional[str], param_name: str = "name") -> None:
    """
    Validate a message attribute name.

    Rules are checked in a fixed order so the first violated rule is the
    one reported.
    """
    validate_non_empty_name(name, param_name)
    validate_name_length(name, MAX_ATTRIBUTE_NAME_LENGTH, param_name)
    validate_character_set(
        name,
        ATTRIBUTE_NAME_CHARACTERS,
        param_name,
        "only alphanumeric characters, underscore (_), hyphen (-), and period (.) are allowed"
    )
    validate_no_reserved_prefix(name, param_name=param_name)
    validate_no_leading_or_trailing_period(name, param_name)
    validate_no_consecutive_periods(name, param_name)


def validate_message_identifier(
    value: Optional[str],
    max_length: int = MAX_MESSAGE_IDENTIFIER_LENGTH,
    param_name: str = "value"
) -> None:
    """
    Validate a FIFO identifier (group id, deduplication id, receive attempt id).

    Raises:
        InvalidArgumentError: If the value is blank, too long, or contains
            characters outside alphanumerics and ASCII punctuation
    """
    validate_non_empty_name(value, param_name)
    validate_name_length(value, max_length, param_name)
    validate_character_set(
        value,
        MESSAGE_IDENTIFIER_CHARACTERS,
        param_name,
        f"only alphanumeric characters and these punctuation marks {MESSAGE_IDENTIFIER_PUNCTUATION} are allowed"
    )


def validate_queue_url(url: Optional[str], param_name: str = "queue_url") -> None:
    """Validate that url is a non-empty absolute HTTP/HTTPS URL."""
    validate_non_empty_name(url, param_name)
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgumentError(f"{param_name} must be a valid HTTP/HTTPS URL", param_name)


def queue_region_from_url(url: str) -> Optional[str]:
    """
    Extract the AWS region from a queue URL.

    Returns:
        Region name for URLs such as https://sqs.eu-west-1.amazonaws.com/123/q,
        None for other hosts (LocalStack, custom endpoints)
    """
    host = urlparse(url).hostname or ""
    match = _QUEUE_URL_REGION.match(host)
    return match.group(1) if match else None


def queue_name_from_url(url: str) -> str:
    """Return the last path segment of a queue URL."""
    return urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
