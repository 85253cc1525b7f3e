"""
Module: test_validators.py
Description: Unit tests for name, identifier and size validators.

Each rule is checked on its own, and composite validators are checked to
report the first violated rule with its specific message.
"""

import pytest

from sqs_manager.exceptions import InvalidArgumentError, PayloadTooLargeError
from sqs_manager.utils.validators import (
    ATTRIBUTE_NAME_CHARACTERS,
    MAX_REQUEST_SIZE,
    QUEUE_NAME_CHARACTERS,
    queue_name_from_url,
    queue_region_from_url,
    validate_attribute_name,
    validate_character_set,
    validate_message_identifier,
    validate_name_length,
    validate_no_consecutive_periods,
    validate_no_leading_or_trailing_period,
    validate_no_reserved_prefix,
    validate_non_empty_name,
    validate_queue_name,
    validate_queue_url,
    validate_request_size,
)


class TestPrimitiveValidators:
    """Test cases for single-rule validators."""

    @pytest.mark.parametrize("name", [None, "", "   ", 42])
    def test_non_empty_name_rejects_blank(self, name):
        with pytest.raises(InvalidArgumentError, match="name must be a non-empty string"):
            validate_non_empty_name(name)

    def test_non_empty_name_reports_param_name(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_non_empty_name("", "receipt_handle")
        assert exc_info.value.param_name == "receipt_handle"

    def test_name_length(self):
        validate_name_length("a" * 80, 80)
        with pytest.raises(InvalidArgumentError, match="cannot exceed a length of 80 characters. Actual size was 81"):
            validate_name_length("a" * 81, 80)

    def test_character_set(self):
        validate_character_set("orders_2024-eu", QUEUE_NAME_CHARACTERS)
        with pytest.raises(InvalidArgumentError, match="characters in the name are invalid"):
            validate_character_set("orders 2024", QUEUE_NAME_CHARACTERS)

    def test_character_set_rejects_non_ascii_letters(self):
        with pytest.raises(InvalidArgumentError):
            validate_character_set("ordrés", QUEUE_NAME_CHARACTERS)

    @pytest.mark.parametrize("name", [".name", "name.", "."])
    def test_leading_or_trailing_period(self, name):
        with pytest.raises(InvalidArgumentError, match="must not start or end with a period"):
            validate_no_leading_or_trailing_period(name)

    def test_consecutive_periods(self):
        validate_no_consecutive_periods("a.b.c")
        with pytest.raises(InvalidArgumentError, match="periods in succession"):
            validate_no_consecutive_periods("a..b")

    @pytest.mark.parametrize("name", ["AWS.trace", "aws-id", "Amazon.x", "AMAZONian"])
    def test_reserved_prefix_is_case_insensitive(self, name):
        with pytest.raises(InvalidArgumentError, match="cannot start with AWS or Amazon"):
            validate_no_reserved_prefix(name)

    def test_reserved_prefix_only_applies_to_start(self):
        validate_no_reserved_prefix("MyAWSKey")

    def test_request_size(self):
        validate_request_size(MAX_REQUEST_SIZE)
        with pytest.raises(PayloadTooLargeError) as exc_info:
            validate_request_size(MAX_REQUEST_SIZE + 1)
        assert exc_info.value.actual_size == MAX_REQUEST_SIZE + 1
        assert exc_info.value.max_size == 262144

    def test_payload_too_large_is_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            validate_request_size(10, max_bytes=5)


class TestQueueNameValidation:
    """Test cases for validate_queue_name()."""

    @pytest.mark.parametrize("name", ["a", "orders", "Orders_2024-EU", "x" * 80, "orders.fifo", "y" * 75 + ".fifo"])
    def test_valid_names(self, name):
        validate_queue_name(name)

    def test_too_long(self):
        with pytest.raises(InvalidArgumentError, match="cannot exceed a length of 80"):
            validate_queue_name("x" * 81)

    def test_fifo_suffix_counts_towards_length(self):
        with pytest.raises(InvalidArgumentError, match="cannot exceed a length of 80"):
            validate_queue_name("y" * 76 + ".fifo")

    @pytest.mark.parametrize("name", ["orders.eu", "orders!", "my queue"])
    def test_invalid_characters(self, name):
        with pytest.raises(InvalidArgumentError, match="only alphanumeric characters, underscore"):
            validate_queue_name(name)

    def test_suffix_only_is_blank(self):
        with pytest.raises(InvalidArgumentError, match="non-empty"):
            validate_queue_name(".fifo")

    def test_blank(self):
        with pytest.raises(InvalidArgumentError, match="non-empty"):
            validate_queue_name("")


class TestAttributeNameValidation:
    """Test cases for validate_attribute_name()."""

    @pytest.mark.parametrize("name", ["Priority", "trace.id", "a-b_c.d", "x" * 256])
    def test_valid_names(self, name):
        validate_attribute_name(name)

    def test_double_period_prefix_reports_period_rule(self):
        """'..bad' is rejected by a period rule, not by the character set."""
        with pytest.raises(InvalidArgumentError, match="must not start or end with a period"):
            validate_attribute_name("..bad")

    def test_consecutive_periods_in_middle(self):
        with pytest.raises(InvalidArgumentError, match="periods in succession"):
            validate_attribute_name("trace..id")

    def test_invalid_character(self):
        with pytest.raises(InvalidArgumentError, match="characters in the name are invalid"):
            validate_attribute_name("trace id")

    def test_reserved_prefix(self):
        with pytest.raises(InvalidArgumentError, match="cannot start with AWS or Amazon"):
            validate_attribute_name("aws.region")

    def test_too_long(self):
        with pytest.raises(InvalidArgumentError, match="cannot exceed a length of 256"):
            validate_attribute_name("x" * 257)

    def test_period_is_in_attribute_alphabet(self):
        assert "." in ATTRIBUTE_NAME_CHARACTERS
        assert "." not in QUEUE_NAME_CHARACTERS


class TestMessageIdentifierValidation:
    """Test cases for validate_message_identifier()."""

    @pytest.mark.parametrize("value", ["orders", "tenant:42/eu", "a!#$%&()*+,-./:;<=>?@[]^_`{|}~", "x" * 128])
    def test_valid_identifiers(self, value):
        validate_message_identifier(value)

    def test_too_long(self):
        with pytest.raises(InvalidArgumentError, match="cannot exceed a length of 128"):
            validate_message_identifier("x" * 129, param_name="message_group_id")

    @pytest.mark.parametrize("value", ["with space", "tab\there", "ümlaut"])
    def test_invalid_characters(self, value):
        with pytest.raises(InvalidArgumentError, match="punctuation marks"):
            validate_message_identifier(value)

    def test_blank(self):
        with pytest.raises(InvalidArgumentError, match="message_group_id must be a non-empty string"):
            validate_message_identifier(" ", param_name="message_group_id")


class TestQueueUrlHelpers:
    """Test cases for queue URL validation and parsing."""

    def test_valid_url(self):
        validate_queue_url("https://sqs.eu-west-1.amazonaws.com/123456789012/orders")

    @pytest.mark.parametrize("url", ["", "sqs.eu-west-1.amazonaws.com/1/q", "ftp://host/q", "https://"])
    def test_invalid_url(self, url):
        with pytest.raises(InvalidArgumentError):
            validate_queue_url(url)

    def test_region_from_url(self):
        assert queue_region_from_url("https://sqs.eu-west-1.amazonaws.com/123456789012/orders") == "eu-west-1"
        assert queue_region_from_url("https://sqs.cn-north-1.amazonaws.com.cn/1/q") == "cn-north-1"
        assert queue_region_from_url("http://localhost:4566/000000000000/orders") is None

    def test_name_from_url(self):
        assert queue_name_from_url("https://sqs.us-east-1.amazonaws.com/1/orders.fifo") == "orders.fifo"
        assert queue_name_from_url("http://localhost:4566/000000000000/orders/") == "orders"
